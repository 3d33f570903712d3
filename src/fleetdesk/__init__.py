"""fleetdesk - Async Python client for the FleetDesk fleet-management backend."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetdesk")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetdesk.client import FleetClient
from fleetdesk.config import FleetConfig, StorageBuckets
from fleetdesk.exceptions import (
    FleetApiError,
    FleetAuthenticationError,
    FleetConfigError,
    FleetConsistencyError,
    FleetCooldownError,
    FleetEmailNotConfirmedError,
    FleetError,
    FleetNotFoundError,
    FleetSessionExpiredError,
    FleetStorageError,
    FleetTransportError,
    FleetValidationError,
)
from fleetdesk.formatting import format_tenure, user_initials
from fleetdesk.forms import validate_form
from fleetdesk.models import (
    AuthUser,
    ContactRequest,
    DashboardSnapshot,
    Driver,
    DriverInput,
    FileUpload,
    FuelUpdate,
    FuelUpdateInput,
    FuelUpdatePatch,
    MaintenanceTicket,
    Notification,
    NotificationType,
    PasswordResetRequest,
    Profile,
    ProfileUpdate,
    SignUpRequest,
    SignUpResult,
    TicketInput,
    TicketPatch,
    TicketPriority,
    Vehicle,
    VehicleInput,
)
from fleetdesk.state import AuthEvent, AuthState, NotificationCenter

__all__ = [
    "__version__",
    "AuthEvent",
    "AuthState",
    "AuthUser",
    "ContactRequest",
    "DashboardSnapshot",
    "Driver",
    "DriverInput",
    "FileUpload",
    "FleetApiError",
    "FleetAuthenticationError",
    "FleetClient",
    "FleetConfig",
    "FleetConfigError",
    "FleetConsistencyError",
    "FleetCooldownError",
    "FleetEmailNotConfirmedError",
    "FleetError",
    "FleetNotFoundError",
    "FleetSessionExpiredError",
    "FleetStorageError",
    "FleetTransportError",
    "FleetValidationError",
    "FuelUpdate",
    "FuelUpdateInput",
    "FuelUpdatePatch",
    "MaintenanceTicket",
    "Notification",
    "NotificationCenter",
    "NotificationType",
    "PasswordResetRequest",
    "Profile",
    "ProfileUpdate",
    "SignUpRequest",
    "SignUpResult",
    "StorageBuckets",
    "TicketInput",
    "TicketPatch",
    "TicketPriority",
    "Vehicle",
    "VehicleInput",
    "format_tenure",
    "user_initials",
    "validate_form",
]
