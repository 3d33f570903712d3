"""Data models for backend rows, requests and derived views."""

from fleetdesk.models._base import Amount, FleetBaseModel, TicketPriority, Timestamp
from fleetdesk.models.dashboard import (
    ActivityRow,
    CountStat,
    DashboardSnapshot,
    MonthlyPoint,
    TotalStat,
    UtilizationPoint,
)
from fleetdesk.models.driver import Driver
from fleetdesk.models.maintenance import FuelUpdate, MaintenanceTicket
from fleetdesk.models.notification import Notification, NotificationType
from fleetdesk.models.profile import Profile
from fleetdesk.models.requests import (
    ContactRequest,
    DriverInput,
    FileUpload,
    FuelUpdateInput,
    FuelUpdatePatch,
    PasswordResetRequest,
    ProfileUpdate,
    SignUpRequest,
    TicketInput,
    TicketPatch,
    VehicleInput,
)
from fleetdesk.models.token import AuthToken, SignUpResult
from fleetdesk.models.user import AuthAccount, AuthUser
from fleetdesk.models.vehicle import Vehicle

__all__ = [
    "ActivityRow",
    "Amount",
    "AuthAccount",
    "AuthToken",
    "AuthUser",
    "ContactRequest",
    "CountStat",
    "DashboardSnapshot",
    "Driver",
    "DriverInput",
    "FileUpload",
    "FleetBaseModel",
    "FuelUpdate",
    "FuelUpdateInput",
    "FuelUpdatePatch",
    "MaintenanceTicket",
    "MonthlyPoint",
    "Notification",
    "NotificationType",
    "PasswordResetRequest",
    "Profile",
    "ProfileUpdate",
    "SignUpRequest",
    "SignUpResult",
    "TicketInput",
    "TicketPatch",
    "TicketPriority",
    "Timestamp",
    "TotalStat",
    "UtilizationPoint",
    "Vehicle",
    "VehicleInput",
]
