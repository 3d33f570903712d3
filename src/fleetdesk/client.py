"""High-level async client for the FleetDesk backend."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

import aiohttp

from fleetdesk._api import auth as _auth_api
from fleetdesk._api import tables as _tables_api
from fleetdesk._client import account as _account
from fleetdesk._client import ledger as _ledger
from fleetdesk._client import records as _records
from fleetdesk._constants import RESEND_COOLDOWN_SECONDS, TABLE_PROFILES
from fleetdesk._normalize import to_iso_utc
from fleetdesk._transport import RestTransport
from fleetdesk.config import FleetConfig
from fleetdesk.dashboard import build_dashboard, sample_dashboard
from fleetdesk.exceptions import (
    FleetAuthenticationError,
    FleetCooldownError,
    FleetError,
    FleetSessionExpiredError,
)
from fleetdesk.forms import coerce_form
from fleetdesk.models.dashboard import DashboardSnapshot
from fleetdesk.models.driver import Driver
from fleetdesk.models.maintenance import FuelUpdate, MaintenanceTicket
from fleetdesk.models.profile import Profile
from fleetdesk.models.requests import (
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
from fleetdesk.session import DEFAULT_SESSION_TTL, Session
from fleetdesk.state.auth import AuthListener, AuthState
from fleetdesk.state.events import AuthEvent
from fleetdesk.state.notifications import NotificationCenter

_logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_AUTHENTICATED_MESSAGE = "User not authenticated"


class FleetClient:
    """Async client for the FleetDesk backend.

    Usage::

        async with FleetClient(config) as client:
            await client.login("manager@example.com", "secret")
            vehicles = await client.list_vehicles()

    When ``config.email`` and ``config.password`` are set, the first call
    that needs a session logs in on its own.
    """

    def __init__(
        self,
        config: FleetConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: RestTransport | None = None
        self._session: Session | None = None
        self._clock = clock
        self._last_resend: float | None = None
        self.auth_state = AuthState()
        self.notifications = NotificationCenter()

    @property
    def config(self) -> FleetConfig:
        return self._config

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def user(self) -> AuthUser | None:
        return self.auth_state.user

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None and self.auth_state.is_authenticated

    def on_auth_change(self, listener: AuthListener) -> Callable[[], None]:
        """Subscribe to sign-in, sign-out and profile updates."""
        return self.auth_state.subscribe(listener)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = RestTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def _install_token(self, token: AuthToken) -> Session:
        ttls = [ttl for ttl in (self._config.session_ttl, token.expires_in) if ttl and ttl > 0]
        self._session = Session(
            user_id=token.user.id,
            email=token.user.email,
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            ttl=min(ttls) if ttls else DEFAULT_SESSION_TTL,
        )
        return self._session

    async def _load_user(self, account: AuthAccount) -> AuthUser:
        """Merge the auth account with its profile; a missing profile is tolerated."""
        profile: Profile | None = None
        try:
            profile = await _account.fetch_profile(self, account.id)
        except FleetError:
            _logger.warning("Profile fetch failed for user %s; using auth metadata", account.id, exc_info=True)
        return AuthUser.from_account(account, profile)

    async def login(self, email: str | None = None, password: str | None = None) -> AuthUser:
        """Sign in with email and password (defaults to the configured credentials).

        Raises
        ------
        FleetEmailNotConfirmedError
            The account exists but its email is not verified yet; see
            :meth:`resend_verification`.
        FleetAuthenticationError
            Wrong credentials or no credentials available.
        """
        email = email if email is not None else self._config.email
        password = password if password is not None else self._config.password
        if not email or not password:
            raise FleetAuthenticationError("Email and password are required")

        transport = self._require_transport()
        token = await _auth_api.password_grant(transport, email, password)
        self._install_token(token)
        user = await self._load_user(token.user)
        self.auth_state.set_user(AuthEvent.SIGNED_IN, user)
        _logger.info("Signed in as %s", token.user.id)
        return user

    async def refresh_session(self) -> Session:
        """Exchange the refresh token for a new access token."""
        if self._session is None or not self._session.can_refresh:
            raise FleetAuthenticationError(NOT_AUTHENTICATED_MESSAGE)
        token = await _auth_api.refresh_grant(self._require_transport(), self._session.refresh_token)
        _logger.debug("Session refreshed for user %s", token.user.id)
        return self._install_token(token)

    async def ensure_session(self) -> Session:
        """Return an active session, refreshing or re-authenticating if expired.

        Raises
        ------
        FleetAuthenticationError
            ``"User not authenticated"`` when there is no session that can
            be refreshed and no configured credentials.
        """
        if self._session is not None and not self._session.is_expired:
            return self._session

        if self._session is not None and self._session.can_refresh:
            try:
                return await self.refresh_session()
            except FleetAuthenticationError:
                _logger.info("Refresh token rejected; session dropped")
                self._session = None

        if self._config.has_credentials:
            await self.login()
            if self._session is None:
                raise FleetAuthenticationError(NOT_AUTHENTICATED_MESSAGE)
            return self._session

        if self.auth_state.is_authenticated:
            self.auth_state.clear()
        raise FleetAuthenticationError(NOT_AUTHENTICATED_MESSAGE)

    def invalidate_session(self) -> None:
        """Force session invalidation (next call will re-authenticate)."""
        self._session = None

    def _expire_session(self) -> None:
        if self._session is not None:
            self._session = self._session.model_copy(update={"ttl": 0.0})

    async def register(self, request: SignUpRequest | Mapping[str, Any]) -> SignUpResult:
        """Create an account and its profile row.

        If the profile cannot be written, the new auth account is deleted
        through the admin API (when a service-role key is configured) and
        the original error is re-raised.
        """
        form = coerce_form(SignUpRequest, request)
        transport = self._require_transport()
        result = await _auth_api.sign_up(
            transport,
            form.email,
            form.password,
            metadata={"name": form.name, "role": form.role},
        )
        if result.token is not None:
            self._install_token(result.token)

        now = to_iso_utc(datetime.now(UTC))
        profile_row = {
            "user_id": result.user.id,
            "name": form.name,
            "email": form.email,
            "role": form.role,
            "company": form.organization or None,
            "created_at": now,
            "updated_at": now,
        }
        try:
            await _tables_api.insert_rows(transport, self._session, TABLE_PROFILES, [profile_row])
        except FleetError:
            await self._discard_account(result.user.id)
            self._session = None
            raise

        _logger.info("Registered user %s", result.user.id)
        if result.token is not None:
            user = await self._load_user(result.user)
            self.auth_state.set_user(AuthEvent.SIGNED_IN, user)
        return result

    async def _discard_account(self, user_id: str) -> None:
        key = self._config.service_role_key
        if not key:
            _logger.warning("Profile creation failed; auth user %s left behind (no service role key)", user_id)
            return
        try:
            await _auth_api.admin_delete_user(self._require_transport(), user_id, service_role_key=key)
            _logger.info("Deleted auth user %s after failed profile creation", user_id)
        except FleetError:
            _logger.warning("Could not delete orphaned auth user %s", user_id, exc_info=True)

    async def logout(self) -> None:
        """Revoke the session and clear local auth state."""
        session = self._session
        try:
            if session is not None:
                await _auth_api.sign_out(self._require_transport(), session)
        except FleetAuthenticationError:
            _logger.debug("Server-side sign out rejected; clearing local session", exc_info=True)
        finally:
            self._session = None
            self.auth_state.clear()
        _logger.info("Signed out")

    async def reset_password(self, email: str) -> None:
        """Send a password recovery mail linking to ``<site_url>/reset-password``."""
        await _auth_api.recover(
            self._require_transport(),
            email,
            redirect_to=f"{self._config.site_url}/reset-password",
        )

    async def get_account(self) -> AuthAccount:
        """Fetch the signed-in auth account as the server currently sees it."""

        async def _fetch() -> AuthAccount:
            session = await self.ensure_session()
            return await _auth_api.get_user(self._require_transport(), session)

        return await self._call_with_reauth(_fetch)

    async def update_password(self, request: PasswordResetRequest | Mapping[str, Any]) -> None:
        form = coerce_form(PasswordResetRequest, request)

        async def _update() -> None:
            session = await self.ensure_session()
            await _auth_api.update_user(self._require_transport(), session, password=form.new_password)

        await self._call_with_reauth(_update)
        _logger.info("Password updated")

    async def resend_verification(self, email: str) -> None:
        """Resend the sign-up confirmation mail.

        Raises
        ------
        FleetCooldownError
            When called again within the cooldown after a successful resend.
        """
        now = self._clock()
        if self._last_resend is not None:
            elapsed = now - self._last_resend
            if elapsed < RESEND_COOLDOWN_SECONDS:
                retry_after = RESEND_COOLDOWN_SECONDS - elapsed
                raise FleetCooldownError(
                    f"Resend verification available in {int(retry_after) + 1} seconds",
                    retry_after=retry_after,
                )
        await _auth_api.resend_signup(self._require_transport(), email)
        self._last_resend = self._clock()

    def resend_cooldown_remaining(self) -> float:
        if self._last_resend is None:
            return 0.0
        return max(0.0, RESEND_COOLDOWN_SECONDS - (self._clock() - self._last_resend))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> RestTransport:
        if self._transport is None:
            raise FleetError("Client not initialized. Use 'async with FleetClient(...) as client:'")
        return self._transport

    async def _require_user_id(self) -> str:
        session = await self.ensure_session()
        if not session.user_id:
            raise FleetAuthenticationError(NOT_AUTHENTICATED_MESSAGE)
        return session.user_id

    async def _call_with_reauth(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run an API call, retrying once on session expiry."""
        try:
            return await fn()
        except FleetSessionExpiredError:
            _logger.debug("Access token rejected; refreshing and retrying once")
            self._expire_session()
            await self.ensure_session()
            return await fn()

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def get_profile(self) -> Profile:
        return await _account.get_profile(self)

    async def update_profile(self, update: ProfileUpdate | Mapping[str, Any]) -> Profile:
        return await _account.update_profile(self, update)

    async def upload_avatar(self, data: bytes, filename: str, content_type: str | None = None) -> str:
        return await _account.upload_avatar(
            self,
            FileUpload(data=data, filename=filename, content_type=content_type),
        )

    async def remove_avatar(self) -> Profile:
        return await _account.remove_avatar(self)

    async def delete_account(self) -> None:
        await _account.delete_account(self)

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    async def list_vehicles(self) -> list[Vehicle]:
        return await _records.list_records(self, _records.VEHICLES)

    async def get_vehicle(self, vehicle_id: str) -> Vehicle:
        return await _records.get_record(self, _records.VEHICLES, vehicle_id)

    async def add_vehicle(
        self,
        data: VehicleInput | Mapping[str, Any],
        image: FileUpload | None = None,
    ) -> Vehicle:
        return await _records.add_record(self, _records.VEHICLES, data, image)

    async def update_vehicle(
        self,
        vehicle_id: str,
        data: VehicleInput | Mapping[str, Any],
        image: FileUpload | None = None,
    ) -> Vehicle:
        return await _records.update_record(self, _records.VEHICLES, vehicle_id, data, image)

    async def delete_vehicle(self, vehicle_id: str) -> None:
        await _records.delete_record(self, _records.VEHICLES, vehicle_id)

    # ------------------------------------------------------------------
    # Drivers
    # ------------------------------------------------------------------

    async def list_drivers(self) -> list[Driver]:
        return await _records.list_records(self, _records.DRIVERS)

    async def get_driver(self, driver_id: str) -> Driver:
        return await _records.get_record(self, _records.DRIVERS, driver_id)

    async def add_driver(
        self,
        data: DriverInput | Mapping[str, Any],
        image: FileUpload | None = None,
    ) -> Driver:
        return await _records.add_record(self, _records.DRIVERS, data, image)

    async def update_driver(
        self,
        driver_id: str,
        data: DriverInput | Mapping[str, Any],
        image: FileUpload | None = None,
    ) -> Driver:
        return await _records.update_record(self, _records.DRIVERS, driver_id, data, image)

    async def delete_driver(self, driver_id: str) -> None:
        await _records.delete_record(self, _records.DRIVERS, driver_id)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def list_tickets(self) -> list[MaintenanceTicket]:
        return await _ledger.list_tickets(self)

    async def add_ticket(self, data: TicketInput | Mapping[str, Any]) -> MaintenanceTicket:
        return await _ledger.add_ticket(self, data)

    async def edit_ticket(self, ticket_id: str, data: TicketPatch | Mapping[str, Any]) -> MaintenanceTicket:
        return await _ledger.edit_ticket(self, ticket_id, data)

    async def delete_ticket(self, ticket_id: str) -> MaintenanceTicket:
        return await _ledger.delete_ticket(self, ticket_id)

    async def list_fuel_updates(self) -> list[FuelUpdate]:
        return await _ledger.list_fuel_updates(self)

    async def add_fuel_update(self, data: FuelUpdateInput | Mapping[str, Any]) -> FuelUpdate:
        return await _ledger.add_fuel_update(self, data)

    async def edit_fuel_update(
        self,
        fuel_update_id: str,
        data: FuelUpdatePatch | Mapping[str, Any],
    ) -> FuelUpdate:
        return await _ledger.edit_fuel_update(self, fuel_update_id, data)

    async def delete_fuel_update(self, fuel_update_id: str) -> FuelUpdate:
        return await _ledger.delete_fuel_update(self, fuel_update_id)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    async def get_dashboard(
        self,
        *,
        now: datetime | None = None,
        use_sample_data: bool = False,
    ) -> DashboardSnapshot:
        """Fetch the four tables and compute the dashboard.

        With ``use_sample_data`` the fixed demo data set is returned
        without touching the backend.
        """
        if use_sample_data:
            return sample_dashboard()
        vehicles = await self.list_vehicles()
        drivers = await self.list_drivers()
        fuel_updates = await self.list_fuel_updates()
        tickets = await self.list_tickets()
        return build_dashboard(vehicles, drivers, fuel_updates, tickets, now or datetime.now(UTC))
