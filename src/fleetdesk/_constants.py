"""Internal constants shared across the library."""

USER_AGENT = "fleetdesk-python"

AUTH_PREFIX = "/auth/v1"
REST_PREFIX = "/rest/v1"
STORAGE_PREFIX = "/storage/v1"

# ------------------------------------------------------------------
# Tables
# ------------------------------------------------------------------

TABLE_VEHICLES = "vehicles"
TABLE_DRIVERS = "drivers"
TABLE_TICKETS = "tickets"
TABLE_FUEL_UPDATES = "fuel_updates"
TABLE_PROFILES = "profiles"

# ------------------------------------------------------------------
# Error codes
# ------------------------------------------------------------------

# PostgREST / GoTrue codes meaning "the JWT is no longer valid".
SESSION_EXPIRED_CODES: frozenset[str] = frozenset({"PGRST301", "PGRST303", "bad_jwt", "session_not_found"})
EMAIL_NOT_CONFIRMED_CODES: frozenset[str] = frozenset({"email_not_confirmed"})
NOT_FOUND_CODES: frozenset[str] = frozenset({"PGRST116", "user_not_found", "not_found"})

# ------------------------------------------------------------------
# Client-side timings
# ------------------------------------------------------------------

#: Seconds a caller must wait between verification email resends.
RESEND_COOLDOWN_SECONDS: float = 30.0

#: Read notifications are dropped this long after they were created.
NOTIFICATION_READ_RETENTION_SECONDS: float = 30 * 60

#: Cache-Control max-age sent with uploaded images.
IMAGE_CACHE_CONTROL = "3600"

#: Rows shown in the dashboard "recent activity" table.
RECENT_ACTIVITY_LIMIT = 5

#: Window used for the vehicle utilization percentage.
UTILIZATION_WINDOW_DAYS = 30

MONTH_LABELS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
