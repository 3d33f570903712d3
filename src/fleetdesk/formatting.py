"""Display helpers for durations, initials and amounts."""

from __future__ import annotations

from datetime import datetime

from fleetdesk._normalize import as_utc


def _whole_months_between(start: datetime, end: datetime) -> int:
    months = (end.year - start.year) * 12 + (end.month - start.month)
    # A partial last month does not count.
    if months > 0 and (end.day, end.time()) < (start.day, start.time()):
        months -= 1
    elif months < 0 and (end.day, end.time()) > (start.day, start.time()):
        months += 1
    return months


def tenure_parts(join_date: datetime, now: datetime) -> tuple[int, int, int]:
    """Return whole ``(years, months, days)`` elapsed between the two instants.

    Each unit is an independent whole-unit difference, as a calendar
    library would compute them; they are not a decomposition.
    """
    start = as_utc(join_date)
    end = as_utc(now)
    days = int((end - start).total_seconds() // 86400) if end >= start else -int((start - end).total_seconds() // 86400)
    months = _whole_months_between(start, end)
    years = int(months / 12)
    return years, months, days


def format_tenure(join_date: datetime | None, now: datetime) -> str:
    """Format how long a driver has been with the fleet, e.g. ``"1y 2m 5d"``.

    Months are shown modulo 12 and days modulo 30.  Returns ``"-"`` when
    the join date is unknown.
    """
    if join_date is None:
        return "-"
    years, months, days = tenure_parts(join_date, now)
    return f"{years}y {_js_mod(months, 12)}m {_js_mod(days, 30)}d"


def _js_mod(value: int, modulus: int) -> int:
    # Remainder keeps the sign of the dividend (future join dates stay negative).
    remainder = abs(value) % modulus
    return -remainder if value < 0 else remainder


def user_initials(name: str | None) -> str:
    """Initials for an avatar placeholder; ``"U"`` when the name is unknown."""
    if not name or not name.strip():
        return "U"
    return "".join(part[0] for part in name.split() if part).upper()


def format_currency(amount: float) -> str:
    return f"${amount:,.2f}"


def format_distance(km: float) -> str:
    return f"{km:,.0f} km"
