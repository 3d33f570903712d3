"""Dashboard aggregations over already-fetched rows.

Everything here is a pure function of its inputs; the client fetches the
tables and passes ``now`` so results are reproducible in tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

from fleetdesk._constants import MONTH_LABELS, RECENT_ACTIVITY_LIMIT, UTILIZATION_WINDOW_DAYS
from fleetdesk._normalize import as_utc, parse_timestamp, safe_float
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
from fleetdesk.models.vehicle import Vehicle


def _get(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _amount(row: Any, name: str) -> float:
    value = safe_float(_get(row, name))
    return 0.0 if value is None else value


def _created_at(row: Any) -> datetime | None:
    return parse_timestamp(_get(row, "created_at"))


def month_start(now: datetime) -> datetime:
    now = as_utc(now)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def previous_month_start(now: datetime) -> datetime:
    return month_start(month_start(now) - timedelta(days=1))


def next_month_start(now: datetime) -> datetime:
    return month_start(month_start(now) + timedelta(days=32))


# ------------------------------------------------------------------
# Series
# ------------------------------------------------------------------


def monthly_totals(rows: Iterable[Any], field: str, *, year: int | None = None) -> list[MonthlyPoint]:
    """Sum *field* per calendar month of ``created_at``.

    Always returns twelve points ``Jan`` .. ``Dec``.  Missing values count
    as ``0`` and rows without a parseable ``created_at`` are skipped.  When
    *year* is ``None`` rows from different years share the same bucket.
    """
    totals = [0.0] * 12
    for row in rows:
        created = _created_at(row)
        if created is None:
            continue
        if year is not None and created.year != year:
            continue
        totals[created.month - 1] += _amount(row, field)
    return [MonthlyPoint(month=label, value=value) for label, value in zip(MONTH_LABELS, totals, strict=True)]


def _belongs_to(update: Any, vehicle: Any) -> bool:
    vehicle_id = _get(update, "vehicle_id")
    if vehicle_id:
        return str(vehicle_id) == str(_get(vehicle, "id"))
    return bool(_get(update, "vehicle")) and _get(update, "vehicle") == _get(vehicle, "name")


def vehicle_utilization(
    vehicle: Any,
    fuel_updates: Iterable[Any] | None,
    now: datetime,
    window_days: int = UTILIZATION_WINDOW_DAYS,
) -> float:
    """Percentage of days in the last *window_days* with at least one fuel update.

    Updates are matched by ``vehicle_id`` when present, otherwise by the
    vehicle name.  The result is capped at 100.
    """
    if vehicle is None or not fuel_updates or window_days <= 0:
        return 0.0
    end = as_utc(now)
    start = end - timedelta(days=window_days)
    active_days = {
        created.date()
        for update in fuel_updates
        if _belongs_to(update, vehicle)
        and (created := _created_at(update)) is not None
        and start < created <= end
    }
    return round(min(100.0, len(active_days) / window_days * 100), 2)


def growth_percentage(current: float, previous: float) -> float | None:
    """Relative change in percent; ``None`` when there is no baseline."""
    if previous == 0:
        return None
    return round((current - previous) / previous * 100, 1)


def _sum_between(rows: Iterable[Any], field: str, start: datetime, end: datetime) -> float:
    total = 0.0
    for row in rows:
        created = _created_at(row)
        if created is not None and start <= created < end:
            total += _amount(row, field)
    return total


def _count_since(rows: Iterable[Any], since: datetime) -> int:
    return sum(1 for row in rows if (created := _created_at(row)) is not None and created >= since)


def recent_activity(fuel_updates: Iterable[Any], limit: int = RECENT_ACTIVITY_LIMIT) -> list[ActivityRow]:
    """The *limit* newest fuel updates, newest first."""
    oldest = datetime.min.replace(tzinfo=UTC)
    ordered = sorted(fuel_updates, key=lambda row: _created_at(row) or oldest, reverse=True)
    return [
        ActivityRow(
            id=str(_get(row, "id") or ""),
            created_at=_created_at(row),
            vehicle=str(_get(row, "vehicle") or ""),
            distance=_amount(row, "distance"),
            cost=_amount(row, "cost"),
        )
        for row in ordered[:limit]
    ]


# ------------------------------------------------------------------
# Snapshot
# ------------------------------------------------------------------


def build_dashboard(
    vehicles: Sequence[Vehicle],
    drivers: Sequence[Driver],
    fuel_updates: Sequence[FuelUpdate],
    tickets: Sequence[MaintenanceTicket],
    now: datetime,
) -> DashboardSnapshot:
    """Compute the dashboard from the four tables.

    Distance and fuel totals are sums of the vehicles' running totals;
    their growth percentages compare this month's fuel updates with last
    month's.
    """
    this_month = month_start(now)
    last_month = previous_month_start(now)
    next_month = next_month_start(now)

    distance_growth = growth_percentage(
        _sum_between(fuel_updates, "distance", this_month, next_month),
        _sum_between(fuel_updates, "distance", last_month, this_month),
    )
    cost_growth = growth_percentage(
        _sum_between(fuel_updates, "cost", this_month, next_month),
        _sum_between(fuel_updates, "cost", last_month, this_month),
    )

    return DashboardSnapshot(
        vehicle_stats=CountStat(total=len(vehicles), new_this_month=_count_since(vehicles, this_month)),
        driver_stats=CountStat(total=len(drivers), new_this_month=_count_since(drivers, this_month)),
        distance_stats=TotalStat(
            total=sum(_amount(v, "total_distance") for v in vehicles),
            growth_percentage=distance_growth,
        ),
        fuel_stats=TotalStat(
            total=sum(_amount(v, "total_fuel_cost") for v in vehicles),
            growth_percentage=cost_growth,
        ),
        fuel_consumption=monthly_totals(fuel_updates, "quantity"),
        maintenance_costs=monthly_totals(tickets, "cost"),
        vehicle_utilization=[
            UtilizationPoint(vehicle=v.name, utilization=vehicle_utilization(v, fuel_updates, now)) for v in vehicles
        ],
        recent_activity=recent_activity(fuel_updates),
    )


def _series(values: Sequence[float]) -> list[MonthlyPoint]:
    return [MonthlyPoint(month=label, value=value) for label, value in zip(MONTH_LABELS, values, strict=False)]


def sample_dashboard() -> DashboardSnapshot:
    """Fixed demo data shown when the dashboard is switched to sample mode."""
    return DashboardSnapshot(
        vehicle_stats=CountStat(total=45, new_this_month=2),
        driver_stats=CountStat(total=32, new_this_month=3),
        distance_stats=TotalStat(total=28345, growth_percentage=14),
        fuel_stats=TotalStat(total=12789, growth_percentage=2.5),
        fuel_consumption=_series([5000, 4800, 5200, 5100, 4900, 5300]),
        maintenance_costs=_series([2000, 2200, 1800, 2100, 2300, 2000]),
        vehicle_utilization=[
            UtilizationPoint(vehicle="Truck 1", utilization=85),
            UtilizationPoint(vehicle="Truck 2", utilization=72),
            UtilizationPoint(vehicle="Van 1", utilization=90),
            UtilizationPoint(vehicle="Van 2", utilization=68),
            UtilizationPoint(vehicle="Car 1", utilization=95),
        ],
        recent_activity=[
            ActivityRow(
                id="1",
                created_at=datetime(2023, 10, 1, tzinfo=UTC),
                vehicle="Truck 1",
                distance=150,
                cost=200,
            ),
            ActivityRow(
                id="2",
                created_at=datetime(2023, 10, 2, tzinfo=UTC),
                vehicle="Van 1",
                distance=120,
                cost=180,
            ),
        ],
        is_sample=True,
    )
