from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from fleetdesk.dashboard import (
    build_dashboard,
    growth_percentage,
    monthly_totals,
    next_month_start,
    previous_month_start,
    recent_activity,
    sample_dashboard,
    vehicle_utilization,
)
from fleetdesk.models.driver import Driver
from fleetdesk.models.maintenance import FuelUpdate, MaintenanceTicket
from fleetdesk.models.vehicle import Vehicle

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


def _fuel(vehicle: str, created_at: datetime, **values: object) -> FuelUpdate:
    return FuelUpdate.model_validate({"vehicle": vehicle, "created_at": created_at.isoformat(), **values})


# ------------------------------------------------------------------
# Month helpers
# ------------------------------------------------------------------


def test_previous_and_next_month_cross_year_boundary() -> None:
    january = datetime(2026, 1, 20, tzinfo=UTC)
    assert previous_month_start(january) == datetime(2025, 12, 1, tzinfo=UTC)
    assert next_month_start(datetime(2025, 12, 31, 23, 59, tzinfo=UTC)) == datetime(2026, 1, 1, tzinfo=UTC)


# ------------------------------------------------------------------
# monthly_totals
# ------------------------------------------------------------------


class TestMonthlyTotals:
    def test_always_twelve_labelled_buckets(self) -> None:
        points = monthly_totals([], "cost")
        assert [p.month for p in points][:3] == ["Jan", "Feb", "Mar"]
        assert len(points) == 12
        assert points[-1].month == "Dec"
        assert all(p.value == 0 for p in points)

    def test_sums_by_month_and_treats_missing_as_zero(self) -> None:
        rows = [
            {"created_at": "2026-01-05T10:00:00Z", "cost": 10},
            {"created_at": "2026-01-28T10:00:00Z", "cost": "2.5"},
            {"created_at": "2026-03-01T00:00:00Z", "cost": None},
            {"created_at": "2026-03-02T00:00:00Z"},
            {"created_at": None, "cost": 99},
        ]
        points = monthly_totals(rows, "cost")
        assert points[0].value == pytest.approx(12.5)
        assert points[2].value == 0

    def test_years_share_buckets_unless_filtered(self) -> None:
        rows = [
            {"created_at": "2025-02-01T00:00:00Z", "quantity": 3},
            {"created_at": "2026-02-01T00:00:00Z", "quantity": 4},
        ]
        assert monthly_totals(rows, "quantity")[1].value == 7
        assert monthly_totals(rows, "quantity", year=2026)[1].value == 4


# ------------------------------------------------------------------
# vehicle_utilization
# ------------------------------------------------------------------


class TestVehicleUtilization:
    def test_counts_distinct_days_inside_window(self) -> None:
        vehicle = Vehicle(id="1", name="Truck 1")
        updates = [
            _fuel("Truck 1", NOW - timedelta(days=1)),
            _fuel("Truck 1", NOW - timedelta(days=1, hours=2)),
            _fuel("Truck 1", NOW - timedelta(days=3)),
            _fuel("Truck 1", NOW - timedelta(days=45)),
            _fuel("Van 1", NOW - timedelta(days=2)),
        ]
        assert vehicle_utilization(vehicle, updates, NOW) == pytest.approx(6.67)

    def test_prefers_vehicle_id_over_name(self) -> None:
        vehicle = Vehicle(id="7", name="Truck 1")
        updates = [
            _fuel("Truck 1", NOW - timedelta(days=1), vehicle_id=8),
            _fuel("Renamed", NOW - timedelta(days=2), vehicle_id=7),
        ]
        assert vehicle_utilization(vehicle, updates, NOW, window_days=10) == pytest.approx(10.0)

    def test_capped_at_one_hundred(self) -> None:
        vehicle = Vehicle(id="1", name="Car")
        # Three calendar dates fall inside a two-day window.
        updates = [_fuel("Car", NOW - timedelta(hours=h)) for h in (0, 12, 24, 47)]
        assert vehicle_utilization(vehicle, updates, NOW, window_days=2) == 100.0

    def test_no_updates_or_no_vehicle(self) -> None:
        assert vehicle_utilization(Vehicle(id="1", name="Car"), [], NOW) == 0.0
        assert vehicle_utilization(None, [_fuel("Car", NOW)], NOW) == 0.0


def test_growth_percentage() -> None:
    assert growth_percentage(150, 100) == 50.0
    assert growth_percentage(50, 200) == -75.0
    assert growth_percentage(10, 0) is None


def test_recent_activity_newest_first_and_limited() -> None:
    updates = [_fuel("Truck 1", NOW - timedelta(days=d), id=d, distance=d * 10) for d in range(8)]
    rows = recent_activity(updates)
    assert [row.id for row in rows] == ["0", "1", "2", "3", "4"]
    assert rows[1].distance == 10


# ------------------------------------------------------------------
# build_dashboard
# ------------------------------------------------------------------


def test_build_dashboard_totals_and_growth() -> None:
    vehicles = [
        Vehicle.model_validate(
            {
                "id": 1,
                "name": "Truck 1",
                "created_at": "2026-03-02T00:00:00Z",
                "total_distance": 500,
                "total_fuel_cost": 200,
            }
        ),
        Vehicle.model_validate(
            {"id": 2, "name": "Van 1", "created_at": "2025-11-02T00:00:00Z", "total_distance": None},
        ),
    ]
    drivers = [Driver.model_validate({"id": 1, "name": "Sam", "created_at": "2026-03-10T00:00:00Z"})]
    fuel_updates = [
        _fuel("Truck 1", datetime(2026, 3, 10, tzinfo=UTC), distance=300, cost=120, quantity=30),
        _fuel("Truck 1", datetime(2026, 2, 10, tzinfo=UTC), distance=200, cost=80, quantity=20),
    ]
    tickets = [MaintenanceTicket.model_validate({"vehicle": "Van 1", "cost": 55, "created_at": "2026-02-20T00:00:00Z"})]

    snapshot = build_dashboard(vehicles, drivers, fuel_updates, tickets, NOW)

    assert snapshot.vehicle_stats.total == 2
    assert snapshot.vehicle_stats.new_this_month == 1
    assert snapshot.driver_stats.new_this_month == 1
    assert snapshot.distance_stats.total == 500
    assert snapshot.distance_stats.growth_percentage == 50.0
    assert snapshot.fuel_stats.total == 200
    assert snapshot.fuel_stats.growth_percentage == 50.0
    assert snapshot.fuel_consumption[2].value == 30
    assert snapshot.maintenance_costs[1].value == 55
    assert [p.vehicle for p in snapshot.vehicle_utilization] == ["Truck 1", "Van 1"]
    assert snapshot.vehicle_utilization[1].utilization == 0.0
    assert len(snapshot.recent_activity) == 2
    assert snapshot.is_sample is False


def test_build_dashboard_empty_tables() -> None:
    snapshot = build_dashboard([], [], [], [], NOW)
    assert snapshot.vehicle_stats.total == 0
    assert snapshot.distance_stats.growth_percentage is None
    assert snapshot.vehicle_utilization == []


def test_sample_dashboard_is_flagged() -> None:
    snapshot = sample_dashboard()
    assert snapshot.is_sample is True
    assert snapshot.vehicle_stats.total == 45
    assert snapshot.distance_stats.growth_percentage == 14
