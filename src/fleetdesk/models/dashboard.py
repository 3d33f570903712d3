"""Dashboard snapshot models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class CountStat(_Frozen):
    total: int = 0
    new_this_month: int = 0


class TotalStat(_Frozen):
    total: float = 0.0
    growth_percentage: float | None = None
    """Month-over-month change in percent; ``None`` when last month had nothing."""


class MonthlyPoint(_Frozen):
    month: str
    value: float = 0.0


class UtilizationPoint(_Frozen):
    vehicle: str
    utilization: float = Field(default=0.0, ge=0, le=100)


class ActivityRow(_Frozen):
    """One line of the recent activity table (a fuel update)."""

    id: str
    created_at: datetime | None = None
    vehicle: str = ""
    distance: float = 0.0
    cost: float = 0.0


class DashboardSnapshot(_Frozen):
    """Everything the dashboard shows, computed from fetched rows."""

    vehicle_stats: CountStat = Field(default_factory=CountStat)
    driver_stats: CountStat = Field(default_factory=CountStat)
    distance_stats: TotalStat = Field(default_factory=TotalStat)
    fuel_stats: TotalStat = Field(default_factory=TotalStat)
    fuel_consumption: list[MonthlyPoint] = Field(default_factory=list)
    """Litres per month."""
    maintenance_costs: list[MonthlyPoint] = Field(default_factory=list)
    """Ticket cost per month."""
    vehicle_utilization: list[UtilizationPoint] = Field(default_factory=list)
    recent_activity: list[ActivityRow] = Field(default_factory=list)
    is_sample: bool = False
    """Whether this is the built-in demo data set."""
