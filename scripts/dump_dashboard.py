#!/usr/bin/env python3
"""Print the dashboard the fleetdesk library computes for an account.

Logs in with credentials from the environment, fetches the vehicle,
driver, ticket and fuel-update tables and prints the resulting
dashboard snapshot.

Usage
-----
Set environment variables and run::

    export FLEETDESK_URL="https://xyz.supabase.co"
    export FLEETDESK_ANON_KEY="..."
    export FLEETDESK_EMAIL="manager@example.com"
    export FLEETDESK_PASSWORD="your-password"
    python scripts/dump_dashboard.py

Options::

    --json               Output as machine-readable JSON
    --output FILE        Write the JSON to FILE instead of stdout
    --sample             Print the built-in demo data set (no login)
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetdesk import DashboardSnapshot, FleetClient, FleetConfig, FleetError  # noqa: E402
from fleetdesk.formatting import format_currency, format_distance  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    return f"\n{'=' * 60}\n  {title}\n{'=' * 60}"


def _render(snapshot: DashboardSnapshot) -> list[str]:
    out: list[str] = []
    out.append(_section("DASHBOARD" + (" (sample data)" if snapshot.is_sample else "")))
    out.append(f"  vehicles  : {snapshot.vehicle_stats.total} (+{snapshot.vehicle_stats.new_this_month} this month)")
    out.append(f"  drivers   : {snapshot.driver_stats.total} (+{snapshot.driver_stats.new_this_month} this month)")
    distance, fuel = snapshot.distance_stats, snapshot.fuel_stats
    out.append(f"  distance  : {format_distance(distance.total)} ({_growth(distance.growth_percentage)})")
    out.append(f"  fuel cost : {format_currency(fuel.total)} ({_growth(fuel.growth_percentage)})")

    out.append(_section("MONTHLY"))
    out.append(f"  {'month':<6} {'fuel':>12} {'maintenance':>14}")
    maintenance = {point.month: point.value for point in snapshot.maintenance_costs}
    for point in snapshot.fuel_consumption:
        out.append(f"  {point.month:<6} {point.value:>12,.1f} {maintenance.get(point.month, 0.0):>14,.2f}")

    out.append(_section("UTILIZATION"))
    for row in snapshot.vehicle_utilization:
        out.append(f"  {row.vehicle:<24} {row.utilization:>6.2f}%")

    out.append(_section("RECENT ACTIVITY"))
    for activity in snapshot.recent_activity:
        when = activity.created_at.isoformat() if activity.created_at else "-"
        cost = format_currency(activity.cost)
        out.append(f"  {when:<32} {activity.vehicle:<20} {activity.distance:>8,.0f} km {cost:>12}")
    return out


def _growth(value: float | None) -> str:
    return "n/a" if value is None else f"{value:+.1f}%"


async def main() -> int:
    parser = argparse.ArgumentParser(description="Print the fleetdesk dashboard snapshot.")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write JSON output to FILE instead of stdout")
    parser.add_argument("--sample", action="store_true", help="Use the built-in demo data set")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        config = FleetConfig.from_env(log_requests=args.verbose)
        async with FleetClient(config) as client:
            if not args.sample:
                await client.login()
            snapshot = await client.get_dashboard(use_sample_data=args.sample)
    except FleetError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    result: dict[str, Any] = snapshot.model_dump(mode="json")
    if args.json_mode or args.output:
        payload = json.dumps(result, indent=2, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    else:
        print("\n".join(_render(snapshot)))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
