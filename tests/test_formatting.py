from __future__ import annotations

from datetime import UTC, datetime

import pytest

from fleetdesk.formatting import format_currency, format_distance, format_tenure, tenure_parts, user_initials


class TestTenure:
    def test_whole_units(self) -> None:
        join = datetime(2023, 1, 10, tzinfo=UTC)
        now = datetime(2024, 3, 15, tzinfo=UTC)
        years, months, days = tenure_parts(join, now)
        assert (years, months) == (1, 14)
        assert days == 430
        assert format_tenure(join, now) == "1y 2m 10d"

    def test_partial_month_does_not_count(self) -> None:
        join = datetime(2024, 1, 31, tzinfo=UTC)
        now = datetime(2024, 2, 29, tzinfo=UTC)
        assert tenure_parts(join, now) == (0, 0, 29)
        assert format_tenure(join, now) == "0y 0m 29d"

    def test_unknown_join_date(self) -> None:
        assert format_tenure(None, datetime(2024, 1, 1, tzinfo=UTC)) == "-"

    def test_future_join_date_keeps_sign(self) -> None:
        join = datetime(2024, 1, 11, tzinfo=UTC)
        now = datetime(2024, 1, 1, tzinfo=UTC)
        assert format_tenure(join, now) == "0y 0m -10d"

    def test_naive_datetimes_are_treated_as_utc(self) -> None:
        assert format_tenure(datetime(2024, 1, 1), datetime(2024, 1, 2, tzinfo=UTC)) == "0y 0m 1d"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Jane Manager", "JM"),
        ("  ada   lovelace byron ", "ALB"),
        ("", "U"),
        (None, "U"),
    ],
)
def test_user_initials(name: str | None, expected: str) -> None:
    assert user_initials(name) == expected


def test_amount_formatting() -> None:
    assert format_currency(12789) == "$12,789.00"
    assert format_distance(28345.4) == "28,345 km"
