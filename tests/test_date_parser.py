"""Tests for date parsing and season utilities."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from venueledger.utils.date_parser import parse_date, season_date_range, season_for_date


def test_parse_absolute_date():
    """Test parsing ISO dates."""
    assert parse_date("2025-01-02") == date(2025, 1, 2)


def test_parse_day_first():
    """Test that ambiguous dates read day first."""
    assert parse_date("02/01/2025") == date(2025, 1, 2)


def test_parse_written_date():
    assert parse_date("22 Nov 2025") == date(2025, 11, 22)


def test_parse_today():
    assert parse_date(" Today ") == date.today()


def test_parse_yesterday():
    assert parse_date("yesterday") == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    assert parse_date("tomorrow") == date.today() + timedelta(days=1)


def test_parse_in_days():
    """Test parsing 'in N days'."""
    assert parse_date("in 30 days") == date.today() + timedelta(days=30)


def test_parse_weeks_ago():
    assert parse_date("2 weeks ago") == date.today() - timedelta(weeks=2)


def test_parse_in_one_month():
    assert parse_date("in 1 month") == date.today() + relativedelta(months=1)


def test_parse_invalid():
    """Test that unparseable input raises ValueError."""
    with pytest.raises(ValueError):
        parse_date("not a date")


class TestSeasons:
    """Tests for season helpers."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (date(2025, 4, 1), "2025-26"),
            (date(2025, 11, 22), "2025-26"),
            (date(2026, 3, 31), "2025-26"),
            (date(2026, 4, 1), "2026-27"),
            (date(1999, 6, 1), "1999-00"),
        ],
    )
    def test_season_for_date(self, value, expected):
        assert season_for_date(value) == expected

    def test_season_date_range(self):
        """Test that a season runs April to March inclusive."""
        assert season_date_range("2025-26") == (date(2025, 4, 1), date(2026, 3, 31))

    def test_season_date_range_leap_year(self):
        assert season_date_range("2023-24") == (date(2023, 4, 1), date(2024, 3, 31))

    @pytest.mark.parametrize("label", ["2025", "2025-27", "25-26", "All"])
    def test_invalid_season(self, label):
        with pytest.raises(ValueError, match="Invalid season"):
            season_date_range(label)
