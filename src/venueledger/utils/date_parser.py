"""Date parsing and season utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Seasons run April to March, e.g. "2025-26" covers 2025-04-01..2026-03-31
SEASON_START_MONTH = 4

_SEASON_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2025-11-22", "22 Nov 2025", etc.
    - Relative dates: "today", "yesterday", "tomorrow"
    - Offsets: "in 3 days", "2 weeks ago", "in 1 month"

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    offset = re.match(r"^(?:in (\d+) (day|week|month)s?|(\d+) (day|week|month)s? ago)$", date_str)
    if offset:
        if offset.group(1):
            count, unit, direction = int(offset.group(1)), offset.group(2), 1
        else:
            count, unit, direction = int(offset.group(3)), offset.group(4), -1
        delta = relativedelta(**{f"{unit}s": count * direction})
        return today + delta

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    # Day first, as dates are written on Indian invoices
    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def season_for_date(value: date) -> str:
    """Return the season label a date falls in.

    Examples:
        date(2025, 11, 22) -> "2025-26"
        date(2026, 2, 1) -> "2025-26"
    """
    start_year = value.year if value.month >= SEASON_START_MONTH else value.year - 1
    return f"{start_year}-{(start_year + 1) % 100:02d}"


def season_date_range(season: str) -> tuple[date, date]:
    """Get start and end dates for a season label.

    Args:
        season: Season label like "2025-26"

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If the label is not of the form YYYY-YY with consecutive years
    """
    match = _SEASON_PATTERN.match(season.strip())
    if not match:
        raise ValueError(f"Invalid season '{season}'. Expected a label like 2025-26")

    start_year = int(match.group(1))
    if (start_year + 1) % 100 != int(match.group(2)):
        raise ValueError(f"Invalid season '{season}': years must be consecutive")

    start_date = date(start_year, SEASON_START_MONTH, 1)
    end_date = start_date + relativedelta(years=1) - timedelta(days=1)
    return (start_date, end_date)
