"""Season reporting helpers."""

from typing import Iterable

from venueledger.domain.entities import Booking

ALL_SEASONS = "All"

# Seasons offered even before any booking uses them
BASELINE_SEASONS = ("2024-25", "2025-26", "2026-27")

DEFAULT_SEASON = "2025-26"


def available_seasons(bookings: Iterable[Booking]) -> list[str]:
    """Return the distinct seasons across bookings plus the baseline set.

    The result is sorted ascending with the "All" filter value prepended.
    """
    seasons = {booking.season for booking in bookings if booking.season}
    seasons.update(BASELINE_SEASONS)
    return [ALL_SEASONS, *sorted(seasons)]


def filter_bookings_by_season(bookings: Iterable[Booking], season: str) -> list[Booking]:
    """Return bookings in ``season``; "All" matches every booking."""
    if season == ALL_SEASONS:
        return list(bookings)
    return [booking for booking in bookings if booking.season == season]
