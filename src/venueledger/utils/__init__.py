"""Utility functions for venueledger."""

from venueledger.utils.date_parser import parse_date, season_for_date, season_date_range
from venueledger.utils.amount_parser import parse_amount, parse_positive_amount, format_inr

__all__ = [
    "parse_date",
    "season_for_date",
    "season_date_range",
    "parse_amount",
    "parse_positive_amount",
    "format_inr",
]
