"""Domain layer for venueledger.

Only the pure derivation helpers are re-exported here. Import
``venueledger.domain.ledger.LedgerStore`` directly; it depends on the
storage layer, which itself imports the domain entities.
"""

from venueledger.domain.balances import apply_booking_expenses, booking_balance, derive_booking_expenses
from venueledger.domain.seasons import available_seasons
from venueledger.domain.transactions import merge_transactions

__all__ = [
    "apply_booking_expenses",
    "booking_balance",
    "derive_booking_expenses",
    "available_seasons",
    "merge_transactions",
]
