"""Vendor registry helpers."""

import uuid
from typing import Iterable, Optional, Sequence

from venueledger.domain.entities import ExpenseCategory, Vendor

OTHER_CATEGORY_NAME = "Other"
OTHER_CATEGORY_ID = "other"


def find_vendor(vendors: Iterable[Vendor], name: str) -> Optional[Vendor]:
    """Find a vendor by name, ignoring case."""
    wanted = name.strip().lower()
    for vendor in vendors:
        if vendor.name.lower() == wanted:
            return vendor
    return None


def fallback_category_id(categories: Sequence[ExpenseCategory]) -> str:
    """Return the ID of the category named "Other", or ``"other"``."""
    for category in categories:
        if category.name == OTHER_CATEGORY_NAME:
            return category.category_id
    return OTHER_CATEGORY_ID


def find_or_create_vendor(
    vendors: Sequence[Vendor],
    name: str,
    categories: Sequence[ExpenseCategory],
    category_id: Optional[str] = None,
) -> tuple[Vendor, bool]:
    """Resolve a vendor name against the known vendors.

    Args:
        vendors: Known vendors
        name: Vendor name cited by an expense
        categories: Known expense categories (for the "Other" fallback)
        category_id: Category for a newly created vendor

    Returns:
        Tuple of (vendor, created). When ``created`` is True the vendor is
        new and the caller is responsible for storing it.
    """
    existing = find_vendor(vendors, name)
    if existing is not None:
        return existing, False

    vendor = Vendor(
        vendor_id=f"v-{uuid.uuid4().hex[:12]}",
        name=name.strip(),
        category_id=category_id or fallback_category_id(categories),
    )
    return vendor, True
