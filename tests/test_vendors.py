"""Tests for vendor registry helpers."""

from venueledger.domain.entities import ExpenseCategory, Vendor
from venueledger.domain.vendors import (
    fallback_category_id,
    find_or_create_vendor,
    find_vendor,
)

VENDORS = [Vendor("v-1", "Shree Tent House", "decoration")]
CATEGORIES = [ExpenseCategory("decoration", "Decoration"), ExpenseCategory("misc", "Other")]


def test_find_vendor_ignores_case_and_whitespace():
    assert find_vendor(VENDORS, "  shree TENT house ") == VENDORS[0]
    assert find_vendor(VENDORS, "Acme") is None


def test_existing_vendor_not_created():
    """Test that a case-insensitive match returns the existing vendor."""
    vendor, created = find_or_create_vendor(VENDORS, "SHREE TENT HOUSE", CATEGORIES)

    assert vendor is VENDORS[0]
    assert created is False


def test_new_vendor_uses_given_category():
    vendor, created = find_or_create_vendor(VENDORS, " Acme ", CATEGORIES, "decoration")

    assert created is True
    assert vendor.name == "Acme"
    assert vendor.category_id == "decoration"
    assert vendor.vendor_id.startswith("v-")


def test_new_vendor_falls_back_to_other_category():
    """Test that the category named "Other" is used when none is given."""
    vendor, created = find_or_create_vendor(VENDORS, "Acme", CATEGORIES)

    assert created is True
    assert vendor.category_id == "misc"


def test_fallback_category_without_other():
    assert fallback_category_id([ExpenseCategory("decoration", "Decoration")]) == "other"
