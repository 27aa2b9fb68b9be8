"""Amount parsing and formatting utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "1500"
    - "₹1500.50"
    - "1,50,000" (Indian digit grouping)
    - "150,000.00"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbols, commas and whitespace
    cleaned = re.sub(r"[₹$€£]|Rs\.?|INR", "", amount_str.strip(), flags=re.IGNORECASE)
    cleaned = cleaned.replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount


def parse_positive_amount(amount_str: str) -> Decimal:
    """Parse an amount that must be greater than zero.

    Ledger entries carry their direction in their type, never in the sign.

    Raises:
        ValueError: If the string cannot be parsed or is not positive
    """
    amount = parse_amount(amount_str)
    if amount <= 0:
        raise ValueError(f"Amount must be positive, got {amount}")
    return amount


def format_inr(amount: Decimal) -> str:
    """Format an amount in rupees with Indian digit grouping.

    Examples:
        Decimal("150000") -> "₹1,50,000"
        Decimal("-1234.5") -> "-₹1,234.50"
    """
    quantized = Decimal(amount).quantize(Decimal("0.01"))
    sign = "-" if quantized < 0 else ""
    whole, _, fraction = f"{abs(quantized):.2f}".partition(".")

    # Last three digits, then groups of two
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail])

    if fraction == "00":
        return f"{sign}₹{grouped}"
    return f"{sign}₹{grouped}.{fraction}"
