"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENT = Decimal("0.01")


def parse_amount(amount_str: str | int | float | Decimal) -> Decimal:
    """Parse an amount into a Decimal rounded to the cent.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Numbers coming from JSON extraction output are accepted as well; floats
    go through their shortest string form so 0.1 stays 0.10.

    Args:
        amount_str: Amount string or number

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If amount cannot be parsed
    """
    if isinstance(amount_str, bool):
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if isinstance(amount_str, (int, float, Decimal)):
        amount_str = str(amount_str)
    elif not isinstance(amount_str, str):
        raise ValueError(f"Could not parse amount of type {type(amount_str).__name__}")

    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "")

    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if is_negative:
        amount = -amount
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount out of range: '{amount_str}'")


def format_amount(amount: Decimal) -> str:
    """Render an amount for display, e.g. "$1,234.50" or "-$12.00"."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
