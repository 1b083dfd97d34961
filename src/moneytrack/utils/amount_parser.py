"""Amount parsing utilities."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import re

from moneytrack.domain.errors import InvalidAmountError
from moneytrack.domain.ledger import CENT


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-typed amount into a Decimal rounded to cents.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "€ 12"

    Signs are rejected: direction comes from the transaction type, so the
    amount itself must be positive.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        InvalidAmountError: If the string is empty, signed or not a number
    """
    if not amount_str or not amount_str.strip():
        raise InvalidAmountError("Empty amount string")

    cleaned = re.sub(r"[$€£¥,\s]", "", amount_str.strip())
    if cleaned.startswith(("-", "+")) or (cleaned.startswith("(") and cleaned.endswith(")")):
        raise InvalidAmountError(
            f"Amount '{amount_str}' must be positive; use the transaction type for direction"
        )

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidAmountError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise InvalidAmountError(f"Amount must be a positive number, got '{amount_str}'")
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise InvalidAmountError(f"Amount must be at least 0.01, got '{amount_str}'")
    return amount


def format_amount(amount: Decimal) -> str:
    """Render an amount with two decimals and thousands separators."""
    return f"{amount:,.2f}"
