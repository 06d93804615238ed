"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from cashdrawer.domain.errors import ValidationError
from cashdrawer.domain.money import to_money


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into an exact two-place Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "-20" (sign is kept; callers decide whether negatives are allowed)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    cleaned = re.sub(r"[$€£¥,\s]", "", amount_str)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValidationError(f"Could not parse amount '{amount_str}'") from e
    return to_money(amount)
