"""Exact money values."""

from decimal import Decimal, InvalidOperation

from cashdrawer.domain.errors import (
    ValidationError,
    amount_must_be_positive,
    amount_must_not_be_negative,
)

CENT = Decimal("0.01")


def to_money(value: Decimal | int | float | str, field: str = "Amount") -> Decimal:
    """Convert a value to an exact two-place Decimal.

    Floats go through their shortest string form so 0.1 stays 0.10.

    Raises:
        ValidationError: If the value is not a finite number or needs more
            than two fractional digits
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"{field} must be a number, got {value!r}") from e

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    quantized = amount.quantize(CENT)
    if quantized != amount:
        raise ValidationError(f"{field} cannot have more than two decimal places: {value}")
    return quantized


def positive_money(value: Decimal | int | float | str, field: str = "Amount") -> Decimal:
    amount = to_money(value, field)
    if amount <= 0:
        raise ValidationError(amount_must_be_positive(field))
    return amount


def non_negative_money(value: Decimal | int | float | str, field: str = "Amount") -> Decimal:
    amount = to_money(value, field)
    if amount < 0:
        raise ValidationError(amount_must_not_be_negative(field))
    return amount
