"""Tests for amount parsing and money conversion."""

import pytest
from decimal import Decimal

from cashdrawer.domain.errors import ValidationError
from cashdrawer.domain.money import non_negative_money, positive_money, to_money
from cashdrawer.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("1,234.56", Decimal("1234.56")),
        (" 20 ", Decimal("20.00")),
        ("-20", Decimal("-20.00")),
        ("€7.5", Decimal("7.50")),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", "12.3.4"])
def test_parse_amount_invalid(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_parse_amount_rejects_sub_cent_precision():
    with pytest.raises(ValidationError, match="two decimal places"):
        parse_amount("10.001")


def test_to_money_quantizes():
    assert str(to_money(5)) == "5.00"
    assert str(to_money("0.1")) == "0.10"


def test_to_money_float_uses_shortest_repr():
    assert to_money(0.1) == Decimal("0.10")


@pytest.mark.parametrize("raw", [True, "NaN", "Infinity", None])
def test_to_money_rejects_non_numbers(raw):
    with pytest.raises(ValidationError):
        to_money(raw)


def test_positive_money():
    assert positive_money("0.01") == Decimal("0.01")
    with pytest.raises(ValidationError, match="Amount must be greater than zero"):
        positive_money("0")


def test_non_negative_money():
    assert non_negative_money("0") == Decimal("0.00")
    with pytest.raises(ValidationError, match="Opening amount cannot be negative"):
        non_negative_money("-0.01", "Opening amount")
