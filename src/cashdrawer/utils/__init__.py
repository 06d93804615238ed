"""Utility functions for cashdrawer."""

from cashdrawer.utils.date_parser import parse_date
from cashdrawer.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_amount"]
