"""Utility functions for dayrec."""

from dayrec.utils.date_parser import parse_date, parse_month, month_bounds
from dayrec.utils.amount_parser import parse_amount, format_amount

__all__ = ["parse_date", "parse_month", "month_bounds", "parse_amount", "format_amount"]
