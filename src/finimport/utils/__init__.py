"""Utility functions for finimport."""

from finimport.utils.date_parser import parse_date, translate_date_format, get_month_range
from finimport.utils.amount_parser import parse_amount, strip_amount

__all__ = ["parse_date", "translate_date_format", "get_month_range", "parse_amount", "strip_amount"]
