"""Utility functions for moneytrack."""

from moneytrack.utils.date_parser import parse_date
from moneytrack.utils.amount_parser import format_amount, parse_amount
from moneytrack.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_amount", "format_amount", "resolve_account"]
