"""Utility functions for billkit."""

from billkit.utils.date_parser import parse_date
from billkit.utils.amount_parser import parse_amount
from billkit.utils.item_parser import parse_item_spec

__all__ = ["parse_date", "parse_amount", "parse_item_spec"]
