"""Tests for amount and line item parsing."""

import pytest
from decimal import Decimal

from billkit.utils.amount_parser import parse_amount
from billkit.utils.item_parser import parse_item_spec


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("¥110000", Decimal("110000")),
        ("$1,234.56", Decimal("1234.56")),
        ("1 234", Decimal("1234")),
        ("-50", Decimal("-50")),
    ],
)
def test_parse_amount(text, expected):
    """Currency symbols, separators and spaces are ignored."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "Infinity"])
def test_parse_amount_invalid(text):
    """Unparseable amounts raise ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_item_spec():
    """NAME:QTY:PRICE parses into a line item."""
    item = parse_item_spec("Design work:10:5,000")

    assert item.name == "Design work"
    assert item.quantity == Decimal("10")
    assert item.unit_price == Decimal("5000")
    assert item.description is None


def test_parse_item_spec_with_description():
    """The description keeps any colons it contains."""
    item = parse_item_spec("Hosting:12:¥1200:Plan: yearly")
    assert item.description == "Plan: yearly"


@pytest.mark.parametrize("spec", ["Design", "Design:10", ":1:100", "Design:ten:100", "Design:1:abc"])
def test_parse_item_spec_invalid(spec):
    """Malformed specs raise ValueError."""
    with pytest.raises(ValueError):
        parse_item_spec(spec)
