"""Tests for amount calculation."""

import pytest
from decimal import Decimal

from billkit.domain.amounts import AmountCalculator, normalize_item, to_decimal, validate_items
from billkit.domain.entities import LineItemInput
from billkit.domain.errors import ValidationError


def _item(name="Work", quantity="1", unit_price="100", description=None):
    return LineItemInput(
        name=name, quantity=Decimal(quantity), unit_price=Decimal(unit_price), description=description
    )


class TestAmountCalculator:
    """Tests for subtotal, tax and total derivation."""

    def test_subtotal_tax_total(self, sample_items):
        """10 x 45000 + 1 x 50000 at 10% gives 500000 / 50000 / 550000."""
        amounts = AmountCalculator(Decimal("0.1")).compute(sample_items)

        assert amounts.subtotal == Decimal("500000")
        assert amounts.tax == Decimal("50000")
        assert amounts.total == Decimal("550000")

    def test_tax_is_floored(self):
        """Fractional tax is truncated, not rounded."""
        calculator = AmountCalculator(Decimal("0.1"))

        assert calculator.tax_for(Decimal("1999")) == Decimal("199")
        assert calculator.tax_for(Decimal("999.99")) == Decimal("99")
        assert calculator.tax_for(Decimal("9")) == Decimal("0")

    def test_total_is_subtotal_plus_tax(self):
        """Total always equals subtotal + tax, even with fractional subtotals."""
        amounts = AmountCalculator(Decimal("0.1")).compute([_item(quantity="3", unit_price="333.33")])

        assert amounts.subtotal == Decimal("999.99")
        assert amounts.tax == Decimal("99")
        assert amounts.total == Decimal("1098.99")

    def test_zero_tax_rate(self):
        """A zero rate produces no tax."""
        amounts = AmountCalculator(Decimal("0")).compute([_item(unit_price="1000")])

        assert amounts.tax == Decimal("0")
        assert amounts.total == Decimal("1000")

    def test_invalid_tax_rate(self):
        """Rates outside [0, 1] are rejected."""
        with pytest.raises(ValidationError, match="Tax rate"):
            AmountCalculator(Decimal("1.5"))
        with pytest.raises(ValidationError, match="Tax rate"):
            AmountCalculator(Decimal("-0.1"))

    def test_compute_validated_normalizes(self):
        """compute_validated trims text and keeps item order."""
        normalized, amounts = AmountCalculator().compute_validated(
            [_item(name="  First  ", unit_price="10"), _item(name="Second", unit_price="20", description="  ")]
        )

        assert [i.name for i in normalized] == ["First", "Second"]
        assert normalized[1].description is None
        assert amounts.subtotal == Decimal("30")


class TestItemValidation:
    """Tests for line item validation."""

    def test_empty_items_rejected(self):
        """A document needs at least one item."""
        with pytest.raises(ValidationError, match="At least one line item is required"):
            validate_items([])

    def test_zero_quantity_rejected(self):
        """Quantity must be positive; the message names the item."""
        with pytest.raises(ValidationError, match="Item 2: quantity must be greater than 0"):
            validate_items([_item(), _item(quantity="0")])

    def test_negative_unit_price_rejected(self):
        """Unit price must not be negative."""
        with pytest.raises(ValidationError, match="unit price must be 0 or greater"):
            normalize_item(_item(unit_price="-1"))

    def test_zero_unit_price_allowed(self):
        """Free items are allowed."""
        item = normalize_item(_item(unit_price="0"))
        assert item.unit_price == Decimal("0")

    def test_missing_name_rejected(self):
        """Name is required."""
        with pytest.raises(ValidationError, match="name is required"):
            normalize_item(_item(name="   "))

    def test_long_name_rejected(self):
        """Name is limited to 100 characters."""
        with pytest.raises(ValidationError, match="at most 100"):
            normalize_item(_item(name="x" * 101))

    def test_long_description_rejected(self):
        """Description is limited to 500 characters."""
        with pytest.raises(ValidationError, match="at most 500"):
            normalize_item(_item(description="x" * 501))

    def test_quantity_limited_to_three_places(self):
        """A quantity that would be stored rounded is rejected."""
        with pytest.raises(ValidationError, match="quantity must have at most 3 decimal places"):
            normalize_item(_item(quantity="0.0004", unit_price="1000"))

    def test_unit_price_limited_to_two_places(self):
        """Sub-cent unit prices are rejected."""
        with pytest.raises(ValidationError, match="unit price must have at most 2 decimal places"):
            normalize_item(_item(quantity="3", unit_price="0.333"))

    def test_amount_limited_to_two_places(self):
        """quantity x unit price must itself fit in whole cents."""
        with pytest.raises(ValidationError, match="amount must have at most 2 decimal places"):
            normalize_item(_item(quantity="0.333", unit_price="0.01"))

    def test_trailing_zeros_are_not_extra_places(self):
        """1.5000 is one decimal place, not four."""
        item = normalize_item(_item(quantity="1.5000", unit_price="45000.000"))

        assert item.quantity == Decimal("1.5")
        assert item.unit_price == Decimal("45000")


class TestToDecimal:
    """Tests for numeric coercion."""

    def test_float_goes_through_str(self):
        """0.1 becomes Decimal('0.1'), not its binary expansion."""
        assert to_decimal(0.1, "value") == Decimal("0.1")

    def test_string_and_int(self):
        """Strings and ints are accepted."""
        assert to_decimal("12.50", "value") == Decimal("12.50")
        assert to_decimal(3, "value") == Decimal(3)

    def test_rejects_bool(self):
        """Booleans are not numbers here."""
        with pytest.raises(ValidationError):
            to_decimal(True, "value")

    def test_rejects_garbage_and_nan(self):
        """Unparseable and non-finite values are rejected."""
        with pytest.raises(ValidationError, match="must be a number"):
            to_decimal("abc", "value")
        with pytest.raises(ValidationError, match="finite"):
            to_decimal("NaN", "value")
        with pytest.raises(ValidationError):
            to_decimal(None, "value")
