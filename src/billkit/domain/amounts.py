"""Amount calculation for quotes and invoices.

All arithmetic is done with Decimal. Tax is truncated to whole currency
units (floor), never rounded, and the total is always subtotal + tax.
"""

from decimal import Decimal, InvalidOperation, ROUND_FLOOR, localcontext
from typing import Any, Iterable, Optional, Sequence

from billkit.config import DEFAULT_TAX_RATE
from billkit.domain.entities import AmountBreakdown, LineItemInput
from billkit.domain.errors import ValidationError

MAX_ITEM_NAME_LENGTH = 100
MAX_ITEM_DESCRIPTION_LENGTH = 500

# Decimal places the money and quantity columns store
MONEY_PLACES = 2
QUANTITY_PLACES = 3


def to_decimal(value: Any, field_name: str) -> Decimal:
    """Coerce a numeric input to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion.

    Raises:
        ValidationError: If the value is not numeric or not finite
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(str(value))
        else:
            result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a finite number, got {value!r}")
    return result


def line_amount(quantity: Decimal, unit_price: Decimal) -> Decimal:
    """Return quantity x unit price."""
    return quantity * unit_price


def has_places(value: Decimal, places: int) -> bool:
    """Return True if value needs no more than places decimal places."""
    return value.normalize().as_tuple().exponent >= -places


def require_places(value: Decimal, places: int, field_name: str) -> Decimal:
    """Return value unchanged, or raise if storing it would round it.

    Raises:
        ValidationError: If value has more than places decimal places
    """
    if not has_places(value, places):
        raise ValidationError(f"{field_name} must have at most {places} decimal places, got {value}")
    return value


def normalize_item(item: LineItemInput, position: int = 0) -> LineItemInput:
    """Validate one line item and return it with Decimal fields and trimmed text.

    Args:
        item: Caller-supplied item
        position: Zero-based index, used in error messages

    Raises:
        ValidationError: If any field is missing or out of range
    """
    label = f"Item {position + 1}"
    name = (item.name or "").strip()
    if not name:
        raise ValidationError(f"{label}: name is required")
    if len(name) > MAX_ITEM_NAME_LENGTH:
        raise ValidationError(f"{label}: name must be at most {MAX_ITEM_NAME_LENGTH} characters")

    description = item.description.strip() if item.description else None
    if description and len(description) > MAX_ITEM_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"{label}: description must be at most {MAX_ITEM_DESCRIPTION_LENGTH} characters"
        )

    quantity = to_decimal(item.quantity, f"{label}: quantity")
    if quantity <= 0:
        raise ValidationError(f"{label}: quantity must be greater than 0")
    require_places(quantity, QUANTITY_PLACES, f"{label}: quantity")

    unit_price = to_decimal(item.unit_price, f"{label}: unit price")
    if unit_price < 0:
        raise ValidationError(f"{label}: unit price must be 0 or greater")
    require_places(unit_price, MONEY_PLACES, f"{label}: unit price")
    require_places(line_amount(quantity, unit_price), MONEY_PLACES, f"{label}: amount")

    return LineItemInput(
        name=name,
        quantity=quantity,
        unit_price=unit_price,
        description=description or None,
    )


def validate_items(items: Optional[Sequence[LineItemInput]]) -> list[LineItemInput]:
    """Validate a document's line items.

    Returns:
        Normalized items in the given order

    Raises:
        ValidationError: If the list is empty or any item is invalid
    """
    if not items:
        raise ValidationError("At least one line item is required")
    return [normalize_item(item, i) for i, item in enumerate(items)]


class AmountCalculator:
    """Derives subtotal, tax and total under a fixed tax rate."""

    def __init__(self, tax_rate: Decimal = DEFAULT_TAX_RATE):
        """Initialize amount calculator.

        Args:
            tax_rate: Fraction of the subtotal charged as tax

        Raises:
            ValidationError: If tax_rate is outside [0, 1]
        """
        tax_rate = to_decimal(tax_rate, "Tax rate")
        if not Decimal(0) <= tax_rate <= Decimal(1):
            raise ValidationError(f"Tax rate must be between 0 and 1, got {tax_rate}")
        self.tax_rate = tax_rate

    def tax_for(self, subtotal: Decimal) -> Decimal:
        """Return floor(subtotal x tax_rate) in whole currency units."""
        with localcontext() as ctx:
            ctx.prec = 50
            return (subtotal * self.tax_rate).to_integral_value(rounding=ROUND_FLOOR)

    def compute(self, items: Iterable[LineItemInput]) -> AmountBreakdown:
        """Compute document amounts for already validated items."""
        subtotal = sum(
            (line_amount(to_decimal(i.quantity, "quantity"), to_decimal(i.unit_price, "unit price")) for i in items),
            Decimal(0),
        )
        tax = self.tax_for(subtotal)
        return AmountBreakdown(subtotal=subtotal, tax=tax, total=subtotal + tax)

    def compute_validated(self, items: Optional[Sequence[LineItemInput]]) -> tuple[list[LineItemInput], AmountBreakdown]:
        """Validate items, then compute their amounts."""
        normalized = validate_items(items)
        return normalized, self.compute(normalized)
