"""Line item parsing for the command line."""

from decimal import Decimal, InvalidOperation

from billkit.domain.entities import LineItemInput
from billkit.utils.amount_parser import parse_amount


def parse_item_spec(spec: str) -> LineItemInput:
    """Parse "name:quantity:unit_price[:description]" into a LineItemInput.

    The description may itself contain colons.

    Examples:
        "Design work:10:5000"
        "Hosting:12:¥1,200:Monthly plan, billed yearly"

    Raises:
        ValueError: If the spec does not have at least three parts or a
            number cannot be parsed
    """
    parts = spec.split(":", 3)
    if len(parts) < 3:
        raise ValueError(
            f"Invalid item '{spec}'. Expected NAME:QUANTITY:UNIT_PRICE[:DESCRIPTION]"
        )

    name = parts[0].strip()
    if not name:
        raise ValueError(f"Invalid item '{spec}': name is empty")

    try:
        quantity = Decimal(parts[1].strip())
    except InvalidOperation:
        raise ValueError(f"Invalid item '{spec}': could not parse quantity '{parts[1]}'")

    unit_price = parse_amount(parts[2])
    description = parts[3].strip() if len(parts) == 4 and parts[3].strip() else None

    return LineItemInput(name=name, quantity=quantity, unit_price=unit_price, description=description)
