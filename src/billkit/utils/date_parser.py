"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow"
    - Offsets: "+30d", "+2w", "+1m" (days, weeks or months from today)
    - Period starts: "this month", "next month", "last month"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # "+30d" style offsets, mostly for due dates
    if date_str.startswith("+") and len(date_str) > 2 and date_str[1:-1].isdigit():
        count = int(date_str[1:-1])
        unit = date_str[-1]
        if unit == "d":
            return today + timedelta(days=count)
        elif unit == "w":
            return today + timedelta(weeks=count)
        elif unit == "m":
            return today + relativedelta(months=count)
        raise ValueError(f"Unknown offset unit in '{date_str}'. Use d, w or m")

    if date_str == "this month":
        return today.replace(day=1)
    elif date_str == "next month":
        return (today + relativedelta(months=1)).replace(day=1)
    elif date_str == "last month":
        return (today - relativedelta(months=1)).replace(day=1)

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
