"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from billkit.utils.date_parser import parse_date

TODAY = date(2024, 1, 31)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today' with and without a reference date."""
    assert parse_date("today") == date.today()
    assert parse_date("Today", today=TODAY) == TODAY


def test_parse_yesterday_tomorrow():
    """Test parsing 'yesterday' and 'tomorrow'."""
    assert parse_date("yesterday", today=TODAY) == TODAY - timedelta(days=1)
    assert parse_date("tomorrow", today=TODAY) == TODAY + timedelta(days=1)


def test_parse_offsets():
    """Test '+Nd', '+Nw' and '+Nm' offsets."""
    assert parse_date("+30d", today=TODAY) == date(2024, 3, 1)
    assert parse_date("+2w", today=TODAY) == date(2024, 2, 14)
    # Month offsets clamp to the end of shorter months
    assert parse_date("+1m", today=TODAY) == date(2024, 2, 29)


def test_parse_unknown_offset_unit():
    """Test that unknown offset units are rejected."""
    with pytest.raises(ValueError, match="Unknown offset unit"):
        parse_date("+3y", today=TODAY)


def test_parse_month_starts():
    """Test 'this month', 'next month' and 'last month'."""
    assert parse_date("this month", today=TODAY) == date(2024, 1, 1)
    assert parse_date("next month", today=TODAY) == date(2024, 2, 1)
    assert parse_date("last month", today=TODAY) == date(2023, 12, 1)


def test_parse_invalid_date():
    """Test that invalid dates raise ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")
