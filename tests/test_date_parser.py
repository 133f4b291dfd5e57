"""Tests for date parser with relative dates and embedded dates."""

import pytest
from datetime import date, datetime, timedelta
from dateutil.relativedelta import relativedelta
from dayrec.utils.date_parser import (
    date_from_filename,
    date_from_text,
    date_from_timestamp_ms,
    get_date_range,
    month_bounds,
    parse_date,
    parse_full_date,
    parse_month,
)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    result = parse_date("today")
    assert result == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    result = parse_date("yesterday")
    assert result == date.today() - timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month'."""
    result = parse_date("last month")
    # Should be first day of last month
    expected = (date.today() - relativedelta(months=1)).replace(day=1)
    assert result == expected


def test_parse_invalid_date():
    """Test parsing invalid date raises ValueError."""
    with pytest.raises(ValueError):
        parse_date("not a date")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-05-06", date(2024, 5, 6)),
        ("05/06/2024", date(2024, 5, 6)),
        ("May 6, 2024", date(2024, 5, 6)),
        ("20240506", date(2024, 5, 6)),
    ],
)
def test_parse_full_date(raw, expected):
    assert parse_full_date(raw) == expected


@pytest.mark.parametrize(
    "raw", ["today", "yesterday", "last month", "05/06", "May 6", "May 2024", "2024", "Feb 29", ""]
)
def test_parse_full_date_rejects_relative_and_partial_dates(raw):
    with pytest.raises(ValueError):
        parse_full_date(raw)


def test_parse_month():
    assert parse_month("2024-05") == (2024, 5)
    assert parse_month("2024-5") == (2024, 5)
    assert parse_month("May 2024") == (2024, 5)
    with pytest.raises(ValueError):
        parse_month("2024-13")


def test_month_bounds_handles_leap_years():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))


def test_get_date_range_covers_whole_months():
    """Test that period ranges start and end on month boundaries."""
    today = date.today()

    start, end = get_date_range("this-month")
    assert start == today.replace(day=1)
    assert end == month_bounds(today.year, today.month)[1]

    start, end = get_date_range("last-month")
    previous = today - relativedelta(months=1)
    assert (start, end) == month_bounds(previous.year, previous.month)

    assert get_date_range("this-year") == (date(today.year, 1, 1), date(today.year, 12, 31))


def test_get_date_range_unknown_period():
    with pytest.raises(ValueError) as excinfo:
        get_date_range("next-decade")
    assert "Unknown period" in str(excinfo.value)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("2024-05-06.json", date(2024, 5, 6)),
        ("daysheet_2024_05_06.json", date(2024, 5, 6)),
        ("scan20240506.json", date(2024, 5, 6)),
        ("day sheet 05-06-2024.json", date(2024, 5, 6)),
        ("scan.json", None),
        ("2024-13-45.json", None),
    ],
)
def test_date_from_filename(name, expected):
    assert date_from_filename(name) == expected


def test_date_from_text_prefers_iso():
    assert date_from_text("Printed 05/07/2024 for 2024/05/06") == date(2024, 5, 6)
    assert date_from_text("Date: 05/07/2024") == date(2024, 5, 7)
    assert date_from_text("no date here") is None


def test_date_from_timestamp_ms():
    stamp = datetime(2024, 5, 6, 15, 30).timestamp() * 1000
    assert date_from_timestamp_ms(stamp) == date(2024, 5, 6)
