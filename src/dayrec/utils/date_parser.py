"""Date parsing utilities."""

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# YYYY-MM-DD, YYYY_MM_DD or YYYYMMDD
_ISO_IN_NAME = re.compile(r"(\d{4})[-_]?(\d{2})[-_]?(\d{2})")
# MM-DD-YYYY or MM_DD_YYYY
_US_IN_NAME = re.compile(r"(\d{2})[-_](\d{2})[-_](\d{4})")
# YYYY-MM-DD or YYYY/MM/DD inside document text
_ISO_IN_TEXT = re.compile(r"(\d{4})[-/](\d{2})[-/](\d{2})")
# MM/DD/YYYY or MM-DD-YYYY inside document text
_US_IN_TEXT = re.compile(r"(\d{2})[-/](\d{2})[-/](\d{4})")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", "01/15/2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this month"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str == "this month":
        return today.replace(day=1)
    if date_str == "last month":
        return (today - relativedelta(months=1)).replace(day=1)

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


# Two fill-ins that differ in every field; a date parsed under both only comes
# out the same when year, month and day were all present in the text
_FILL_FIRST = datetime(2000, 1, 1)
_FILL_SECOND = datetime(2001, 2, 2)


def parse_full_date(date_str: str) -> date:
    """Parse a date read off a document or statement line.

    Only complete calendar dates are accepted. Relative words such as
    "today" and partial dates such as "05/06" or "May 6" are rejected
    instead of being completed from the current date.

    Raises:
        ValueError: If the string is not a complete date
    """
    text = str(date_str).strip()
    if not text:
        raise ValueError("Empty date string")
    try:
        first = date_parser.parse(text, default=_FILL_FIRST)
        second = date_parser.parse(text, default=_FILL_SECOND)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{text}': {e}")
    if first.date() != second.date():
        raise ValueError(f"Incomplete date '{text}': year, month and day are required")
    return first.date()


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse "YYYY-MM" (or any date inside the month) into (year, month).

    Raises:
        ValueError: If the string does not name a month
    """
    value = month_str.strip()
    match = re.fullmatch(r"(\d{4})-(\d{1,2})", value)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month '{month_str}'")
        return year, month
    parsed = parse_date(value)
    return parsed.year, parsed.month


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Unlike the relative dates accepted by parse_date, periods cover whole
    months so they can be fed straight into a monthly reconciliation.

    Args:
        period: Period string (this-month, last-month, this-year, last-year)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return month_bounds(today.year, today.month)

    elif period == "last-month":
        previous = today - relativedelta(months=1)
        return month_bounds(previous.year, previous.month)

    elif period == "this-year":
        return (date(today.year, 1, 1), date(today.year, 12, 31))

    elif period == "last-year":
        return (date(today.year - 1, 1, 1), date(today.year - 1, 12, 31))

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-month, last-month, this-year, last-year"
        )


def _safe_date(year: str, month: str, day: str) -> Optional[date]:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def date_from_filename(name: str) -> Optional[date]:
    """Read a business date embedded in a file name.

    ISO-ordered dates win over US-ordered ones.
    """
    base = re.sub(r"\.[A-Za-z0-9]+$", "", name)
    iso = _ISO_IN_NAME.search(base)
    if iso:
        parsed = _safe_date(iso.group(1), iso.group(2), iso.group(3))
        if parsed is not None:
            return parsed
    us = _US_IN_NAME.search(base)
    if us:
        return _safe_date(us.group(3), us.group(1), us.group(2))
    return None


def date_from_text(text: str) -> Optional[date]:
    """Find the first calendar date printed in document text."""
    iso = _ISO_IN_TEXT.search(text)
    if iso:
        parsed = _safe_date(iso.group(1), iso.group(2), iso.group(3))
        if parsed is not None:
            return parsed
    us = _US_IN_TEXT.search(text)
    if us:
        return _safe_date(us.group(3), us.group(1), us.group(2))
    return None


def date_from_timestamp_ms(timestamp_ms: float) -> date:
    """Local calendar date of a filesystem modification time in milliseconds."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()
