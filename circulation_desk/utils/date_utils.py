"""Date manipulation utilities"""

import re
from datetime import date, timedelta
from typing import Optional

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def add_days(from_date: date, days: int) -> date:
    """Add calendar days to a date"""
    return from_date + timedelta(days=days)


def epoch_day_difference(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)"""
    return end.toordinal() - start.toordinal()


def parse_iso_date(text: str) -> Optional[date]:
    """Parse a strict YYYY-MM-DD string, returning None when it is malformed"""
    text = text.strip()
    if not ISO_DATE_PATTERN.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        # Right shape, impossible calendar date (e.g. 2024-02-30)
        return None
