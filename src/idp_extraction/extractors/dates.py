# ============================================================================
# src/idp_extraction/extractors/dates.py
# ============================================================================
"""
Date normalization for free-text date expressions.

Two shapes are recognized, tried in order:
1. Numeric year-month-day with "-", "/" or "." separators. The captured
   groups are re-joined with "-" as-is: out-of-range months or days
   ("2024-13-40") are passed through, not validated.
2. "Day MonthName Year" ("17 May 2021", "3 SEPTEMBER 1999"). Month names are
   resolved by their first three letters and the result must be a real
   calendar date.

Only ASCII digits count as digits.
"""

import re
from datetime import date
from typing import Optional

NUMERIC_DATE_PATTERN = re.compile(r'(\d{4})[-/.](\d{2})[-/.](\d{2})', re.ASCII)
TEXT_DATE_PATTERN = re.compile(r'(\d{1,2})\s+([A-Za-z]{3,})\s+(\d{4})', re.ASCII)

MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}


def _parse_text_date(day: str, month_name: str, year: str) -> Optional[date]:
    month = MONTHS.get(month_name[:3].lower())
    if month is None:
        return None
    try:
        return date(int(year), month, int(day))
    except ValueError:
        return None


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    Convert a free-text date to YYYY-MM-DD.

    Returns:
        The canonical date string, or None when no supported shape is found.
    """
    if not value:
        return None

    numeric = NUMERIC_DATE_PATTERN.search(value)
    if numeric:
        year, month, day = numeric.groups()
        return f"{year}-{month}-{day}"

    text = TEXT_DATE_PATTERN.search(value)
    if text:
        parsed = _parse_text_date(*text.groups())
        if parsed is not None:
            return f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}"

    return None
