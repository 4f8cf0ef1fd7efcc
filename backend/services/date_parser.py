"""Date range parsing and canonical formatting.

Canonical dates are ``"<Month> <YYYY>"`` with the full month name, or a
bare ``"YYYY"``. ``parse_date_range(format_date_range(r)) == r`` holds for
every range this module produces.
"""

import re

from models.schemas.resume_parsed import DateRange
from services.line_classifier import MONTHS

_MONTH_MAP = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6,
    "jul": 7, "july": 7, "aug": 8, "august": 8, "sep": 9, "sept": 9,
    "september": 9, "oct": 10, "october": 10, "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
]

# hyphen, non-breaking hyphen, figure dash, en dash, em dash, minus sign, "to"
SEPARATOR = r"(?:\s*[-‐‑‒–—−]\s*|\s+to\s+)"
_ONGOING = r"(?:present|current|now)"
_MONTH_YEAR = rf"{MONTHS}\.?,?\s*(?:19|20)\d{{2}}"
_YEAR = r"(?:19|20)\d{2}"

MONTH_RANGE_RE = re.compile(
    rf"\b(?P<start>{_MONTH_YEAR})(?:{SEPARATOR}(?P<end>{_MONTH_YEAR}|{_YEAR}|{_ONGOING})\b)?",
    re.IGNORECASE,
)
YEAR_RANGE_RE = re.compile(
    rf"(?<!\d)(?P<start>{_YEAR}){SEPARATOR}(?P<end>{_YEAR}|{_ONGOING})\b",
    re.IGNORECASE,
)
MONTH_YEAR_RE = re.compile(rf"\b{_MONTH_YEAR}\b", re.IGNORECASE)
BARE_YEAR_RE = re.compile(rf"(?<!\d){_YEAR}(?!\d)")
_ONGOING_RE = re.compile(rf"^{_ONGOING}$", re.IGNORECASE)
_OPERAND_RE = re.compile(r"^([A-Za-z]+)\.?,?\s*(\d{4})$")


def format_date(text: str) -> str:
    """Canonicalise one date operand: "aug. 2021" -> "August 2021", "2021" -> "2021"."""
    text = text.strip()
    match = _OPERAND_RE.match(text)
    if match:
        month = _MONTH_MAP.get(match.group(1).lower())
        if month:
            return f"{MONTH_NAMES[month - 1]} {match.group(2)}"
    return text


def _build(start: str, end: str | None) -> DateRange:
    if end is None:
        return DateRange(start_date=format_date(start))
    if _ONGOING_RE.match(end.strip()):
        return DateRange(start_date=format_date(start), current=True)
    return DateRange(start_date=format_date(start), end_date=format_date(end))


def parse_date_range(text: str) -> DateRange | None:
    """Find the first date range in a text fragment.

    Month-year starts are tried first and may pair with a month-year, a bare
    year or an ongoing token. Otherwise a year-to-year (or year-to-present)
    range is accepted. Returns ``None`` when nothing matches.
    """
    match = MONTH_RANGE_RE.search(text)
    if match:
        return _build(match.group("start"), match.group("end"))

    match = YEAR_RANGE_RE.search(text)
    if match:
        return _build(match.group("start"), match.group("end"))
    return None


def format_date_range(dates: DateRange) -> str:
    """Render a DateRange back to text, e.g. "August 2021 - Present"."""
    if not dates.start_date:
        return ""
    if dates.current:
        return f"{dates.start_date} - Present"
    if dates.end_date:
        return f"{dates.start_date} - {dates.end_date}"
    return dates.start_date


def strip_date_ranges(text: str) -> str:
    """Remove date expressions and leftover empty brackets or separators."""
    text = MONTH_RANGE_RE.sub("", text)
    text = YEAR_RANGE_RE.sub("", text)
    text = re.sub(rf"{SEPARATOR}{_ONGOING}\b", "", text, flags=re.IGNORECASE)
    text = re.sub(r"\(\s*\)|\[\s*\]", "", text)
    text = re.sub(r"\s{2,}", " ", text)
    return text.strip(" \t,;|-–—()")


def to_year_month(date_str: str | None) -> tuple[int, int] | None:
    """Convert a canonical date to (year, month); bare years map to January."""
    if not date_str:
        return None
    date_str = date_str.strip()
    match = _OPERAND_RE.match(date_str)
    if match:
        month = _MONTH_MAP.get(match.group(1).lower())
        if month:
            return int(match.group(2)), month
    if re.fullmatch(r"\d{4}", date_str):
        return int(date_str), 1
    return None
