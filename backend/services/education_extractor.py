"""Education extraction over the whole education section as one text blob."""

import logging
import re

from models.schemas.line_analysis import TextLine
from models.schemas.resume_parsed import DateRange, Education
from services.date_parser import (
    BARE_YEAR_RE,
    MONTH_YEAR_RE,
    format_date,
    parse_date_range,
    strip_date_ranges,
)

logger = logging.getLogger(__name__)

INSTITUTION_RE = re.compile(r"\b(?:university|college|institute)\b", re.IGNORECASE)

# Checked in order; the first hit wins
DEGREE_RE = re.compile(
    r"\b(?P<degree>"
    r"bachelor(?:'?s)?(?:\s+of\s+(?:science|arts|engineering|business administration))?"
    r"|master(?:'?s)?(?:\s+of\s+(?:science|arts|engineering|business administration))?"
    r"|ph\.?d\.?|doctorate|associate(?:'?s)?|diploma|certificate"
    r")\b(?:\s+degree)?",
    re.IGNORECASE,
)
FIELD_CLAUSE_RE = re.compile(
    r"\bin\s+(?P<field>[A-Za-z][A-Za-z&/ ]*?)(?=\s*(?:[,.;:()|\-–—\n\d]|\bfrom\b|\bat\b|$))",
    re.IGNORECASE,
)
FALLBACK_FIELDS = (
    "computer science", "engineering", "business", "mathematics", "biology",
    "chemistry", "physics", "psychology", "english", "history", "art", "music",
)

GPA_RE = re.compile(
    r"(?i)(?:cgpa|gpa)\s*[:\-]?\s*([0-9]+(?:\.\d{1,2})?(?:\s*/\s*[0-9]+(?:\.\d{1,2})?)?)"
)
HONORS_RE = re.compile(
    r"\b(summa cum laude|magna cum laude|cum laude|dean'?s list|"
    r"with (?:high )?(?:honou?rs|distinction)|first class honou?rs)\b",
    re.IGNORECASE,
)
COURSEWORK_RE = re.compile(
    r"^(?:relevant\s+)?(?:coursework|courses)\s*:\s*(?P<courses>.+)$",
    re.IGNORECASE | re.MULTILINE,
)
_SEGMENT_SPLIT_RE = re.compile(r"\s*(?:[,|;]|\s[–—-]\s)\s*")


def canonical_degree(raw: str) -> str:
    """Map a matched degree phrase to its canonical display name."""
    lower = raw.lower()
    if lower.startswith("bachelor"):
        if "science" in lower:
            return "Bachelor of Science"
        if "arts" in lower:
            return "Bachelor of Arts"
        return "Bachelor's Degree"
    if lower.startswith("master"):
        return "Master's Degree"
    if lower.startswith("ph") or lower.startswith("doctorate"):
        return "PhD"
    return " ".join(w[:1].upper() + w[1:] for w in lower.split())


def _find_institution(lines: list[str]) -> str:
    for line in lines:
        if not INSTITUTION_RE.search(line):
            continue
        stripped = strip_date_ranges(line)
        for segment in _SEGMENT_SPLIT_RE.split(stripped):
            if INSTITUTION_RE.search(segment):
                segment = DEGREE_RE.sub("", segment)
                segment = re.sub(r"\(\s*\)|\[\s*\]", "", segment)
                return segment.strip(" \t,;|-–—()")
    return ""


def _find_field(blob: str) -> str:
    match = FIELD_CLAUSE_RE.search(blob)
    if match:
        field = match.group("field").strip()
        if field:
            return field.title()
    lower = blob.lower()
    for field in FALLBACK_FIELDS:
        if re.search(rf"\b{re.escape(field)}\b", lower):
            return field.title()
    return ""


def _find_dates(blob: str) -> DateRange:
    dates = parse_date_range(blob)
    if dates is not None and (dates.end_date or dates.current):
        return dates

    month_years = MONTH_YEAR_RE.findall(blob)
    if month_years:
        end = format_date(month_years[1]) if len(month_years) > 1 else None
        return DateRange(start_date=format_date(month_years[0]), end_date=end)

    years = BARE_YEAR_RE.findall(blob)
    if years:
        return DateRange(start_date=years[0], end_date=years[1] if len(years) > 1 else None)
    return DateRange()


def _find_coursework(blob: str) -> list[str]:
    match = COURSEWORK_RE.search(blob)
    if not match:
        return []
    return [c.strip() for c in re.split(r"[,;]", match.group("courses")) if c.strip()]


def extract_education(lines: list[TextLine]) -> list[Education]:
    """Return at most one Education entry built from the section blob."""
    if not lines:
        return []
    texts = [line.text for line in lines]
    blob = "\n".join(texts)

    institution = _find_institution(texts)
    degree_match = DEGREE_RE.search(blob)
    degree = canonical_degree(degree_match.group("degree")) if degree_match else ""

    if not institution and not degree:
        logger.debug("No institution or degree in education section")
        return []

    field = ""
    if degree_match:
        field = _find_field(blob[degree_match.start():])
    if not field:
        field = _find_field(blob)

    gpa_match = GPA_RE.search(blob)
    honors = []
    for match in HONORS_RE.finditer(blob):
        honor = match.group(1).lower()
        if honor not in honors:
            honors.append(honor)

    return [Education(
        id="edu_1",
        institution=institution,
        degree=degree,
        field=field,
        dates=_find_dates(blob),
        gpa=gpa_match.group(1).replace(" ", "") if gpa_match else None,
        honors=honors,
        coursework=_find_coursework(blob),
    )]
