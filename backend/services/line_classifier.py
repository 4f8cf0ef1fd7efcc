"""Heuristic per-line signal scoring for resume text.

Each line is scored along four axes (job title, company, date, description).
The classifier only reports signal strength; strategies decide what to do
with ambiguous lines.
"""

import re

from models.schemas.line_analysis import ClassificationScore, TextLine

# Month names and abbreviations, shared with the date parser
MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|"
    r"Jul(?:y)?|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)

BULLET_GLYPHS = "•·●▪▸►◦‣*-–—"

_MONTH_YEAR_RE = re.compile(rf"\b{MONTHS}\.?,?\s*\d{{4}}\b", re.IGNORECASE)
_YEAR_RANGE_RE = re.compile(
    r"\b(?:19|20)\d{2}\s*(?:[-‐‑–—−]|to)\s*(?:(?:19|20)\d{2}|present|current)\b",
    re.IGNORECASE,
)
_SENTINEL_RE = re.compile(r"\b(?:present|current)\b", re.IGNORECASE)

ROLE_NOUNS_RE = re.compile(
    r"\b(?:engineer|developer|manager|director|analyst|specialist|coordinator|"
    r"assistant|lead|senior|junior|intern|consultant|architect|designer|"
    r"programmer|administrator|supervisor|executive|officer)\b",
    re.IGNORECASE,
)
_ORG_NOUNS_RE = re.compile(
    r"\b(?:inc|llc|corp|corporation|company|ltd|limited|group|systems|solutions|"
    r"technologies|consulting|services|title|bank|financial|insurance|"
    r"healthcare|medical|hospital|clinic|university|college|school|institute)\b",
    re.IGNORECASE,
)
_PARENTHETICAL_RE = re.compile(r"\([^)]*\)")
_BULLET_RE = re.compile(rf"^\s*[{re.escape(BULLET_GLYPHS)}]\s*")


def split_lines(raw_text: str) -> list[TextLine]:
    """Split raw text into trimmed, non-empty lines keeping their ordinals."""
    lines: list[TextLine] = []
    for index, line in enumerate(raw_text.splitlines()):
        stripped = line.strip()
        if stripped:
            lines.append(TextLine(text=stripped, index=index))
    return lines


def is_bullet(text: str) -> bool:
    return bool(_BULLET_RE.match(text))


def strip_bullet(text: str) -> str:
    return _BULLET_RE.sub("", text, count=1).strip()


def has_date(text: str) -> bool:
    return bool(
        _MONTH_YEAR_RE.search(text)
        or _YEAR_RANGE_RE.search(text)
        or _SENTINEL_RE.search(text)
    )


def has_role_noun(text: str) -> bool:
    return bool(ROLE_NOUNS_RE.search(text))


def classify_line(text: str) -> ClassificationScore:
    """Score a single line along the job title, company, date and description axes."""
    length = len(text)
    role = has_role_noun(text)

    date = 0.9 if has_date(text) else 0.0

    job_title = 0.0
    if role:
        job_title += 0.6
    if _PARENTHETICAL_RE.search(text):
        job_title += 0.4
    if 10 < length < 80:
        job_title += 0.2

    company = 0.0
    if _ORG_NOUNS_RE.search(text):
        company += 0.7
    if 3 < length < 50 and not role:
        company += 0.3

    if is_bullet(text):
        description = 0.9
    elif length > 30:
        description = 0.4
    else:
        description = 0.0

    return ClassificationScore(
        job_title=min(job_title, 1.0),
        company=min(company, 1.0),
        date=min(date, 1.0),
        description=min(description, 1.0),
    )
