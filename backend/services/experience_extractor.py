"""Work experience extraction with competing strategies.

Three strategies read the experience section independently:

1. structured: title line, then date line, then company line, then bullets
2. flexible: per-line best axis, plus inline "<title> at <company> (<dates>)"
3. block: blank-line separated blocks, dates pulled from anywhere in the block

Every strategy is scored and the best one wins, earliest on ties.
Placeholders for missing fields are applied only after selection.
"""

import logging
import re
from typing import Callable

from models.schemas.line_analysis import TextLine
from models.schemas.resume_parsed import DateRange, WorkExperience
from models.schemas.strategy_result import StrategyResult
from services.date_parser import parse_date_range, strip_date_ranges
from services.line_classifier import (
    classify_line,
    has_date,
    has_role_noun,
    is_bullet,
    strip_bullet,
)

logger = logging.getLogger(__name__)

Strategy = Callable[[list[TextLine]], list[WorkExperience]]

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_POSITION = "Unknown Position"

TITLE_THRESHOLD = 0.7
DATE_THRESHOLD = 0.7
MIN_PROSE_LENGTH = 20
MAX_COMPANY_LENGTH = 60

# "<position> at <company> (<dates>)"
INLINE_AT_PAREN_RE = re.compile(r"^(.+?)\s+at\s+(.+?)\s*\((.+?)\)$", re.IGNORECASE)
# "<position> at <company>"
INLINE_AT_RE = re.compile(r"^(.+?)\s+at\s+(.+)$", re.IGNORECASE)
# "<position>, <company>"
INLINE_COMMA_RE = re.compile(r"^([^,]+),\s*(.+)$")
_PIPE_SPLIT_RE = re.compile(r"\s+\|\s+")
_CONTINUATION_RE = re.compile(r"^(?:and|or|with)\b", re.IGNORECASE)
_LOCATION_RE = re.compile(
    r"^(?P<name>.+?)\s*(?:,|\s[|–—-])\s*"
    r"(?P<location>[A-Z][A-Za-z.]*(?: [A-Z][A-Za-z.]*)*,\s*[A-Z]{2}|Remote)$"
)


def _clean(text: str) -> str:
    return strip_date_ranges(strip_bullet(text)).strip()


def _split_location(text: str) -> tuple[str, str | None]:
    match = _LOCATION_RE.match(text)
    if match:
        return match.group("name").strip(), match.group("location").strip()
    return text, None


def _set_company(exp: WorkExperience, text: str) -> None:
    company, location = _split_location(_clean(text))
    exp.company = company
    if location and not exp.location:
        exp.location = location


def _set_dates(exp: WorkExperience, dates: DateRange | None) -> bool:
    if dates is None or not exp.dates.is_empty:
        return False
    exp.dates = dates
    return True


def add_description_line(exp: WorkExperience, text: str) -> bool:
    """Append a description line to ``exp``; returns whether it was kept.

    Bullets are kept when they hold at least three characters including a
    letter. Plain prose must be longer than ``MIN_PROSE_LENGTH``; prose that
    starts lowercase or with and/or/with continues the previous line.
    """
    if is_bullet(text):
        cleaned = strip_bullet(text)
        if len(cleaned) >= 3 and re.search(r"[A-Za-z]", cleaned):
            exp.description.append(cleaned)
            return True
        return False

    text = text.strip()
    if len(text) <= MIN_PROSE_LENGTH:
        return False
    if exp.description and (text[0].islower() or _CONTINUATION_RE.match(text)):
        exp.description[-1] = f"{exp.description[-1]} {text}"
    else:
        exp.description.append(text)
    return True


def _close(current: WorkExperience | None, out: list[WorkExperience]) -> None:
    if current is not None and current.is_valid():
        out.append(current)


# ---------------------------------------------------------------------------
# Strategy 1: structured four-line cadence
# ---------------------------------------------------------------------------

def parse_structured(lines: list[TextLine]) -> list[WorkExperience]:
    experiences: list[WorkExperience] = []
    current: WorkExperience | None = None
    expecting = "free"  # "date" -> "company" -> "free"

    for line in lines:
        text = line.text
        score = classify_line(text)

        if score.job_title > TITLE_THRESHOLD and not is_bullet(text):
            _close(current, experiences)
            current = WorkExperience(position=_clean(text))
            expecting = "company" if _set_dates(current, parse_date_range(text)) else "date"
            continue

        if current is None:
            continue

        if expecting == "date":
            if score.date > DATE_THRESHOLD and _set_dates(current, parse_date_range(text)):
                expecting = "company"
                remainder = _clean(text)
                if remainder and not current.company and classify_line(remainder).company >= 0.3:
                    _set_company(current, remainder)
                    expecting = "free"
                continue
            expecting = "company"

        if expecting == "company":
            expecting = "free"
            if (
                not is_bullet(text)
                and len(text) <= MAX_COMPANY_LENGTH
                and score.company >= 0.3
                and score.company > score.description
            ):
                _set_company(current, text)
                _set_dates(current, parse_date_range(text))
                continue

        add_description_line(current, text)

    _close(current, experiences)
    return experiences


# ---------------------------------------------------------------------------
# Strategy 2: flexible per-line assignment
# ---------------------------------------------------------------------------

def _match_inline(text: str) -> WorkExperience | None:
    """Recognise single-line entries such as "Engineer at Acme (2020-2023)"."""
    match = INLINE_AT_PAREN_RE.match(text)
    if match and parse_date_range(match.group(3)):
        exp = WorkExperience(position=_clean(match.group(1)))
        _set_company(exp, match.group(2))
        exp.dates = parse_date_range(match.group(3))
        return exp

    parts = _PIPE_SPLIT_RE.split(text)
    if len(parts) >= 2 and has_role_noun(parts[0]):
        exp = WorkExperience(position=_clean(parts[0]))
        for part in parts[1:]:
            if not has_date(part) and not exp.company:
                _set_company(exp, part)
        _set_dates(exp, parse_date_range(text))
        return exp

    for pattern in (INLINE_AT_RE, INLINE_COMMA_RE):
        match = pattern.match(text)
        if match and has_role_noun(match.group(1)) and not has_role_noun(match.group(2)):
            company = _clean(match.group(2))
            if not company or len(company) > MAX_COMPANY_LENGTH:
                continue
            exp = WorkExperience(position=_clean(match.group(1)))
            _set_company(exp, company)
            _set_dates(exp, parse_date_range(text))
            return exp
    return None


def parse_flexible(lines: list[TextLine]) -> list[WorkExperience]:
    experiences: list[WorkExperience] = []
    current: WorkExperience | None = None

    for line in lines:
        text = line.text

        if is_bullet(text):
            if current is not None:
                add_description_line(current, text)
            continue

        inline = _match_inline(text)
        if inline is not None:
            _close(current, experiences)
            current = inline
            continue

        score = classify_line(text)
        best = max(score.job_title, score.company, score.date, score.description)
        if best == 0:
            continue

        if score.job_title == best:
            if current is not None and not current.position:
                current.position = _clean(text)
            else:
                _close(current, experiences)
                current = WorkExperience(position=_clean(text))
            _set_dates(current, parse_date_range(text))
        elif score.company == best and len(text) <= MAX_COMPANY_LENGTH and (
            current is None or not current.company or current.position
        ):
            if current is None or (current.company and current.position):
                _close(current, experiences)
                current = WorkExperience()
            _set_company(current, text)
            _set_dates(current, parse_date_range(text))
        elif current is None:
            continue
        elif score.date >= score.description and score.date > 0:
            _set_dates(current, parse_date_range(text))
            remainder = _clean(text)
            if remainder and not current.company and classify_line(remainder).company >= 0.3:
                _set_company(current, remainder)
        elif score.description > 0.3:
            add_description_line(current, text)

    _close(current, experiences)
    return experiences


# ---------------------------------------------------------------------------
# Strategy 3: blank-line separated blocks
# ---------------------------------------------------------------------------

def split_blocks(lines: list[TextLine]) -> list[list[TextLine]]:
    """Group lines into maximal runs with consecutive source ordinals."""
    blocks: list[list[TextLine]] = []
    for line in lines:
        if blocks and line.index == blocks[-1][-1].index + 1:
            blocks[-1].append(line)
        else:
            blocks.append([line])
    return blocks


def _parse_block(block: list[TextLine]) -> WorkExperience:
    exp = WorkExperience()
    for line in block:
        if _set_dates(exp, parse_date_range(line.text)):
            break

    for line in block:
        text = line.text
        if is_bullet(text):
            add_description_line(exp, text)
            continue
        cleaned = _clean(text)
        if not cleaned:
            continue
        score = classify_line(cleaned)
        if not exp.position and score.job_title > 0.5 and score.job_title >= score.company:
            exp.position = cleaned
        elif not exp.company and score.company >= 0.3 and len(cleaned) <= MAX_COMPANY_LENGTH:
            _set_company(exp, cleaned)
        else:
            add_description_line(exp, text)
    return exp


def parse_blocks(lines: list[TextLine]) -> list[WorkExperience]:
    experiences: list[WorkExperience] = []
    for block in split_blocks(lines):
        _close(_parse_block(block), experiences)
    return experiences


STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("structured", parse_structured),
    ("flexible", parse_flexible),
    ("block", parse_blocks),
)


# ---------------------------------------------------------------------------
# Scoring and selection
# ---------------------------------------------------------------------------

def score_experience(exp: WorkExperience) -> int:
    score = 0
    if exp.position:
        score += 20
    if exp.company:
        score += 20
    if exp.dates.start_date:
        score += 15
    if exp.dates.end_date or exp.dates.current:
        score += 10
    if exp.description:
        score += 20
    if len(exp.description) > 2:
        score += 10
    if 5 < len(exp.position) < 100:
        score += 5
    if 2 < len(exp.company) < 50:
        score += 5
    return score


def score_experiences(experiences: list[WorkExperience]) -> int:
    """Total score over the valid candidates only."""
    return sum(score_experience(e) for e in experiences if e.is_valid())


def select_best(results: list[StrategyResult]) -> StrategyResult:
    """Highest score wins; the earliest strategy wins a tie."""
    best = results[0]
    for result in results[1:]:
        if result.score > best.score:
            best = result
    return best


def run_strategies(
    lines: list[TextLine],
    strategies: tuple[tuple[str, Strategy], ...] = STRATEGIES,
) -> list[StrategyResult]:
    results: list[StrategyResult] = []
    for name, strategy in strategies:
        try:
            experiences = [e for e in strategy(lines) if e.is_valid()]
        except Exception as e:
            logger.warning("Experience strategy %s failed: %s", name, e)
            experiences = []
        score = score_experiences(experiences)
        logger.debug("Strategy %s: %d entries, score %d", name, len(experiences), score)
        results.append(StrategyResult(strategy=name, experiences=experiences, score=score))
    return results


def finalize(experiences: list[WorkExperience]) -> list[WorkExperience]:
    """Assign ids and fill placeholders for missing company/position."""
    return [
        exp.model_copy(update={
            "id": f"exp_{i}",
            "company": exp.company or UNKNOWN_COMPANY,
            "position": exp.position or UNKNOWN_POSITION,
        })
        for i, exp in enumerate(experiences, start=1)
    ]


def extract_work_experience(
    lines: list[TextLine],
    strategies: tuple[tuple[str, Strategy], ...] = STRATEGIES,
) -> list[WorkExperience]:
    """Run every strategy over the experience section and keep the best result."""
    if not lines:
        return []
    best = select_best(run_strategies(lines, strategies))
    logger.info("Selected %s strategy (score %d)", best.strategy, best.score)
    return finalize(best.experiences)
