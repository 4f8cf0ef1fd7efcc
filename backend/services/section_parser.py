"""Resume section segmentation and contact extraction."""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from models.schemas.line_analysis import TextLine
from models.schemas.resume_parsed import PersonalInfo
from services.line_classifier import is_bullet

logger = logging.getLogger(__name__)


class SectionState(Enum):
    SEARCHING = "searching"
    IN_SECTION = "in_section"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class SectionRule:
    """Keyword sets driving one section's state machine.

    A line opens the section when it contains any start keyword and, if
    ``start_anchors`` is non-empty, also one of the anchors. A line closes it
    when it contains any end keyword.
    """
    name: str
    start_keywords: tuple[str, ...]
    start_anchors: tuple[str, ...]
    end_keywords: tuple[str, ...]

    def opens(self, lower: str) -> bool:
        if not any(k in lower for k in self.start_keywords):
            return False
        return not self.start_anchors or any(a in lower for a in self.start_anchors)

    def closes(self, lower: str) -> bool:
        return any(k in lower for k in self.end_keywords)


EXPERIENCE = SectionRule(
    name="experience",
    start_keywords=(
        "experience", "employment", "work history", "professional experience",
        "work experience", "career history", "professional background",
        "employment history", "work", "career",
    ),
    start_anchors=("experience", "history", "employment"),
    end_keywords=(
        "education", "skills", "projects", "certifications", "awards", "publications",
    ),
)

EDUCATION = SectionRule(
    name="education",
    start_keywords=("education", "academic", "university", "college", "degree", "school"),
    start_anchors=("education", "academic"),
    end_keywords=("experience", "skills", "projects", "certifications"),
)

SKILLS = SectionRule(
    name="skills",
    start_keywords=("skills", "technologies", "technical skills", "programming"),
    start_anchors=(),
    end_keywords=("experience", "education", "projects"),
)

# Longest line still treated as a possible section header
MAX_HEADER_LENGTH = 60


def _is_header_candidate(text: str) -> bool:
    return len(text) <= MAX_HEADER_LENGTH and not is_bullet(text)


def _header_remainder(line: TextLine) -> TextLine | None:
    """Content after a colon on a header line, e.g. ``Skills: Python, Go``."""
    _, sep, tail = line.text.partition(":")
    tail = tail.strip()
    if sep and tail:
        return TextLine(text=tail, index=line.index)
    return None


class SectionSegmenter:
    """SEARCHING -> IN_SECTION -> TERMINATED state machine over resume lines."""

    def __init__(self, rule: SectionRule):
        self.rule = rule

    def segment(self, lines: list[TextLine]) -> list[TextLine]:
        """Return the lines observed while inside the section, in order."""
        state = SectionState.SEARCHING
        collected: list[TextLine] = []

        for line in lines:
            lower = line.text.lower()
            header = _is_header_candidate(line.text)

            if state is SectionState.SEARCHING:
                if header and self.rule.opens(lower):
                    state = SectionState.IN_SECTION
                    remainder = _header_remainder(line)
                    if remainder is not None:
                        collected.append(remainder)
                continue

            if header and self.rule.closes(lower):
                state = SectionState.TERMINATED
                break
            if header and self.rule.opens(lower) and ":" not in line.text:
                # repeated header such as "Professional Experience" under "Experience"
                continue
            collected.append(line)

        logger.debug(
            "Section %s: %d lines (%s)", self.rule.name, len(collected), state.value
        )
        return collected


def segment_sections(lines: list[TextLine]) -> dict[str, list[TextLine]]:
    """Run the experience, education and skills segmenters over the same lines."""
    return {
        rule.name: SectionSegmenter(rule).segment(lines)
        for rule in (EXPERIENCE, EDUCATION, SKILLS)
    }


# Contact info patterns
EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
PHONE_RE = re.compile(r"(\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})")
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[\w-]+/?", re.IGNORECASE)
GITHUB_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[\w-]+/?", re.IGNORECASE)


def _as_url(match: re.Match | None) -> str | None:
    if match is None:
        return None
    url = match.group().rstrip("/")
    if not url.lower().startswith("http"):
        url = f"https://{url}"
    return url


def extract_personal_info(text: str, lines: list[TextLine]) -> PersonalInfo:
    """Extract name and contact details from the top of the resume.

    The name is the first non-empty line unless it looks like contact data.
    """
    name = None
    if lines:
        first = lines[0].text
        if "@" not in first and "http" not in first.lower():
            name = first

    email_match = EMAIL_RE.search(text)
    phone_match = PHONE_RE.search(text)

    return PersonalInfo(
        name=name,
        email=email_match.group() if email_match else None,
        phone=phone_match.group().strip() if phone_match else None,
        linkedin=_as_url(LINKEDIN_RE.search(text)),
        github=_as_url(GITHUB_RE.search(text)),
    )
