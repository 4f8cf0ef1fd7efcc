"""Skill extraction from the skills section.

Each line is split on common delimiters and every token becomes a skill.
A ``Label: a, b`` prefix sets the category for that line; a trailing level
marker such as ``(Expert)`` or ``- advanced`` sets the proficiency level.
No deduplication happens here.
"""

import logging
import re

from models.schemas.line_analysis import TextLine
from models.schemas.resume_parsed import Skill
from services.line_classifier import strip_bullet

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "technical"

_DELIMITER_RE = re.compile(r"\s*[,;|·•●▪]\s*")
_CATEGORY_RE = re.compile(r"^(?P<label>[A-Za-z][A-Za-z &/-]{1,40}):\s*(?P<items>.*)$")

_LEVELS = {
    "beginner": "beginner", "basic": "beginner", "novice": "beginner",
    "intermediate": "intermediate", "proficient": "intermediate",
    "advanced": "advanced",
    "expert": "expert",
}
_LEVEL_RE = re.compile(
    r"\s*(?:\((?P<paren>[A-Za-z]+)\)|\s[-–—]\s*(?P<dash>[A-Za-z]+))\s*$"
)


def _split_level(token: str) -> tuple[str, str | None]:
    match = _LEVEL_RE.search(token)
    if match:
        level = _LEVELS.get((match.group("paren") or match.group("dash")).lower())
        if level:
            return token[:match.start()].strip(), level
    return token, None


def parse_skill_line(text: str) -> list[Skill]:
    """Split one skills line into Skill entries."""
    text = strip_bullet(text)
    category = DEFAULT_CATEGORY
    match = _CATEGORY_RE.match(text)
    if match:
        category = match.group("label").strip().lower()
        text = match.group("items")

    skills: list[Skill] = []
    for token in _DELIMITER_RE.split(text):
        name, level = _split_level(token.strip())
        if name:
            skills.append(Skill(name=name, category=category, level=level))
    return skills


def extract_skills(lines: list[TextLine]) -> list[Skill]:
    skills: list[Skill] = []
    for line in lines:
        skills.extend(parse_skill_line(line.text))
    logger.debug("Extracted %d skills", len(skills))
    return skills
