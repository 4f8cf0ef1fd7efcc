"""Technology frequency ranking over work experience text."""

import logging
import re
from collections import Counter

from config import settings
from models.schemas.resume_parsed import WorkExperience

logger = logging.getLogger(__name__)

# Vocabulary order breaks count ties
TECH_KEYWORDS: tuple[str, ...] = (
    "C#", ".NET", "JavaScript", "TypeScript", "React", "Angular", "Vue", "Node.js",
    "Python", "Java", "C++", "AWS", "Azure", "Docker", "Kubernetes", "SQL", "MongoDB",
    "PostgreSQL", "MySQL", "Redis", "REST", "GraphQL", "Git", "Jenkins", "CI/CD",
    "Agile", "Scrum", "T-SQL", "DynamoDB", "OpenSearch", "Kafka", "SQS", "S3",
    "Ruby", "Cucumber", "Entity Framework", "ASP.NET", "HTML", "CSS", "SASS",
    "Webpack", "Babel", "Express", "Spring", "Django", "Flask", "Laravel",
)


def tech_pattern(token: str) -> re.Pattern:
    """Case-insensitive rule matching ``token`` only as a whole technology name.

    The token may not be preceded by a word character or by ``. # + -`` and
    may not be followed by a word character, ``#`` or ``+``. So "SQL" does not
    match inside "T-SQL" or "MySQL", "Java" does not match "JavaScript", and
    ".NET" does not match inside "ASP.NET", while "React-based" still counts
    React.
    """
    return re.compile(
        rf"(?<![\w.#+-]){re.escape(token)}(?![\w#+])",
        re.IGNORECASE,
    )


_PATTERNS: dict[str, re.Pattern] = {token: tech_pattern(token) for token in TECH_KEYWORDS}


def _experience_text(exp: WorkExperience) -> str:
    return " ".join([exp.position, *exp.description])


def count_technologies(experiences: list[WorkExperience]) -> Counter:
    """Total matches per vocabulary token across all positions and descriptions."""
    counts: Counter = Counter()
    for exp in experiences:
        text = _experience_text(exp)
        for token, pattern in _PATTERNS.items():
            hits = len(pattern.findall(text))
            if hits:
                counts[token] += hits
    return counts


def top_technologies(
    experiences: list[WorkExperience], limit: int | None = None
) -> list[str]:
    """Most frequent technologies, at most ``limit`` (default from settings)."""
    if limit is None:
        limit = settings.top_technologies
    counts = count_technologies(experiences)
    order = {token: i for i, token in enumerate(TECH_KEYWORDS)}
    ranked = sorted(counts, key=lambda t: (-counts[t], order[t]))
    logger.debug("Technology counts: %s", dict(counts))
    return ranked[:limit]
