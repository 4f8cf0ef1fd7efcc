"""Professional summary synthesis from extracted work history."""

from datetime import date

from config import settings
from models.schemas.resume_parsed import WorkExperience
from services.date_parser import to_year_month

# (keyword, role label), checked in order against the most recent position
ROLE_CASCADE: tuple[tuple[str, str], ...] = (
    ("senior", "Senior Software Engineer"),
    ("lead", "Lead Developer"),
    ("architect", "Software Architect"),
    ("engineer", "Software Engineer"),
    ("developer", "Software Developer"),
)
DEFAULT_ROLE = "Technology Professional"
TRACK_RECORD = (
    "Proven track record in full-stack development, system architecture, "
    "and delivering scalable solutions."
)


def calculate_years_of_experience(
    experiences: list[WorkExperience], today: date | None = None
) -> int:
    """Whole years summed over all entries; ongoing or open-ended entries run to today."""
    today = today or date.today()
    now = (today.year, today.month)
    total_months = 0
    for exp in experiences:
        start = to_year_month(exp.dates.start_date)
        if start is None:
            continue
        end = now if exp.dates.current else (to_year_month(exp.dates.end_date) or now)
        total_months += max(0, (end[0] - start[0]) * 12 + (end[1] - start[1]))
    return total_months // 12


def determine_primary_role(experiences: list[WorkExperience]) -> str:
    if not experiences:
        return DEFAULT_ROLE
    position = experiences[0].position.lower()
    for keyword, role in ROLE_CASCADE:
        if keyword in position:
            return role
    return DEFAULT_ROLE


def build_professional_summary(
    experiences: list[WorkExperience],
    technologies: list[str],
    today: date | None = None,
) -> str | None:
    """Compose the one-paragraph summary, or None without work history."""
    if not experiences:
        return None

    role = determine_primary_role(experiences)
    years = calculate_years_of_experience(experiences, today)
    summary = f"{role} with {years}+ years of experience" if years > 0 else f"{role} with experience"

    top = technologies[: settings.summary_technologies]
    if top:
        summary += f" specializing in {', '.join(top)} and other technologies"
    return f"{summary}. {TRACK_RECORD}"
