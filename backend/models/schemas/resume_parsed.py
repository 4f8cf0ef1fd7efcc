"""Structured resume record produced by the structuring engine."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

SkillLevel = Literal["beginner", "intermediate", "advanced", "expert"]


class DateRange(BaseModel):
    """Canonical start/end pair.

    Dates are ``"<Month> <YYYY>"`` or a bare ``"YYYY"``. An ongoing role has
    ``current=True`` and no end date.
    """
    model_config = ConfigDict(frozen=True)

    start_date: str | None = None
    end_date: str | None = None
    current: bool = False

    @model_validator(mode="after")
    def _current_has_no_end(self) -> "DateRange":
        if self.current and self.end_date:
            raise ValueError("a current date range cannot have an end date")
        return self

    @property
    def is_empty(self) -> bool:
        return not (self.start_date or self.end_date or self.current)


class WorkExperience(BaseModel):
    """A single work experience entry."""
    id: str = ""
    company: str = ""
    position: str = ""
    dates: DateRange = DateRange()
    description: list[str] = []
    technologies: list[str] | None = None
    location: str | None = None
    website: str | None = None

    def is_valid(self) -> bool:
        """Company and position set, plus a start date or a description line."""
        return bool(
            self.company.strip()
            and self.position.strip()
            and (self.dates.start_date or self.description)
        )


class Education(BaseModel):
    """A single education entry."""
    id: str = ""
    institution: str = ""
    degree: str = ""
    field: str = ""
    dates: DateRange = DateRange()
    gpa: str | None = None
    honors: list[str] = []
    coursework: list[str] = []
    website: str | None = None


class Skill(BaseModel):
    name: str
    category: str = "technical"
    level: SkillLevel | None = None


class PersonalInfo(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    github: str | None = None
    website: str | None = None
    summary: str | None = None


class ParsedResumeData(BaseModel):
    """Aggregate output of ``ResumeStructuringEngine.structure``."""
    model_config = ConfigDict(frozen=True)

    personal_info: PersonalInfo = PersonalInfo()
    work_experience: list[WorkExperience] = []
    education: list[Education] = []
    skills: list[Skill] = []
