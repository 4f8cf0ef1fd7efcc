"""Pydantic contracts shared by the structuring services."""

from models.schemas.line_analysis import ClassificationScore, TextLine
from models.schemas.resume_parsed import (
    DateRange,
    Education,
    ParsedResumeData,
    PersonalInfo,
    Skill,
    WorkExperience,
)
from models.schemas.strategy_result import StrategyResult
from models.schemas.company_info import CompanyInfo

__all__ = [
    "TextLine",
    "ClassificationScore",
    "DateRange",
    "WorkExperience",
    "Education",
    "Skill",
    "PersonalInfo",
    "ParsedResumeData",
    "StrategyResult",
    "CompanyInfo",
]
