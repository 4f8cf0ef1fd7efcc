"""Resume structuring engine: raw text in, ParsedResumeData out.

Flow:
    raw_text
      ├─ split_lines()                        → list[TextLine]
      ├─ segment_sections()                   → experience / education / skills lines
      ├─ extract_work_experience()            → list[WorkExperience]
      ├─ extract_education()                  → list[Education]
      ├─ extract_skills()                     → list[Skill]
      ├─ extract_personal_info()              → PersonalInfo
      ├─ EnrichmentPipeline.enrich() x2       → websites (concurrent, optional)
      ├─ top_technologies()                   → ranked technology names
      └─ build_professional_summary()         → PersonalInfo.summary
"""

import asyncio
import logging
from datetime import date

from config import settings
from models.schemas.resume_parsed import ParsedResumeData
from services.company_lookup import CompanyLookupService
from services.education_extractor import extract_education
from services.enrichment import COMPANY_TARGET, INSTITUTION_TARGET, EnrichmentPipeline
from services.experience_extractor import extract_work_experience
from services.line_classifier import split_lines
from services.section_parser import extract_personal_info, segment_sections
from services.skill_extractor import extract_skills
from services.summary_builder import build_professional_summary
from services.technology_analyzer import top_technologies

logger = logging.getLogger(__name__)


class ResumeStructuringEngine:
    """Owns the enrichment cache; parsing itself is stateless per call."""

    def __init__(self, enrichment: EnrichmentPipeline | None = None, today: date | None = None):
        self.enrichment = enrichment or EnrichmentPipeline(CompanyLookupService())
        self.today = today

    async def structure(self, raw_text: str) -> ParsedResumeData:
        lines = split_lines(raw_text or "")
        if not lines:
            return ParsedResumeData()

        sections = segment_sections(lines)
        work_experience = extract_work_experience(sections["experience"])
        education = extract_education(sections["education"])
        skills = extract_skills(sections["skills"])
        personal_info = extract_personal_info(raw_text, lines)

        if settings.enrichment_enabled:
            work_experience, education = await asyncio.gather(
                self.enrichment.enrich(work_experience, COMPANY_TARGET),
                self.enrichment.enrich(education, INSTITUTION_TARGET),
            )

        technologies = top_technologies(work_experience)
        summary = build_professional_summary(work_experience, technologies, self.today)
        personal_info = personal_info.model_copy(update={"summary": summary})

        logger.info(
            "Structured resume: %d experience, %d education, %d skills",
            len(work_experience), len(education), len(skills),
        )
        return ParsedResumeData(
            personal_info=personal_info,
            work_experience=work_experience,
            education=education,
            skills=skills,
        )


_engine: ResumeStructuringEngine | None = None


def get_engine() -> ResumeStructuringEngine:
    """Shared engine so the enrichment cache lives for the process."""
    global _engine
    if _engine is None:
        _engine = ResumeStructuringEngine()
    return _engine


async def structure(raw_text: str) -> ParsedResumeData:
    return await get_engine().structure(raw_text)
