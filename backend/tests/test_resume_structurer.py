"""End-to-end tests for the resume structuring engine."""

from datetime import date
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from config import settings
from conftest import FakeResolver
from models.schemas.resume_parsed import DateRange, ParsedResumeData
from services.enrichment import EnrichmentPipeline
from services.resume_structurer import ResumeStructuringEngine, get_engine
from services.technology_analyzer import count_technologies

pytestmark = pytest.mark.e2e

TODAY = date(2024, 1, 15)

SCENARIO_ONE = (
    "Jane Doe\njane@x.com\nEXPERIENCE\nSoftware Engineer at Acme Corp (2020-2023)\n"
    "- Built APIs\nEDUCATION\nBachelor of Science\nState University (2016-2020)"
)

SAMPLE_RESUME = """John Doe
john.doe@email.com | (555) 123-4567
linkedin.com/in/johndoe | github.com/johndoe

Professional Experience

Senior Software Engineer
Jan 2020 - Present
Initech Systems Inc
- Built payment APIs in Python and Kafka
- Moved batch jobs to AWS Lambda with Python
- Ran Docker based CI/CD with Jenkins

Software Developer
Jun 2017 - Dec 2019
Google
- Developed React dashboards in TypeScript
- Wrote Python tooling for release automation

Education
Bachelor of Science in Computer Science
Stanford University, 2013 - 2017

Technical Skills
Languages: Python, TypeScript, SQL
Docker, Kubernetes, AWS
"""


def _engine(resolver=None):
    return ResumeStructuringEngine(
        enrichment=EnrichmentPipeline(resolver or FakeResolver()), today=TODAY
    )


@pytest.mark.asyncio
async def test_scenario_inline_experience_and_education():
    result = await _engine().structure(SCENARIO_ONE)

    assert len(result.work_experience) == 1
    exp = result.work_experience[0]
    assert exp.id == "exp_1"
    assert exp.position == "Software Engineer"
    assert exp.company == "Acme Corp"
    assert exp.dates == DateRange(start_date="2020", end_date="2023")
    assert exp.description == ["Built APIs"]

    assert len(result.education) == 1
    edu = result.education[0]
    assert edu.degree == "Bachelor of Science"
    assert "State University" in edu.institution

    assert result.personal_info.name == "Jane Doe"
    assert result.personal_info.email == "jane@x.com"
    assert result.personal_info.summary.startswith("Software Engineer with 3+ years of experience.")


@pytest.mark.asyncio
async def test_scenario_title_and_company_only_is_dropped():
    text = "John Smith\nEXPERIENCE\nSoftware Engineer\nAcme Corp\nSKILLS\nPython, Go"
    result = await _engine().structure(text)
    assert result.work_experience == []
    assert [s.name for s in result.skills] == ["Python", "Go"]
    assert result.personal_info.summary is None


@pytest.mark.asyncio
async def test_scenario_tsql_counts_only_tsql():
    text = (
        "EXPERIENCE\n"
        "Database Developer | Initech | 2019 - 2022\n"
        "- Tuned T-SQL stored procedures\n"
        "- Wrote T-SQL reports for finance"
    )
    result = await _engine().structure(text)
    counts = count_technologies(result.work_experience)
    assert counts["T-SQL"] == 2
    assert counts["SQL"] == 0
    assert "specializing in T-SQL and other technologies" in result.personal_info.summary


@pytest.mark.asyncio
async def test_full_resume():
    resolver = FakeResolver({"Initech Systems Inc": "https://initech.com"})
    result = await _engine(resolver).structure(SAMPLE_RESUME)

    assert [e.company for e in result.work_experience] == ["Initech Systems Inc", "Google"]
    assert [e.website for e in result.work_experience] == [
        "https://initech.com",
        "https://www.google.com",
    ]
    assert result.work_experience[0].dates.current is True
    assert len(result.work_experience[0].description) == 3

    edu = result.education[0]
    assert edu.institution == "Stanford University"
    assert edu.field == "Computer Science"
    assert edu.website == "https://www.stanford.edu"

    assert [s.name for s in result.skills] == [
        "Python", "TypeScript", "SQL", "Docker", "Kubernetes", "AWS",
    ]
    assert result.skills[0].category == "languages"

    info = result.personal_info
    assert info.name == "John Doe"
    assert info.phone == "(555) 123-4567"
    assert info.github == "https://github.com/johndoe"
    # 48 + 30 months
    assert info.summary.startswith(
        "Senior Software Engineer with 6+ years of experience specializing in Python, "
    )
    assert resolver.calls == ["Initech Systems Inc"]


@pytest.mark.asyncio
async def test_enrichment_disabled():
    resolver = FakeResolver({"Acme Corp": "https://acme.com"})
    with patch.object(settings, "enrichment_enabled", False):
        result = await _engine(resolver).structure(SCENARIO_ONE)
    assert result.work_experience[0].website is None
    assert resolver.calls == []


@pytest.mark.asyncio
async def test_failing_lookup_does_not_break_structuring(failing_resolver):
    result = await _engine(failing_resolver).structure(SCENARIO_ONE)
    assert result.work_experience[0].company == "Acme Corp"
    assert result.work_experience[0].website is None
    assert result.education[0].website is None


@pytest.mark.asyncio
async def test_cache_shared_across_calls():
    resolver = FakeResolver()
    engine = _engine(resolver)
    await engine.structure(SCENARIO_ONE)
    await engine.structure(SCENARIO_ONE)
    assert sorted(resolver.calls) == ["Acme Corp", "State University"]


@pytest.mark.asyncio
async def test_empty_text():
    result = await _engine().structure("")
    assert result == ParsedResumeData()
    assert result.work_experience == []
    assert result.education == []
    assert result.skills == []


@pytest.mark.asyncio
async def test_result_is_frozen():
    result = await _engine().structure(SCENARIO_ONE)
    with pytest.raises(ValidationError):
        result.skills = []


def test_get_engine_is_shared():
    assert get_engine() is get_engine()
