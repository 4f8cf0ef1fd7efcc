"""Tests for skills section extraction."""

from models.schemas.line_analysis import TextLine
from services.skill_extractor import extract_skills, parse_skill_line


def _line(text, index=0):
    return TextLine(text=text, index=index)


def test_splits_on_common_delimiters():
    skills = extract_skills([_line("Python, JavaScript | React; Docker · AWS")])
    assert [s.name for s in skills] == ["Python", "JavaScript", "React", "Docker", "AWS"]
    assert all(s.category == "technical" for s in skills)
    assert all(s.level is None for s in skills)


def test_multiple_lines_in_order():
    skills = extract_skills([_line("Python, Go"), _line("Kubernetes", 1)])
    assert [s.name for s in skills] == ["Python", "Go", "Kubernetes"]


def test_bullet_lines():
    skills = parse_skill_line("• Python • Go")
    assert [s.name for s in skills] == ["Python", "Go"]


def test_no_deduplication():
    skills = parse_skill_line("Python, Python")
    assert len(skills) == 2


def test_category_label():
    skills = parse_skill_line("Languages: Python, Go")
    assert [(s.name, s.category) for s in skills] == [
        ("Python", "languages"),
        ("Go", "languages"),
    ]


def test_levels():
    skills = parse_skill_line("Kubernetes (Expert), Terraform - advanced, Objective-C")
    assert [(s.name, s.level) for s in skills] == [
        ("Kubernetes", "expert"),
        ("Terraform", "advanced"),
        ("Objective-C", None),
    ]


def test_unknown_marker_is_kept_in_name():
    skills = parse_skill_line("Python (3.x)")
    assert skills[0].name == "Python (3.x)"
    assert skills[0].level is None


def test_empty_tokens_dropped():
    assert [s.name for s in parse_skill_line("Python,, ,Go,")] == ["Python", "Go"]
