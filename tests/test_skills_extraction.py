"""Skills splitting, level hints and candidate validation."""

import pytest
from resume_structurer.core.config import ParserConfig, resolve_section_aliases
from resume_structurer.core.skills_parser import split_level, split_primary
from resume_structurer.core.strategies import build_extractors

config = ParserConfig()
parser = build_extractors(config, resolve_section_aliases(config)).skills


def names(skills):
    return [s.name for s in skills]


@pytest.mark.parametrize("token,expected", [
    ("React (Advanced)", ("React", "Advanced")),
    ("Python - Expert", ("Python", "Expert")),
    ("Photoshop 80%", ("Photoshop", "80%")),
    ("Excel (4/5)", ("Excel", "4/5")),
    ("Angular v15", ("Angular v15", "")),
    ("Python (3.10)", ("Python (3.10)", "")),
    ("Advanced SQL", ("SQL", "Advanced")),
    ("Docker", ("Docker", "")),
])
def test_split_level(token, expected):
    assert split_level(token) == expected


def test_split_primary_ignores_delimiters_in_parentheses():
    assert split_primary("Python (Django, Flask), SQL") == ["Python (Django, Flask)", "SQL"]


def test_level_in_parentheses():
    skills = parser.parse("React (Advanced), Node.js, Python")
    assert names(skills) == ["React", "Node.js", "Python"]
    assert [s.level for s in skills] == ["Advanced", "", ""]
    assert [s.id for s in skills] == [1, 2, 3]


def test_delimiter_cascade():
    skills = parser.parse("Python and Django & Docker + Kubernetes")
    assert names(skills) == ["Python", "Django", "Docker", "Kubernetes"]


def test_bulleted_lines():
    assert names(parser.parse("• Python\n• SQL\n- Docker")) == ["Python", "SQL", "Docker"]


def test_label_prefix_dropped():
    assert names(parser.parse("Frameworks: Django, Flask")) == ["Django", "Flask"]


def test_contact_and_date_shapes_rejected():
    text = "555-123-4567, 2019 - 2021, jane@example.com, https://example.com, Docker"
    assert names(parser.parse(text)) == ["Docker"]


def test_headings_companies_and_names_rejected():
    assert names(parser.parse("Technical Skills, Acme Corp, John Smith, Git")) == ["Git"]


def test_case_insensitive_dedupe():
    assert names(parser.parse("Python, python, PYTHON")) == ["Python"]


def test_is_skill_shape():
    assert parser.is_skill_shape("Kubernetes")
    assert not parser.is_skill_shape("Go")
    assert not parser.is_skill_shape("+1 555 123 4567")
    assert not parser.is_skill_shape("12/05/2020")


def test_scan_keywords_finds_mentions():
    skills = parser.scan_keywords("Worked with Python and Docker on AWS.")
    assert names(skills) == ["Python", "Docker", "AWS"]
