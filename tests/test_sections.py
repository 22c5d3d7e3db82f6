"""
Tests for section detection.

Heading-based detection first, then content-based absorption of whatever
the headings did not claim.
"""

import pytest
from resume_structurer.core.config import ParserConfig, SectionKind, resolve_section_aliases
from resume_structurer.core.line_shapes import LineShapes
from resume_structurer.core.sections import SectionDetector

config = ParserConfig()
detector = SectionDetector(config, resolve_section_aliases(config), LineShapes(config))


# ===== HEADING MATCHING TESTS =====

@pytest.mark.parametrize("line,kind", [
    ("WORK EXPERIENCE", SectionKind.EXPERIENCE),
    ("  Education  ", SectionKind.EDUCATION),
    ("## Skills", SectionKind.SKILLS),
    ("**Education:**", SectionKind.EDUCATION),
    ("E X P E R I E N C E", SectionKind.EXPERIENCE),
    ("Licenses & Certifications", SectionKind.CERTIFICATIONS),
    ("Profile", SectionKind.SUMMARY),
    ("Hobbies and Interests", SectionKind.HOBBIES),
])
def test_match_heading(line, kind):
    assert detector.match_heading(line) == (kind, "")


def test_inline_heading_carries_content():
    assert detector.match_heading("Skills: Python, SQL") == (SectionKind.SKILLS, "Python, SQL")


@pytest.mark.parametrize("line", [
    "Experienced engineer with a background in payments",
    "Software Engineer",
    "John Smith",
    "",
])
def test_non_headings(line):
    assert detector.match_heading(line) is None


# ===== DETECTION TESTS =====

def test_headed_sections_and_contact_preamble():
    text = (
        "John Smith\njohn@example.com\n555-123-4567\n\n"
        "EXPERIENCE\nSoftware Engineer\nAcme Corp\nJan 2020 - Present\nBuilt internal tools."
    )
    sections = detector.detect(text)

    assert sections.lines(SectionKind.CONTACT) == ["John Smith", "john@example.com", "555-123-4567"]
    assert sections.lines(SectionKind.EXPERIENCE) == [
        "Software Engineer", "Acme Corp", "Jan 2020 - Present", "Built internal tools.",
    ]
    assert sections.headed == {SectionKind.EXPERIENCE}
    assert SectionKind.CONTACT in sections.content_detected


def test_inline_heading_content_is_first_line_of_block():
    sections = detector.detect("Jane Doe\n\nSkills: Python, SQL\nDocker")
    assert sections.lines(SectionKind.SKILLS) == ["Python, SQL", "Docker"]


def test_headless_resume_is_split_by_content():
    text = (
        "Jane Doe\njane@example.com\n\n"
        "Bachelor of Science in Biology\nState University\n2016 - 2020"
    )
    sections = detector.detect(text)

    assert sections.headed == set()
    assert sections.lines(SectionKind.EDUCATION) == [
        "Bachelor of Science in Biology", "State University", "2016 - 2020",
    ]
    assert sections.lines(SectionKind.CONTACT) == ["Jane Doe", "jane@example.com"]


def test_placeholder_lines_are_dropped():
    sections = detector.detect("Jane Doe\n\nSUMMARY\nLorem ipsum dolor sit amet\nReal summary text here.")
    assert sections.lines(SectionKind.SUMMARY) == ["Real summary text here."]


def test_section_text_joins_lines():
    sections = detector.detect("SKILLS\nPython\nSQL")
    assert sections.text(SectionKind.SKILLS) == "Python\nSQL"
    assert sections.has(SectionKind.SKILLS)
    assert not sections.has(SectionKind.EDUCATION)
