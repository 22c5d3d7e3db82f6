"""
Tests for the evidence filter.

Everything in the final record must be traceable to the source text; the
summary may be swapped for the closest source paragraph.
"""

from resume_structurer.core.config import ParserConfig, resolve_section_aliases
from resume_structurer.core.evidence_filter import Evidence, EvidenceFilter
from resume_structurer.core.schemas import (
    Contact,
    Experience,
    Language,
    ParsedResume,
    Skill,
    Website,
)
from resume_structurer.core.strategies import build_extractors

config = ParserConfig()
extractors = build_extractors(config, resolve_section_aliases(config))
evidence_filter = EvidenceFilter(extractors.shapes, extractors.skills, extractors.summary)

PARAGRAPH = (
    "Experienced backend engineer building payment platforms with Python and Go "
    "for fintech startups"
)
SOURCE = (
    "Jane Doe\njane@example.com | 555-123-4567 | github.com/janedoe\n\n"
    f"{PARAGRAPH}\n\n"
    "EXPERIENCE\nSoftware Engineer\nAcme Corp\n\n"
    "SKILLS\nPython, SQL\n\n"
    "INTERESTS\nChess"
)


def apply(**fields):
    return evidence_filter.apply(ParsedResume(**fields), SOURCE)


# ===== CONTAINMENT =====

def test_evidence_containment_is_case_and_whitespace_insensitive():
    ev = Evidence("Software   Engineer\nACME corp")
    assert ev.contains("software engineer")
    assert ev.contains("Acme Corp")
    assert not ev.contains("")


def test_phone_tolerates_added_country_code():
    ev = Evidence("Call 555-123-4567")
    assert ev.contains_phone("+1 (555) 123-4567")
    assert not ev.contains_phone("555-999-0000")


# ===== SUMMARY =====

def test_paraphrased_summary_replaced_by_source_paragraph():
    candidate = "Backend engineer, experienced in building payment platforms with Python and Go for fintech startups"
    assert apply(summary=candidate).summary == PARAGRAPH


def test_invented_summary_cleared():
    assert apply(summary="Marketing leader driving brand growth across retail channels").summary == ""


def test_verbatim_summary_kept():
    assert apply(summary=PARAGRAPH).summary == PARAGRAPH


def test_missing_summary_filled_from_narrative_paragraph():
    assert apply(summary="").summary == PARAGRAPH


# ===== RECORDS =====

def test_phone_shaped_and_invented_skills_dropped():
    result = apply(skills=[Skill(id=1, name="555-123-4567"), Skill(id=2, name="Python"), Skill(id=3, name="Kotlin")])
    assert [(s.id, s.name) for s in result.skills] == [(1, "Python")]


def test_invented_experience_dropped_and_ids_renumbered():
    result = apply(experiences=[
        Experience(id=1, jobTitle="Astronaut", company="NASA"),
        Experience(id=2, jobTitle="Software Engineer", company="Acme Corp"),
    ])
    assert [(e.id, e.jobTitle) for e in result.experiences] == [(1, "Software Engineer")]


def test_websites_grounded_ignoring_scheme():
    result = apply(websites=[
        Website(id=1, label="GitHub", url="https://github.com/janedoe"),
        Website(id=2, label="Website", url="https://example.org"),
    ])
    assert [w.url for w in result.websites] == ["https://github.com/janedoe"]


def test_common_language_names_kept_without_evidence():
    result = apply(languages=[Language(name="Spanish"), Language(name="Klingon")])
    assert [lang.name for lang in result.languages] == ["Spanish"]


def test_hobbies_grounded():
    assert apply(hobbies=["Chess", "Skydiving"]).hobbies == ["Chess"]


# ===== CONTACT =====

def test_contact_fields_cleared_individually():
    contact = Contact(firstName="Jane", lastName="Doe", email="jane@example.com", phone="+1 555-123-4567", city="Paris")
    result = apply(contact=contact).contact
    assert (result.firstName, result.lastName, result.email) == ("Jane", "Doe", "jane@example.com")
    assert result.phone == "+1 555-123-4567"
    assert result.city == ""


def test_invented_phone_cleared():
    assert apply(contact=Contact(firstName="Jane", phone="555-999-0000")).contact.phone == ""
