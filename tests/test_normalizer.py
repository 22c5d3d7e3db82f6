"""Final normalization: strings, phones, emails, levels, dates, dedup."""

import pytest
from resume_structurer.core.normalizer import (
    clean_string,
    deep_clean,
    format_phone,
    normalize_email,
    normalize_resume,
    normalize_skill_level,
)
from resume_structurer.core.schemas import Contact, Experience, ParsedResume, Skill, Website


@pytest.mark.parametrize("raw,expected", [
    ("• Python 🚀", "Python"),
    ("Acme Corp,", "Acme Corp"),
    ("Led team • shipped v2", "Led team shipped v2"),
    ("Built tools.\n- Ran CI", "Built tools.\nRan CI"),
    ("   ", ""),
])
def test_clean_string(raw, expected):
    assert clean_string(raw) == expected


def test_deep_clean_leaves_urls_and_emails_alone():
    site = deep_clean(Website(label="• GitHub", url=" https://github.com/jane- "))
    assert site.label == "GitHub"
    assert site.url == "https://github.com/jane-"


@pytest.mark.parametrize("raw,expected", [
    ("(555) 123-4567", "555-123-4567"),
    ("555.123.4567", "555-123-4567"),
    ("+1 555 123 4567", "+15551234567"),
    ("44 20 7946 0958", "+442079460958"),
    ("123-4567", "1234567"),
    ("n/a", ""),
    ("", ""),
])
def test_format_phone(raw, expected):
    assert format_phone(raw) == expected
    assert format_phone(format_phone(raw)) == format_phone(raw)


def test_normalize_email():
    assert normalize_email(" Jane@Example.COM ") == "jane@example.com"
    assert normalize_email("not-an-email") == ""


@pytest.mark.parametrize("raw,expected", [
    ("Advanced", "Advanced"),
    ("expert", "Expert"),
    ("native", "Expert"),
    ("working knowledge", "Basic"),
    ("95%", "Expert"),
    ("80%", "Advanced"),
    ("3/5", "Intermediate"),
    ("1/5", "Beginner"),
    ("v18", ""),
    ("very strong", "Advanced"),
    ("rockstar", "Rockstar"),
    ("", ""),
])
def test_normalize_skill_level(raw, expected):
    assert normalize_skill_level(raw) == expected


def make_resume():
    return ParsedResume(
        contact=Contact(firstName="Jane ", phone="(555) 123-4567", email="JANE@EXAMPLE.COM"),
        experiences=[
            Experience(id=7, jobTitle="Engineer", company="Acme", startDate="01/2020", endDate="current"),
            Experience(id=9, jobTitle="engineer", company="ACME", startDate="Jan 2020"),
            Experience(jobTitle="", company=""),
            Experience(jobTitle="Analyst", company="Globex", startDate="2018 - 2020"),
        ],
        skills=[Skill(name="Python", level="90%"), Skill(name="python"), Skill(name="")],
        hobbies=["Chess", "chess", ""],
    )


def test_normalize_resume():
    r = normalize_resume(make_resume())

    assert r.contact.firstName == "Jane"
    assert r.contact.phone == "555-123-4567"
    assert r.contact.email == "jane@example.com"

    assert [(e.id, e.jobTitle) for e in r.experiences] == [(1, "Engineer"), (2, "Analyst")]
    assert (r.experiences[0].startDate, r.experiences[0].endDate) == ("Jan 2020", "Present")
    assert (r.experiences[1].startDate, r.experiences[1].endDate) == ("2018", "2020")

    assert [(s.id, s.name, s.level) for s in r.skills] == [(1, "Python", "Expert")]
    assert r.hobbies == ["Chess"]


def test_normalize_resume_is_idempotent():
    once = normalize_resume(make_resume())
    assert normalize_resume(once) == once


def test_version_level_moves_back_onto_skill_name():
    r = normalize_resume(ParsedResume(skills=[Skill(name="Python", level="3"), Skill(name="Node.js 18", level="18")]))
    assert [(s.name, s.level) for s in r.skills] == [("Python 3", ""), ("Node.js 18", "")]
    assert normalize_resume(r) == r
