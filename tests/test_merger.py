"""Heuristic/AI merge rules."""

from resume_structurer.core.merger import merge_results
from resume_structurer.core.schemas import Contact, Experience, ParsedResume, Skill


def heuristic():
    return ParsedResume(
        contact=Contact(firstName="John", lastName="Smith", phone="555-123-4567"),
        experiences=[Experience(id=1, jobTitle="Engineer", company="Acme")],
        skills=[Skill(id=1, name="Python")],
        summary="Heuristic summary",
    )


def test_no_ai_returns_heuristic_unchanged():
    h = heuristic()
    assert merge_results(h, None) == h


def test_contact_merged_per_field():
    ai = ParsedResume(contact=Contact(firstName="Johnny", email="john@example.com", phone="  "))
    merged = merge_results(heuristic(), ai)
    assert merged.contact.firstName == "Johnny"
    assert merged.contact.lastName == "Smith"
    assert merged.contact.email == "john@example.com"
    assert merged.contact.phone == "555-123-4567"


def test_non_empty_ai_list_replaces_heuristic_list():
    ai = ParsedResume(skills=[Skill(id=1, name="Go"), Skill(id=2, name="Rust")])
    merged = merge_results(heuristic(), ai)
    assert [s.name for s in merged.skills] == ["Go", "Rust"]
    assert [e.jobTitle for e in merged.experiences] == ["Engineer"]


def test_summary_replaced_only_when_ai_has_one():
    assert merge_results(heuristic(), ParsedResume(summary="AI summary")).summary == "AI summary"
    assert merge_results(heuristic(), ParsedResume(summary="   ")).summary == "Heuristic summary"


def test_heuristic_input_not_mutated():
    h = heuristic()
    merge_results(h, ParsedResume(contact=Contact(firstName="Johnny")))
    assert h.contact.firstName == "John"
