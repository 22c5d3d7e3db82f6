"""
Unit tests for confidence scoring.

Score bounds, per-section scoring, the label thresholds and the suggestion
list.
"""

import pytest
from resume_structurer.core.config import ParserConfig, SectionKind
from resume_structurer.core.confidence_calculator import (
    HIGH_SCORE_SUGGESTION,
    LOW_SCORE_SUGGESTION,
    MEDIUM_SCORE_SUGGESTION,
    ConfidenceCalculator,
    confidence_label,
    is_valid_email,
    is_valid_phone_number,
)
from resume_structurer.core.schemas import Contact, Education, Experience, ParsedResume, Skill

config = ParserConfig()
calculator = ConfidenceCalculator(config)


def full_resume(**overrides):
    fields = dict(
        contact=Contact(firstName="Jane", lastName="Doe", email="jane@example.com", phone="555-123-4567"),
        experiences=[Experience(id=1, jobTitle="Engineer", company="Acme", startDate="Jan 2020", endDate="Present",
                                description="Built internal tools.")],
        education=[Education(id=1, school="State University", degree="BSc Physics", startDate="2012", endDate="2015",
                             description="First class honours.")],
        skills=[Skill(id=1, name="Python")],
        summary="Backend engineer.",
    )
    fields.update(overrides)
    return ParsedResume(**fields)


# ===== HELPERS =====

@pytest.mark.parametrize("score,label", [(100, "high"), (80, "high"), (79, "medium"), (60, "medium"), (59, "low"), (0, "low")])
def test_confidence_label(score, label):
    assert confidence_label(score) == label


def test_format_validators():
    assert is_valid_email("jane@example.com")
    assert not is_valid_email("jane@")
    assert is_valid_phone_number("+44 20 7946 0958")
    assert not is_valid_phone_number("123")


# ===== SECTION SCORES =====

def test_complete_contact_scores_100():
    spec = config.sections[SectionKind.CONTACT]
    s = calculator.score_section(full_resume(), SectionKind.CONTACT, spec)
    assert s.found
    assert (s.found_required, s.required_total) == (3, 3)
    assert s.score == 100.0


def test_undated_experience_has_half_quality():
    resume = full_resume(experiences=[Experience(id=1, jobTitle="Engineer", company="Acme")])
    s = calculator.score_section(resume, SectionKind.EXPERIENCE, config.sections[SectionKind.EXPERIENCE])
    assert s.quality_score == 0.5
    assert s.score == 87.5


def test_missing_section_scores_zero():
    s = calculator.score_section(ParsedResume(), SectionKind.SKILLS, config.sections[SectionKind.SKILLS])
    assert not s.found
    assert s.score == 0.0


# ===== REPORTS =====

def test_empty_resume():
    report = calculator.calculate(ParsedResume())
    assert report.overall_score == 0
    assert report.confidence == "low"
    assert report.sections_found == []
    assert len(report.missing_sections) == len(SectionKind)
    assert LOW_SCORE_SUGGESTION in report.suggestions
    assert len(report.suggestions) == len(set(report.suggestions))


def test_core_sections_give_high_confidence():
    report = calculator.calculate(full_resume())
    assert report.overall_score == 90
    assert report.confidence == "high"
    assert set(report.sections_found) == {"contact", "summary", "experience", "education", "skills"}
    assert report.section_scores["experience"].score == 100.0
    assert HIGH_SCORE_SUGGESTION in report.suggestions


def test_missing_education_gives_medium_confidence():
    report = calculator.calculate(full_resume(education=[]))
    assert report.overall_score == 70
    assert report.confidence == "medium"
    assert "education" in report.missing_sections
    assert config.sections[SectionKind.EDUCATION].missing_suggestion in report.suggestions
    assert MEDIUM_SCORE_SUGGESTION in report.suggestions


def test_quality_metrics_bounds():
    metrics = calculator.calculate(full_resume()).quality_metrics
    for value in metrics.model_dump().values():
        assert 0.0 <= value <= 1.0
    assert metrics.accuracy == 1.0
    assert metrics.data_quality == 1.0


def test_inverted_dates_lower_structure():
    resume = full_resume(experiences=[Experience(id=1, jobTitle="Engineer", company="Acme",
                                                 startDate="2020", endDate="2018")])
    assert calculator.quality_metrics(resume, {}).structure == pytest.approx(0.7 + 0.3 * 0.5)
