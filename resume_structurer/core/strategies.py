"""
Per-section strategy records.

Each section kind gets one record bundling how its content is extracted, how
a single line of it is recognized elsewhere (used by the reclassifier), and
an optional full-text fallback for when the section was not detected. The
table is built once per parser from the shared config; callers select a
record by SectionKind instead of switching on section-name strings.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from resume_structurer.core.config import ParserConfig, SectionKind
from resume_structurer.core.contact_parser import ContactParser
from resume_structurer.core.education_parser import EducationParser
from resume_structurer.core.experience_parser import ExperienceParser
from resume_structurer.core.extras_parser import (
    parse_hobbies,
    parse_languages,
    parse_references,
    parse_titles,
    parse_websites,
)
from resume_structurer.core.line_shapes import LineShapes
from resume_structurer.core.sections import DetectedSections
from resume_structurer.core.skills_parser import SkillsParser
from resume_structurer.core.summary_parser import SummaryParser
from resume_structurer.core.text_normalization import collapse_spaces

Extract = Callable[[DetectedSections, str], Any]


@dataclass(frozen=True)
class SectionStrategy:
    kind: SectionKind
    extract: Extract
    classify: Optional[Callable[[str], bool]] = None
    fallback: Optional[Callable[[str], Any]] = None
    # Run extract even when the section was not detected
    always: bool = False


@dataclass(frozen=True)
class Extractors:
    """The parser objects behind the strategy table, shared with later stages."""
    shapes: LineShapes
    contact: ContactParser
    experience: ExperienceParser
    education: EducationParser
    skills: SkillsParser
    summary: SummaryParser


def build_extractors(config: ParserConfig, aliases: Dict[SectionKind, Tuple[str, ...]]) -> Extractors:
    shapes = LineShapes(config)
    all_aliases = {a for group in aliases.values() for a in group}
    return Extractors(
        shapes=shapes,
        contact=ContactParser(config, shapes, all_aliases),
        experience=ExperienceParser(shapes),
        education=EducationParser(shapes),
        skills=SkillsParser(config, shapes, all_aliases),
        summary=SummaryParser(config, shapes, all_aliases),
    )


def build_strategies(ex: Extractors) -> Dict[SectionKind, SectionStrategy]:
    shapes = ex.shapes
    K = SectionKind
    table = (
        SectionStrategy(
            K.CONTACT,
            extract=lambda s, text: ex.contact.parse(s.text(K.CONTACT), text),
            classify=shapes.is_contact_line,
            always=True,
        ),
        SectionStrategy(
            K.SUMMARY,
            extract=lambda s, text: collapse_spaces(s.text(K.SUMMARY)),
            classify=shapes.is_narrative_sentence,
            fallback=lambda text: ex.summary.parse("", text),
        ),
        SectionStrategy(
            K.EXPERIENCE,
            extract=lambda s, text: ex.experience.parse(s.lines(K.EXPERIENCE)),
            classify=shapes.is_experience_line,
        ),
        SectionStrategy(
            K.EDUCATION,
            extract=lambda s, text: ex.education.parse(s.lines(K.EDUCATION)),
            classify=shapes.is_education_line,
        ),
        SectionStrategy(
            K.SKILLS,
            extract=lambda s, text: ex.skills.parse(s.text(K.SKILLS)),
            classify=shapes.is_skill_list_line,
            fallback=ex.skills.scan_keywords,
        ),
        SectionStrategy(K.LANGUAGES, extract=lambda s, text: parse_languages(s.text(K.LANGUAGES), shapes)),
        SectionStrategy(K.CERTIFICATIONS, extract=lambda s, text: parse_titles(s.text(K.CERTIFICATIONS))),
        SectionStrategy(K.AWARDS, extract=lambda s, text: parse_titles(s.text(K.AWARDS))),
        SectionStrategy(K.WEBSITES, extract=lambda s, text: parse_websites(text), always=True),
        SectionStrategy(K.REFERENCES, extract=lambda s, text: parse_references(s.text(K.REFERENCES), shapes)),
        SectionStrategy(K.HOBBIES, extract=lambda s, text: parse_hobbies(s.text(K.HOBBIES))),
    )
    return {strategy.kind: strategy for strategy in table}
