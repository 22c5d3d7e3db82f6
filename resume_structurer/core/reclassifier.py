"""
Move content that landed in the wrong section.

Two passes:

- line level, on the detected section blocks before extraction: job entries
  inside the education block, degree entries inside the experience block,
  narrative sentences, stray email/phone lines and skill lists are relocated
  to the section their shape belongs to
- record level, on the extracted resume: education records that are really
  jobs (and the reverse) swap lists, and language names listed as skills move
  to languages when the resume has no language section
"""

import logging
from typing import Callable, Dict, List, Tuple

from resume_structurer.core.config import SectionKind
from resume_structurer.core.line_shapes import LineShapes, is_bullet_line
from resume_structurer.core.schemas import Education, Experience, Language, ParsedResume, with_sequential_ids
from resume_structurer.core.sections import DetectedSections
from resume_structurer.core.strategies import SectionStrategy

logger = logging.getLogger(__name__)

K = SectionKind

# Sections a narrative sentence or a stray contact line may be pulled out of
LOOSE_SECTIONS = (K.SKILLS, K.HOBBIES, K.LANGUAGES, K.AWARDS, K.CERTIFICATIONS)


class Reclassifier:
    def __init__(self, shapes: LineShapes, strategies: Dict[SectionKind, SectionStrategy]):
        self.shapes = shapes
        self.strategies = strategies

    # ===== LINE LEVEL =====

    def reclassify_lines(self, sections: DetectedSections) -> DetectedSections:
        shapes = self.shapes

        self._move_entries(sections, K.EDUCATION, K.EXPERIENCE,
                           opens=lambda ln: shapes.is_job_title_line(ln) and not shapes.is_education_line(ln),
                           closes=shapes.is_education_line)
        self._move_entries(sections, K.EXPERIENCE, K.EDUCATION,
                           opens=lambda ln: shapes.is_degree_line(ln) and not shapes.has_job_keyword(ln),
                           closes=shapes.is_experience_line)

        if K.SUMMARY not in sections.headed:
            narrative = self.strategies[K.SUMMARY].classify
            for source in (K.CONTACT,) + LOOSE_SECTIONS:
                self._move_lines(sections, source, K.SUMMARY, narrative)

        for source in (K.SUMMARY,) + LOOSE_SECTIONS:
            self._move_lines(sections, source, K.CONTACT,
                             lambda ln: shapes.contains_email(ln) or self._is_phone_line(ln))

        skills = self.strategies[K.SKILLS].classify
        for source in (K.CONTACT, K.SUMMARY):
            self._move_lines(sections, source, K.SKILLS,
                             lambda ln: skills(ln) and not shapes.is_contact_line(ln))
        return sections

    def _is_phone_line(self, line: str) -> bool:
        return self.shapes.is_contact_line(line) and len(line.split()) <= 4

    def _move_lines(self, sections: DetectedSections, source: SectionKind, target: SectionKind,
                    predicate: Callable[[str], bool]) -> None:
        lines = sections.blocks.get(source)
        if not lines:
            return
        keep: List[str] = []
        moved: List[str] = []
        for line in lines:
            if line.strip() and not is_bullet_line(line) and predicate(line.strip()):
                moved.append(line)
            else:
                keep.append(line)
        if moved:
            logger.debug("Moved %d line(s) %s -> %s", len(moved), source.value, target.value)
            sections.blocks[source] = keep
            sections.add(target, moved)

    def _move_entries(self, sections: DetectedSections, source: SectionKind, target: SectionKind,
                      opens: Callable[[str], bool], closes: Callable[[str], bool]) -> None:
        """Move an entry header and the lines that follow it, up to the next native header."""
        lines = sections.blocks.get(source)
        if not lines:
            return
        keep: List[str] = []
        moved: List[str] = []
        moving = False
        for line in lines:
            s = line.strip()
            if s and not is_bullet_line(s):
                if opens(s):
                    moving = True
                elif closes(s):
                    moving = False
            (moved if moving else keep).append(line)
        if any(m.strip() for m in moved):
            logger.debug("Moved %d line(s) of entries %s -> %s", len(moved), source.value, target.value)
            sections.blocks[source] = keep
            sections.add(target, moved)

    # ===== RECORD LEVEL =====

    def reclassify_records(self, resume: ParsedResume, headed: Tuple[SectionKind, ...] = ()) -> ParsedResume:
        shapes = self.shapes
        education: List[Education] = []
        experiences: List[Experience] = list(resume.experiences)
        moved_to_exp: List[Experience] = []

        for edu in resume.education:
            if self._education_is_job(edu):
                title, company = (edu.degree, edu.school) if shapes.has_job_keyword(edu.degree) else (edu.school, edu.degree)
                moved_to_exp.append(Experience(
                    jobTitle=title, company=company, location=edu.location,
                    startDate=edu.startDate, endDate=edu.endDate, description=edu.description,
                ))
            else:
                education.append(edu)

        kept_exp: List[Experience] = []
        moved_to_edu = 0
        for exp in experiences:
            if self._experience_is_degree(exp):
                moved_to_edu += 1
                education.append(Education(
                    degree=exp.jobTitle, school=exp.company, location=exp.location,
                    startDate=exp.startDate, endDate=exp.endDate, description=exp.description,
                ))
            else:
                kept_exp.append(exp)
        kept_exp.extend(moved_to_exp)

        skills, languages = list(resume.skills), list(resume.languages)
        if not languages and K.LANGUAGES not in headed:
            as_language = [s for s in skills if shapes.is_language_name(s.name)]
            if as_language:
                skills = [s for s in skills if not shapes.is_language_name(s.name)]
                languages = [Language(name=s.name, proficiency=s.level) for s in as_language]

        if moved_to_exp or moved_to_edu or len(languages) != len(resume.languages):
            logger.debug("Record reclassification: %d edu->exp, %d exp->edu, %d skill->language",
                         len(moved_to_exp), moved_to_edu, len(languages) - len(resume.languages))

        return resume.model_copy(update={
            "experiences": with_sequential_ids(kept_exp),
            "education": with_sequential_ids(education),
            "skills": with_sequential_ids(skills),
            "languages": with_sequential_ids(languages),
        })

    def _education_is_job(self, edu: Education) -> bool:
        shapes = self.shapes
        text = f"{edu.degree} {edu.school}"
        if shapes.has_degree_keyword(text) or shapes.has_institution_keyword(text):
            return False
        return (
            shapes.is_job_title_line(edu.degree)
            or shapes.is_job_title_line(edu.school)
            or shapes.has_company_suffix(edu.school)
        )

    def _experience_is_degree(self, exp: Experience) -> bool:
        shapes = self.shapes
        if shapes.has_job_keyword(exp.jobTitle):
            return False
        return shapes.has_degree_keyword(exp.jobTitle) or (
            shapes.has_institution_keyword(exp.company) and not exp.jobTitle
        )

