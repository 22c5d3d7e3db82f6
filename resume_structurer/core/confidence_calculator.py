"""
Confidence scoring for structured resume records.

Every configured section is scored on three signals:

  found        = the section has meaningful content        (worth 100)
  required     = share of its required fields populated   (worth 50)
  quality      = format checks specific to the section    (worth 50)

  section score = (found*100 + required*50 + quality*50) / 2   -> 0..100

The overall score is the weighted average of section scores, with the
weights taken from the section configuration. Quality metrics and
suggestions are reported next to the score so the caller can decide
whether to ask the candidate to review their data.

Confidence Scale:
  >= 80  high    (ready to use, quick review)
  >= 60  medium  (review highlighted sections)
  <  60  low     (prompt the candidate for manual entry)
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from resume_structurer.core.config import ParserConfig, SectionKind, SectionSpec
from resume_structurer.core.dates import is_canonical_date, year_of
from resume_structurer.core.line_shapes import digits_of, is_valid_url
from resume_structurer.core.schemas import (
    ConfidenceLevel,
    ConfidenceReport,
    ParsedResume,
    QualityMetrics,
    SectionScore,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)

CORE_SECTIONS = (SectionKind.CONTACT, SectionKind.EXPERIENCE, SectionKind.EDUCATION, SectionKind.SKILLS)
DATED_SECTIONS = (SectionKind.EXPERIENCE, SectionKind.EDUCATION)

METRIC_THRESHOLD = 0.5
METRIC_SUGGESTIONS = {
    "completeness": "Several sections are missing. Make sure your resume has clear section headings.",
    "field_coverage": "Many fields are empty. Add details such as dates, locations and descriptions.",
    "structure": "The resume structure is unclear. Use standard headings like Experience, Education and Skills.",
    "accuracy": "Some contact details or dates look malformed. Please review them.",
    "data_quality": "Add short descriptions to your experience and education entries.",
}
LOW_SCORE_SUGGESTION = "Much of your resume could not be read automatically. Please review every section carefully."
MEDIUM_SCORE_SUGGESTION = "Most of your resume was read. Please review the sections marked as missing."
HIGH_SCORE_SUGGESTION = "Your resume was read successfully. A quick review is recommended."


def confidence_label(score: int) -> ConfidenceLevel:
    if score >= 80:
        return "high"
    if score >= 60:
        return "medium"
    return "low"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match((email or "").strip()))


def is_valid_phone_number(phone: str) -> bool:
    return 7 <= len(digits_of(phone)) <= 15


def _filled(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None and value != [] and value != {}


class ConfidenceCalculator:
    """Central place for all extraction confidence logic."""

    def __init__(self, config: ParserConfig):
        self.config = config

    # ===== SECTION RECORDS =====

    @staticmethod
    def section_records(resume: ParsedResume, kind: SectionKind) -> List[Dict[str, Any]]:
        """Flatten one section of the record into a list of field dicts."""
        if kind is SectionKind.CONTACT:
            return [resume.contact.model_dump()]
        if kind is SectionKind.SUMMARY:
            return [{"content": resume.summary}] if resume.summary.strip() else []
        if kind is SectionKind.HOBBIES:
            return [{"name": h} for h in resume.hobbies if h.strip()]
        return [item.model_dump() for item in getattr(resume, kind.record_key)]

    @staticmethod
    def is_found(resume: ParsedResume, kind: SectionKind) -> bool:
        """Section-specific "has meaningful content" predicates."""
        if kind is SectionKind.CONTACT:
            c = resume.contact
            return c.has_name() or bool(c.email.strip() or c.phone.strip())
        if kind is SectionKind.SUMMARY:
            return bool(resume.summary.strip())
        if kind is SectionKind.EXPERIENCE:
            return any(e.jobTitle.strip() or e.company.strip() for e in resume.experiences)
        if kind is SectionKind.EDUCATION:
            return any(e.school.strip() or e.degree.strip() for e in resume.education)
        if kind is SectionKind.HOBBIES:
            return any(h.strip() for h in resume.hobbies)
        if kind is SectionKind.WEBSITES:
            return any(w.url.strip() for w in resume.websites)
        if kind in (SectionKind.CERTIFICATIONS, SectionKind.AWARDS):
            return any(t.title.strip() for t in getattr(resume, kind.record_key))
        return any(x.name.strip() for x in getattr(resume, kind.record_key))

    # ===== QUALITY CHECKS =====

    def quality(self, resume: ParsedResume, kind: SectionKind) -> float:
        """
        Format-specific quality in [0, 1] for one section.

        contact              -> valid email, valid phone, name present
        experience/education -> share of dates in canonical form
        websites             -> share of valid URLs
        anything else        -> 1.0 when found
        """
        if not self.is_found(resume, kind):
            return 0.0

        if kind is SectionKind.CONTACT:
            c = resume.contact
            checks = [c.has_name()]
            if c.email:
                checks.append(is_valid_email(c.email))
            if c.phone:
                checks.append(is_valid_phone_number(c.phone))
            return sum(checks) / len(checks)

        if kind in DATED_SECTIONS:
            dates = [d for item in getattr(resume, kind.record_key) for d in (item.startDate, item.endDate) if d]
            if not dates:
                # Entries without any dates are usable but weaker
                return 0.5
            return sum(is_canonical_date(d) for d in dates) / len(dates)

        if kind is SectionKind.WEBSITES:
            urls = [w.url for w in resume.websites if w.url]
            return sum(is_valid_url(u) for u in urls) / len(urls)

        return 1.0

    # ===== SCORES =====

    def score_section(self, resume: ParsedResume, kind: SectionKind, spec: SectionSpec) -> SectionScore:
        records = self.section_records(resume, kind)
        found = self.is_found(resume, kind)

        all_fields = list(dict.fromkeys(spec.required_fields + spec.optional_fields))
        populated = {f for f in all_fields if any(_filled(r.get(f)) for r in records)}
        found_required = sum(1 for f in spec.required_fields if f in populated)

        if spec.required_fields:
            required_ratio = found_required / len(spec.required_fields)
        else:
            required_ratio = 1.0 if found else 0.0
        quality = self.quality(resume, kind)

        score = (float(found) * 100 + required_ratio * 50 + quality * 50) / 2
        return SectionScore(
            section=kind.value,
            found=found,
            found_required=found_required,
            required_total=len(spec.required_fields),
            found_fields=len(populated),
            total_fields=len(all_fields),
            quality_score=round(quality, 4),
            score=round(min(100.0, max(0.0, score)), 2),
        )

    def overall(self, scores: Dict[str, SectionScore]) -> int:
        total_weight = 0.0
        weighted = 0.0
        for kind, spec in self.config.sections.items():
            s = scores.get(kind.value)
            if s is None:
                continue
            total_weight += spec.weight
            weighted += spec.weight * s.score
        if total_weight <= 0:
            return 0
        return int(max(0, min(100, round(weighted / total_weight))))

    # ===== METRICS =====

    def quality_metrics(self, resume: ParsedResume, scores: Dict[str, SectionScore]) -> QualityMetrics:
        total_sections = len(scores)
        found_sections = sum(1 for s in scores.values() if s.found)
        total_fields = sum(s.total_fields for s in scores.values())
        found_fields = sum(s.found_fields for s in scores.values())

        return QualityMetrics(
            completeness=round(found_sections / total_sections, 4) if total_sections else 0.0,
            field_coverage=round(found_fields / total_fields, 4) if total_fields else 0.0,
            structure=round(self._structure(resume), 4),
            accuracy=round(self._accuracy(resume), 4),
            data_quality=round(self._data_quality(resume), 4),
        )

    def _structure(self, resume: ParsedResume) -> float:
        present = sum(1 for kind in CORE_SECTIONS if self.is_found(resume, kind))
        if not present:
            return 0.0

        # Start year must not come after end year
        pairs: List[Tuple[Optional[int], Optional[int]]] = [
            (year_of(item.startDate), year_of(item.endDate))
            for item in list(resume.experiences) + list(resume.education)
            if item.startDate and item.endDate
        ]
        pairs = [(a, b) for a, b in pairs if a is not None and b is not None]
        consistency = sum(1 for a, b in pairs if a <= b) / len(pairs) if pairs else 1.0

        return 0.7 * (present / len(CORE_SECTIONS)) + 0.3 * consistency

    def _accuracy(self, resume: ParsedResume) -> float:
        checks: List[bool] = []
        if resume.contact.email:
            checks.append(is_valid_email(resume.contact.email))
        if resume.contact.phone:
            checks.append(is_valid_phone_number(resume.contact.phone))
        for item in list(resume.experiences) + list(resume.education):
            checks.extend(is_canonical_date(d) for d in (item.startDate, item.endDate) if d)
        if not checks:
            return 0.0
        return sum(checks) / len(checks)

    def _data_quality(self, resume: ParsedResume) -> float:
        descriptive = [e.description for e in resume.experiences]
        descriptive += [e.description for e in resume.education]
        descriptive.append(resume.summary)
        return sum(1 for d in descriptive if d.strip()) / len(descriptive)

    # ===== SUGGESTIONS =====

    def suggestions(self, missing: List[SectionKind], metrics: QualityMetrics, overall: int) -> List[str]:
        out: List[str] = []
        for kind in missing:
            spec = self.config.sections.get(kind)
            if spec and spec.missing_suggestion:
                out.append(spec.missing_suggestion)

        for metric, message in METRIC_SUGGESTIONS.items():
            if getattr(metrics, metric) < METRIC_THRESHOLD:
                out.append(message)

        if overall < 50:
            out.append(LOW_SCORE_SUGGESTION)
        elif overall < 80:
            out.append(MEDIUM_SCORE_SUGGESTION)
        else:
            out.append(HIGH_SCORE_SUGGESTION)

        return list(dict.fromkeys(out))

    # ===== ENTRY POINT =====

    def calculate(self, resume: ParsedResume) -> ConfidenceReport:
        scores: Dict[str, SectionScore] = {}
        found: List[SectionKind] = []
        missing: List[SectionKind] = []

        for kind, spec in self.config.sections.items():
            s = self.score_section(resume, kind, spec)
            scores[kind.value] = s
            (found if s.found else missing).append(kind)

        overall = self.overall(scores)
        metrics = self.quality_metrics(resume, scores)
        logger.debug("Confidence %d (found=%s)", overall, [k.value for k in found])

        return ConfidenceReport(
            overall_score=overall,
            confidence=confidence_label(overall),
            sections_found=[k.value for k in found],
            missing_sections=[k.value for k in missing],
            quality_metrics=metrics,
            suggestions=self.suggestions(missing, metrics, overall),
            section_scores=scores,
        )
