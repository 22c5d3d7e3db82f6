"""
Evidence filter: drop anything the source text does not support.

Every structured value in the final record must be found in the cleaned
input text (case-insensitive, whitespace-insensitive containment). The only
exceptions are language names from the closed list of common languages.
Applied after the merge, so it gates AI output and heuristic output alike.
"""

import logging
from typing import Any, Dict, List

from resume_structurer.core.line_shapes import LineShapes, digits_of, is_valid_url, url_key
from resume_structurer.core.schemas import Contact, ParsedResume, with_sequential_ids
from resume_structurer.core.skills_parser import SkillsParser
from resume_structurer.core.summary_parser import SummaryParser

logger = logging.getLogger(__name__)

# Contact fields checked by plain containment
TEXT_CONTACT_FIELDS = ("firstName", "lastName", "desiredJobTitle", "email", "country", "city", "address", "postCode")


def _squash(text: str) -> str:
    return " ".join((text or "").lower().split())


class Evidence:
    """Containment index over one source text."""

    def __init__(self, text: str):
        self.text = text or ""
        self.squashed = _squash(self.text)
        self.phone_digits = [digits_of(line) for line in self.text.split("\n") if digits_of(line)]

    def contains(self, value: str) -> bool:
        needle = _squash(value)
        return bool(needle) and needle in self.squashed

    def contains_url(self, url: str) -> bool:
        key = url_key(url)
        return bool(key) and key in self.squashed

    def contains_phone(self, phone: str) -> bool:
        digits = digits_of(phone)
        if len(digits) < 7:
            return False
        # Tolerate a country code added by the AI ("+1 555..." for "555...")
        return any(digits in line or (len(digits) > 10 and digits[-10:] in line) for line in self.phone_digits)


class EvidenceFilter:
    def __init__(self, shapes: LineShapes, skills: SkillsParser, summary: SummaryParser):
        self.shapes = shapes
        self.skills = skills
        self.summary = summary

    def apply(self, resume: ParsedResume, source_text: str) -> ParsedResume:
        ev = Evidence(source_text)
        dropped: Dict[str, int] = {}

        def keep(section: str, items: List[Any], predicate) -> List[Any]:
            kept = [item for item in items if predicate(item)]
            if len(kept) != len(items):
                dropped[section] = len(items) - len(kept)
            return with_sequential_ids(kept)

        update: Dict[str, Any] = {
            "contact": self._ground_contact(resume.contact, ev),
            "experiences": keep("experiences", resume.experiences,
                                lambda e: ev.contains(e.jobTitle) or ev.contains(e.company)),
            "education": keep("education", resume.education,
                              lambda e: ev.contains(e.school) or ev.contains(e.degree)),
            "skills": keep("skills", resume.skills,
                           lambda s: self.skills.is_skill_shape(s.name) and ev.contains(s.name)),
            "languages": keep("languages", resume.languages,
                              lambda lang: ev.contains(lang.name) or self.shapes.is_language_name(lang.name)),
            "certifications": keep("certifications", resume.certifications, lambda t: ev.contains(t.title)),
            "awards": keep("awards", resume.awards, lambda t: ev.contains(t.title)),
            "websites": keep("websites", resume.websites,
                             lambda w: is_valid_url(w.url) and ev.contains_url(w.url)),
            "references": keep("references", resume.references, lambda r: ev.contains(r.name)),
            "summary": self._ground_summary(resume.summary, source_text, ev),
        }
        hobbies = [h for h in resume.hobbies if ev.contains(h)]
        if len(hobbies) != len(resume.hobbies):
            dropped["hobbies"] = len(resume.hobbies) - len(hobbies)
        update["hobbies"] = hobbies

        if dropped:
            logger.debug("Evidence filter dropped ungrounded items: %s", dropped)
        return resume.model_copy(update=update)

    def _ground_contact(self, contact: Contact, ev: Evidence) -> Contact:
        cleared: Dict[str, str] = {}
        for field in TEXT_CONTACT_FIELDS:
            value = getattr(contact, field)
            if value and not ev.contains(value):
                cleared[field] = ""
        if contact.phone and not ev.contains_phone(contact.phone):
            cleared["phone"] = ""
        if cleared:
            logger.debug("Cleared ungrounded contact fields: %s", sorted(cleared))
        return contact.model_copy(update=cleared)

    def _ground_summary(self, summary: str, source_text: str, ev: Evidence) -> str:
        """
        Keep a verbatim summary; otherwise swap in the best matching paragraph
        (token-set Jaccard >= threshold), or fall back to the first narrative
        paragraph when there was no summary at all.
        """
        s = (summary or "").strip()
        if not s:
            return self.summary.find_narrative_paragraph(source_text)
        if ev.contains(s):
            return s
        match = self.summary.best_matching_paragraph(s, source_text)
        if match:
            logger.debug("Summary replaced by best matching paragraph")
            return match
        logger.debug("Summary cleared: no supporting paragraph")
        return ""
