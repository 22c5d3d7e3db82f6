"""
Normalize arbitrary AI JSON into the canonical ParsedResume shape.

The model is asked for an exact schema but in practice answers with
alternate key names ("work_experience", "certs", "full_name"), scalars where
lists were asked for, bare strings instead of records, or skills grouped by
category. Every one of those shapes is mapped here, once, before any merge
logic looks at the data. Keys are compared on their lower-cased alphanumeric
form, so "Work Experience", "work_experience" and "workExperience" are the
same key.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel

from resume_structurer.core.config import ParserConfig
from resume_structurer.core.dates import parse_date_range
from resume_structurer.core.extras_parser import label_for_url
from resume_structurer.core.schemas import (
    LIST_SECTIONS,
    Contact,
    Education,
    Experience,
    Language,
    ParsedResume,
    Reference,
    Skill,
    TitleEntry,
    Website,
)

logger = logging.getLogger(__name__)


def norm_key(key: Any) -> str:
    return re.sub(r"[^a-z0-9]", "", str(key).lower())


TOP_LEVEL_ALIASES: Dict[str, Tuple[str, ...]] = {
    "contact": ("contact", "contact_info", "contact_information", "personal_info", "personal_information",
                "personal_details", "basics", "header", "candidate"),
    "experiences": ("experiences", "experience", "work_experience", "work_history", "employment",
                    "employment_history", "jobs", "positions", "professional_experience", "work"),
    "education": ("education", "educations", "academic", "academics", "schooling", "education_history",
                  "academic_background"),
    "skills": ("skills", "skill", "technical_skills", "skill_set", "skillset", "competencies",
               "core_competencies", "key_skills"),
    "languages": ("languages", "language", "language_skills", "spoken_languages"),
    "certifications": ("certifications", "certification", "certs", "certificates", "licenses",
                       "licenses_and_certifications", "credentials"),
    "awards": ("awards", "award", "honors", "honours", "achievements", "accomplishments"),
    "websites": ("websites", "website", "links", "urls", "profiles", "social_links", "social",
                 "online_profiles"),
    "references": ("references", "reference", "referees"),
    "hobbies": ("hobbies", "hobby", "interests", "personal_interests"),
    "summary": ("summary", "professional_summary", "profile", "objective", "about", "about_me",
                "career_objective", "overview", "bio", "executive_summary"),
}

# Lookup on the normalized key form
TOP_LEVEL_LOOKUP: Dict[str, str] = {
    norm_key(alias): canonical for canonical, aliases in TOP_LEVEL_ALIASES.items() for alias in aliases
}

RECORD_MODELS: Dict[str, Type[BaseModel]] = {
    "experiences": Experience,
    "education": Education,
    "skills": Skill,
    "languages": Language,
    "certifications": TitleEntry,
    "awards": TitleEntry,
    "websites": Website,
    "references": Reference,
}

# Field a bare string item is stored in
PRIMARY_FIELD = {
    "experiences": "jobTitle",
    "education": "degree",
    "skills": "name",
    "languages": "name",
    "certifications": "title",
    "awards": "title",
    "websites": "url",
    "references": "name",
}

# Sections whose scalar string value is a comma-separated list
SPLITTABLE = {"skills", "languages", "hobbies"}

FULL_NAME_KEYS = {norm_key(k) for k in ("name", "full_name", "fullname", "candidate_name")}
DATE_SPAN_KEYS = {norm_key(k) for k in ("dates", "date", "duration", "period", "date_range", "tenure", "years")}
CURRENT_KEYS = {norm_key(k) for k in ("current", "is_current", "currently_working", "present")}
NESTED_LIST_KEYS = ("items", "skills", "list", "keywords", "values", "technologies")
CONTACT_LINK_KEYS = {norm_key(k) for k in ("linkedin", "github", "website", "portfolio", "url")}
LOCATION_KEYS = {norm_key(k) for k in ("location", "residence")}


def _to_text(value: Any, joiner: str = ", ") -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        return joiner.join(t for t in (_to_text(v, joiner) for v in value) if t)
    if isinstance(value, dict):
        return joiner.join(t for t in (_to_text(v, joiner) for v in value.values()) if t)
    return str(value).strip()


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1", "present", "current"}
    return bool(value)


class SchemaNormalizer:
    def __init__(self, config: ParserConfig):
        self.field_lookup: Dict[str, Dict[str, str]] = {}
        for section, fields in config.field_mappings.items():
            lookup: Dict[str, str] = {}
            # Canonical names first so they always win over aliases
            for canonical in fields:
                lookup[norm_key(canonical)] = canonical
            for canonical, aliases in fields.items():
                for alias in aliases:
                    lookup.setdefault(norm_key(alias), canonical)
            self.field_lookup[section] = lookup

    # ===== ENTRY POINT =====

    def normalize(self, data: Optional[Dict[str, Any]]) -> ParsedResume:
        if not isinstance(data, dict):
            return ParsedResume()

        buckets: Dict[str, List[Any]] = {}
        loose_contact: Dict[str, Any] = {}
        contact_lookup = self.field_lookup.get("contact", {})

        for key, value in data.items():
            nk = norm_key(key)
            canonical = TOP_LEVEL_LOOKUP.get(nk)
            if canonical == "summary" and isinstance(value, dict):
                canonical = "contact"
            if canonical is None:
                if nk in contact_lookup or nk in FULL_NAME_KEYS or nk in CONTACT_LINK_KEYS or nk in LOCATION_KEYS:
                    loose_contact[key] = value
                else:
                    logger.debug("Ignoring unknown AI key %r", key)
                continue
            buckets.setdefault(canonical, []).append(value)

        contact_data: Dict[str, Any] = dict(loose_contact)
        for value in buckets.get("contact", []):
            if isinstance(value, dict):
                contact_data.update(value)
        contact, contact_links = self._contact(contact_data)

        update: Dict[str, Any] = {"contact": contact}
        for section in LIST_SECTIONS:
            items: List[Any] = []
            for value in buckets.get(section, []):
                items.extend(self._as_items(section, value))
            records = [r for r in (self._record(section, item) for item in items) if r is not None]
            if section == "websites":
                known = {w.url.lower() for w in records}
                records.extend(w for w in contact_links if w.url.lower() not in known)
            update[section] = [r.model_copy(update={"id": i}) for i, r in enumerate(records, start=1)]

        hobbies: List[str] = []
        for value in buckets.get("hobbies", []):
            for item in self._as_items("hobbies", value):
                text = _to_text(item.get("name") if isinstance(item, dict) and "name" in item else item)
                if text:
                    hobbies.append(text)
        update["hobbies"] = hobbies
        update["summary"] = " ".join(_to_text(v, " ") for v in buckets.get("summary", []) if _to_text(v, " "))

        return ParsedResume(**update)

    # ===== SHAPE COERCION =====

    def _as_items(self, section: str, value: Any) -> List[Any]:
        """Coerce one top-level value into a flat list of items."""
        if value is None:
            return []
        if isinstance(value, str):
            if section in SPLITTABLE:
                return [p.strip() for p in re.split(r"[,;\n]", value) if p.strip()]
            return [value] if value.strip() else []
        if isinstance(value, dict):
            if section == "skills" and value and not self._looks_like_record(section, value):
                # {"Programming": ["Python", "Go"], "Tools": "Git, Docker"}
                flat: List[Any] = []
                for group in value.values():
                    flat.extend(self._as_items(section, group))
                return flat
            return [value]
        if isinstance(value, list):
            flat = []
            for item in value:
                nested = self._nested_items(section, item) if isinstance(item, dict) and section == "skills" else None
                if nested is not None:
                    flat.extend(nested)
                elif isinstance(item, list):
                    flat.extend(self._as_items(section, item))
                else:
                    flat.append(item)
            return flat
        return [value]

    def _nested_items(self, section: str, item: Dict[str, Any]) -> Optional[List[Any]]:
        """ {"category": "Languages", "items": ["Python", "Go"]} -> ["Python", "Go"] """
        for key in NESTED_LIST_KEYS:
            for k, v in item.items():
                if norm_key(k) == key and isinstance(v, list):
                    return self._as_items(section, v)
        return None

    def _looks_like_record(self, section: str, item: Dict[str, Any]) -> bool:
        lookup = self.field_lookup.get(section, {})
        return any(norm_key(k) in lookup for k in item)

    def _record(self, section: str, item: Any) -> Optional[BaseModel]:
        model = RECORD_MODELS[section]
        fields: Dict[str, str] = {}

        if isinstance(item, dict):
            lookup = self.field_lookup.get(section, {})
            span = ""
            current = False
            for key, value in item.items():
                nk = norm_key(key)
                if nk in CURRENT_KEYS:
                    current = _truthy(value)
                    continue
                canonical = lookup.get(nk)
                if canonical is None:
                    if nk in DATE_SPAN_KEYS:
                        span = _to_text(value, " - ")
                    continue
                if canonical in fields and fields[canonical]:
                    continue
                joiner = "\n" if canonical == "description" else ", "
                fields[canonical] = _to_text(value, joiner)

            if span and "startDate" in model.model_fields and not (fields.get("startDate") or fields.get("endDate")):
                fields["startDate"], fields["endDate"] = parse_date_range(span)
            if current and "endDate" in model.model_fields and not fields.get("endDate"):
                fields["endDate"] = "Present"
        else:
            text = _to_text(item)
            if not text:
                return None
            fields[PRIMARY_FIELD[section]] = text

        if not any(v for v in fields.values()):
            return None
        return model(**fields)

    def _contact(self, data: Dict[str, Any]) -> Tuple[Contact, List[Website]]:
        lookup = self.field_lookup.get("contact", {})
        fields: Dict[str, str] = {}
        full_name = ""
        location = ""
        links: List[Website] = []

        for key, value in data.items():
            nk = norm_key(key)
            if nk in FULL_NAME_KEYS:
                full_name = _to_text(value, " ")
                continue
            if nk in CONTACT_LINK_KEYS:
                url = _to_text(value)
                if url:
                    links.append(Website(label=label_for_url(url), url=url))
                continue
            if nk in LOCATION_KEYS and isinstance(value, str):
                location = value.strip()
                continue
            canonical = lookup.get(nk)
            if canonical and not fields.get(canonical):
                fields[canonical] = _to_text(value, " ")

        if full_name and not (fields.get("firstName") or fields.get("lastName")):
            parts = full_name.split()
            fields["firstName"] = parts[0] if parts else ""
            fields["lastName"] = " ".join(parts[1:])
        if location and not fields.get("city"):
            fields["city"] = location.split(",")[0].strip()

        return Contact(**fields), links
