"""
Contact extraction: email, phone, name, headline job title and location.

Email and phone come from regex passes. The name is tried in four ways,
first hit wins:

  a) the first few non-empty lines against the configured name shapes
  b) a capitalized word pair anywhere, validated against the common first
     name list (or a line that is nothing but "Capitalized Capitalized")
  c) the line right before the email
  d) the line right after a "Contact"/"Personal"/"Header" sub-heading
"""

import logging
import re
from typing import Iterable, List, Optional, Set, Tuple

from resume_structurer.core.config import ParserConfig
from resume_structurer.core.dates import is_date_line
from resume_structurer.core.line_shapes import (
    ADDRESS_RE,
    CITY_STATE_RE,
    UK_POSTCODE_RE,
    US_POSTCODE_RE,
    URL_RE,
    LineShapes,
    find_phone,
    normalize_heading,
    strip_bullet,
)
from resume_structurer.core.schemas import Contact

logger = logging.getLogger(__name__)

NAME_PREFIX_RE = re.compile(r"^(?:full\s+)?name\s*[:\-]\s*", re.IGNORECASE)
TITLE_PREFIX_RE = re.compile(r"^(?:title|position|role|headline)\s*[:\-]\s*", re.IGNORECASE)
CAPITALIZED_PAIR_RE = re.compile(r"\b([A-Z][a-z]+)\s+([A-Z][a-z]+)\b")
STRICT_PAIR_RE = re.compile(r"^([A-Z][a-z]+)\s+([A-Z][a-z]+)$")
CONTACT_SUBHEADINGS = {"contact", "contact information", "contact info", "contact details",
                       "personal", "personal information", "personal details", "header"}
LINE_SPLIT_RE = re.compile(r"\s+[|•·]\s+|\s+[–—]\s+")
COMPANY_CLAUSE_RE = re.compile(r"\s(?:at|@)\s", re.IGNORECASE)

# How far into the document contact details are looked for when the
# contact block itself has none
CONTACT_AREA_LINES = 12


def _non_empty(lines: Iterable[str]) -> List[str]:
    return [ln.strip() for ln in lines if ln.strip()]


class ContactParser:
    def __init__(self, config: ParserConfig, shapes: LineShapes, heading_aliases: Iterable[str] = ()):
        self.config = config
        self.shapes = shapes
        self.heading_aliases: Set[str] = set(heading_aliases)

    def parse(self, block: str, full_text: str) -> Contact:
        block_lines = _non_empty((block or "").split("\n"))
        doc_lines = _non_empty((full_text or "").split("\n"))
        area = block_lines or doc_lines[:CONTACT_AREA_LINES]

        email = self.shapes.find_email(block) or self.shapes.find_email(full_text)
        phone = find_phone(block) or find_phone(full_text)

        first, last, name_line = "", "", ""
        found = self.extract_name(doc_lines, email)
        if found:
            first, last, name_line = found

        contact = Contact(
            firstName=first,
            lastName=last,
            email=email,
            phone=phone,
            desiredJobTitle=self.extract_job_title(doc_lines, name_line),
        )
        self._fill_location(contact, area, email, phone)
        logger.debug("Contact: name=%r email=%r phone=%r", name_line, email, phone)
        return contact

    # ===== NAME =====

    def _is_heading(self, line: str) -> bool:
        return normalize_heading(line) in self.heading_aliases

    def _name_candidate(self, line: str) -> Optional[Tuple[str, str]]:
        s = NAME_PREFIX_RE.sub("", strip_bullet(line)).strip()
        if not s or self._is_heading(s):
            return None
        shapes = self.shapes
        if shapes.has_job_keyword(s) or shapes.has_degree_keyword(s) or shapes.has_institution_keyword(s):
            return None
        if shapes.has_company_suffix(s) or shapes.has_skill_keyword(s) or shapes.find_country(s) == s:
            return None
        return shapes.match_name(s)

    def extract_name(self, lines: List[str], email: str = "") -> Optional[Tuple[str, str, str]]:
        """Return (firstName, lastName, source_line) or None."""
        # a) top of the document
        for line in lines[: self.config.name_scan_lines]:
            for part in LINE_SPLIT_RE.split(line):
                hit = self._name_candidate(part)
                if hit:
                    return hit[0], hit[1], part.strip()

        # b) capitalized pair anywhere
        for line in lines:
            s = NAME_PREFIX_RE.sub("", line).strip()
            if self._is_heading(s) or self.shapes.has_job_keyword(s):
                continue
            m = STRICT_PAIR_RE.match(s)
            if m and not self.shapes.has_company_suffix(s) and not self.shapes.has_skill_keyword(s):
                return m.group(1), m.group(2), s
            for m in CAPITALIZED_PAIR_RE.finditer(s):
                if self.shapes.is_common_first_name(m.group(1)):
                    return m.group(1), m.group(2), m.group(0)

        # c) right before the email
        if email:
            for i, line in enumerate(lines):
                if email in line and i > 0:
                    hit = self._loose_name(lines[i - 1])
                    if hit:
                        return hit[0], hit[1], lines[i - 1]
                    break

        # d) right after a contact sub-heading
        for i, line in enumerate(lines[:-1]):
            if normalize_heading(line) in CONTACT_SUBHEADINGS:
                hit = self._loose_name(lines[i + 1])
                if hit:
                    return hit[0], hit[1], lines[i + 1]

        return None

    def _loose_name(self, line: str) -> Optional[Tuple[str, str]]:
        hit = self._name_candidate(line)
        if hit:
            return hit
        words = NAME_PREFIX_RE.sub("", line).split()
        if 2 <= len(words) <= 3 and all(w[:1].isupper() and w.replace("-", "").replace("'", "").isalpha() for w in words):
            return words[0], " ".join(words[1:])
        return None

    # ===== HEADLINE =====

    def extract_job_title(self, lines: List[str], name_line: str = "") -> str:
        """
        First headline-shaped line near the top that carries a job keyword.

        Experience headers are not headlines: "Manager at Brandify" and a title
        followed by a date line are skipped.
        """
        shapes = self.shapes
        top = lines[: self.config.job_title_scan_lines]
        for i, line in enumerate(top):
            # The headline sits above the first section
            if self._is_heading(line):
                break
            if COMPANY_CLAUSE_RE.search(line):
                continue
            following = next((x for x in lines[i + 1:] if x.strip()), "")
            if following and is_date_line(following):
                continue
            for part in LINE_SPLIT_RE.split(line):
                s = TITLE_PREFIX_RE.sub("", part.strip()).strip()
                if not s or (name_line and s == name_line):
                    continue
                if shapes.is_contact_line(s) or URL_RE.search(s):
                    continue
                if shapes.match_name(s) and not shapes.has_job_keyword(s):
                    continue
                if shapes.is_job_title_line(s) and len(s.split()) <= 6:
                    return s
        return ""

    # ===== LOCATION =====

    def _fill_location(self, contact: Contact, area: List[str], email: str, phone: str) -> None:
        for raw in area:
            line = raw
            if email:
                line = line.replace(email, " ")
            if phone:
                line = line.replace(phone, " ")
            line = URL_RE.sub(" ", line)

            if not contact.address:
                m = ADDRESS_RE.search(line)
                if m:
                    contact.address = m.group(0).strip().rstrip(",")

            if not contact.city:
                m = CITY_STATE_RE.search(line)
                if m and not self.shapes.has_company_suffix(m.group(1)):
                    contact.city = m.group(1).strip()
                else:
                    contact.city = self._city_before_country(line)

            if not contact.postCode:
                m = US_POSTCODE_RE.search(line) or UK_POSTCODE_RE.search(line)
                if m and (contact.city or contact.address or CITY_STATE_RE.search(line)):
                    contact.postCode = m.group(0)

            if not contact.country:
                contact.country = self.shapes.find_country(line)

    def _city_before_country(self, line: str) -> str:
        """ "Lagos, Nigeria" -> "Lagos" when the second part is a known country."""
        parts = [p.strip() for p in line.split(",")]
        for i in range(len(parts) - 1):
            if self.shapes.find_country(parts[i + 1]).lower() == parts[i + 1].lower() and parts[i + 1]:
                city = re.sub(r"^\d+\s+", "", parts[i]).strip()
                if city and city[0].isupper() and len(city.split()) <= 3 and not ADDRESS_RE.search(parts[i]):
                    return city
        return ""
