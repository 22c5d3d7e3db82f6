"""
Education parsing module for extracting education entries from a resume block.

Same line state machine as experience parsing, keyed on degree lines instead
of job titles:

  - a degree line opens an entry (unless the open entry only has a school yet)
  - an institution line fills the school of the open entry, or opens a new
    entry when the open one already has a school (school-first layouts)
  - date lines set start/end dates, "City, ST" lines set the location
  - GPA/honors/coursework lines and everything else go to the description
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from resume_structurer.core.dates import DATE_RANGE_RE, is_date_line, parse_date_range, strip_dates
from resume_structurer.core.line_shapes import LineShapes, is_bullet_line, split_header, strip_bullet
from resume_structurer.core.schemas import Education

logger = logging.getLogger(__name__)


# ===== EDUCATION-SPECIFIC DETAIL KEYWORDS =====
# Lines starting with these describe the open entry, they never open one

EDUCATION_DETAIL_KEYWORDS = (
    "major:",
    "minor:",
    "focus:",
    "concentration",
    "honors:",
    "dean's list",
    "cum laude",
    "magna cum laude",
    "summa cum laude",
    "gpa",
    "scholarship",
    "relevant coursework",
    "coursework:",
    "thesis",
)

FROM_AT_RE = re.compile(r"\s+(?:at|from|@)\s+", re.IGNORECASE)


def is_education_detail(text: str) -> bool:
    """
    Check if a line is an education detail (GPA, honors, coursework).

    Args:
        text: Line text without bullet

    Returns:
        True if the line starts with (or is) a detail keyword
    """
    low = text.lower().strip()
    return any(low.startswith(k) for k in EDUCATION_DETAIL_KEYWORDS) or "gpa" in low.split(":")[0]


@dataclass
class _Draft:
    school: str = ""
    degree: str = ""
    location: str = ""
    startDate: str = ""
    endDate: str = ""
    description: List[str] = field(default_factory=list)

    def has_dates(self) -> bool:
        return bool(self.startDate or self.endDate)

    def to_model(self) -> Education:
        return Education(
            school=self.school,
            degree=self.degree,
            location=self.location,
            startDate=self.startDate,
            endDate=self.endDate,
            description="\n".join(self.description),
        )


class EducationParser:
    def __init__(self, shapes: LineShapes):
        self.shapes = shapes

    def parse(self, lines: List[str]) -> List[Education]:
        drafts: List[_Draft] = []
        current: Optional[_Draft] = None

        for raw in lines:
            s = raw.strip()
            if not s:
                continue
            text = strip_bullet(s)
            if not text:
                continue

            if current is not None and (is_education_detail(text) or (is_bullet_line(s) and not self._is_degree(text))):
                current.description.append(text)
                continue

            if DATE_RANGE_RE.search(text) or is_date_line(text):
                current = self._handle_dated_line(text, current, drafts)
                continue

            if current is not None and not current.location and self.shapes.is_location_line(text):
                current.location = text
                continue

            if self._is_degree(text):
                if current is not None and not current.degree and (current.school and not current.description):
                    self._apply_header(current, text)
                    continue
                current = self._open(text, drafts)
                continue

            if self._is_school(text):
                if current is not None and not current.school:
                    self._fill_school(current, text)
                    continue
                current = self._open(text, drafts)
                continue

            if current is not None and current.degree and not current.school and self._is_school_candidate(text):
                self._fill_school(current, text)
                continue

            if current is not None:
                current.description.append(text)
            else:
                logger.debug("Education line before any entry dropped: %r", text[:60])

        entries = [d.to_model() for d in drafts if d.school or d.degree]
        return [e.model_copy(update={"id": i}) for i, e in enumerate(entries, start=1)]

    # ===== HELPERS =====

    def _is_degree(self, text: str) -> bool:
        return self.shapes.is_degree_line(text) and not is_education_detail(text)

    def _is_school(self, text: str) -> bool:
        return self.shapes.is_institution_line(text) and not self.shapes.has_degree_keyword(text)

    def _is_school_candidate(self, text: str) -> bool:
        if text.endswith(".") or len(text.split()) > 8:
            return False
        return text[:1].isupper() and not self.shapes.is_contact_line(text)

    def _fill_school(self, draft: _Draft, text: str) -> None:
        parts = split_header(text)
        if not parts:
            return
        if "," in parts[0] and len(parts) == 1:
            head, tail = parts[0].split(",", 1)
            if self.shapes.is_location_line(tail.strip()) or self.shapes.find_country(tail.strip()):
                parts = [head.strip(), tail.strip()]
        draft.school = parts[0]
        for part in parts[1:]:
            if not draft.location and (self.shapes.is_location_line(part) or self.shapes.find_country(part) == part):
                draft.location = part

    def _open(self, header: str, drafts: List[_Draft]) -> _Draft:
        draft = _Draft()
        self._apply_header(draft, header)
        drafts.append(draft)
        return draft

    def _apply_header(self, draft: _Draft, header: str) -> None:
        """
        Fill degree/school/location from one header line.

        "BSc Computer Science, University of Leeds" -> degree, school
        "MIT | Master of Science | Cambridge, MA"   -> school, degree, location
        "Bachelor of Arts from Yale University"     -> degree, school
        """
        m = FROM_AT_RE.search(header)
        if m and self.shapes.has_degree_keyword(header[: m.start()]):
            draft.degree = draft.degree or header[: m.start()].strip(" ,")
            self._fill_school(draft, header[m.end():])
            return

        parts = split_header(header)
        if len(parts) == 1 and ", " in header:
            head, tail = header.split(", ", 1)
            if self.shapes.has_institution_keyword(tail) or self.shapes.has_institution_keyword(head):
                parts = [head, tail]

        for part in parts:
            if not draft.degree and self.shapes.has_degree_keyword(part):
                draft.degree = part
            elif not draft.school and self.shapes.has_institution_keyword(part):
                self._fill_school(draft, part)
            elif not draft.location and self.shapes.is_location_line(part):
                draft.location = part
            elif not draft.school and not draft.degree:
                draft.degree = part
            elif not draft.school:
                draft.school = part
        if not draft.degree and not draft.school:
            draft.degree = header

    def _handle_dated_line(self, text: str, current: Optional[_Draft], drafts: List[_Draft]) -> Optional[_Draft]:
        start, end = parse_date_range(text)
        rest = strip_dates(text)

        if rest and (self._is_degree(rest) or self._is_school(rest)):
            opens_new = current is None or (
                current.degree and current.school
            ) or (self._is_degree(rest) and current.degree) or (self._is_school(rest) and current.school)
            if opens_new:
                current = self._open(rest, drafts)
            else:
                self._apply_header(current, rest)
        elif current is None:
            return None
        elif rest:
            if not current.location and (self.shapes.is_location_line(rest) or len(rest.split()) <= 3):
                current.location = rest
            else:
                current.description.append(text)
                return current

        if current.has_dates() and current.description:
            current.description.append(text)
        else:
            current.startDate, current.endDate = start, end
        return current
