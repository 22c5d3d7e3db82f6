"""
Work experience extraction.

A small state machine over the lines of the experience block:

  - a job-title line opens a new entry ("Software Engineer",
    "Engineer at Acme", "Engineer | Acme Corp | Jan 2020 - Present")
  - the line after a title becomes the company, unless it is a title,
    a date or a location itself
  - a date line (or a header carrying a range) sets start/end dates
  - a "City, ST" line sets the location
  - everything else, bullets included, accumulates into the description

Company-first layouts ("Acme Corp" then "Software Engineer") are handled by
letting a title fill an entry that so far only has a company.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from resume_structurer.core.dates import DATE_RANGE_RE, is_date_line, parse_date_range, strip_dates
from resume_structurer.core.line_shapes import LineShapes, is_bullet_line, split_header, strip_bullet
from resume_structurer.core.schemas import Experience

logger = logging.getLogger(__name__)

AT_RE = re.compile(r"\s+(?:at|@)\s+", re.IGNORECASE)


@dataclass
class _Draft:
    jobTitle: str = ""
    company: str = ""
    location: str = ""
    startDate: str = ""
    endDate: str = ""
    description: List[str] = field(default_factory=list)

    def has_dates(self) -> bool:
        return bool(self.startDate or self.endDate)

    def is_bare(self) -> bool:
        return not (self.description or self.has_dates())

    def to_model(self) -> Experience:
        return Experience(
            jobTitle=self.jobTitle,
            company=self.company,
            location=self.location,
            startDate=self.startDate,
            endDate=self.endDate,
            description="\n".join(self.description),
        )


class ExperienceParser:
    def __init__(self, shapes: LineShapes):
        self.shapes = shapes

    def parse(self, lines: List[str]) -> List[Experience]:
        drafts: List[_Draft] = []
        current: Optional[_Draft] = None

        for raw in lines:
            s = raw.strip()
            if not s:
                continue
            text = strip_bullet(s)
            if not text:
                continue

            if is_bullet_line(s) and current is not None:
                current.description.append(text)
                continue

            if DATE_RANGE_RE.search(text) or is_date_line(text):
                current = self._handle_dated_line(text, current, drafts)
                continue

            if current is not None and current.jobTitle and not current.company and self._is_company_candidate(text):
                self._fill_company(current, text)
                continue

            if current is not None and not current.location and self.shapes.is_location_line(text):
                current.location = text
                continue

            if self.shapes.is_job_title_line(text):
                if current is not None and current.company and not current.jobTitle and current.is_bare():
                    current.jobTitle = text
                    continue
                current = self._open(text, drafts)
                continue

            if self.shapes.is_company_line(text) and (current is None or (current.has_dates() and current.description)):
                current = _Draft(company=text)
                drafts.append(current)
                continue

            if current is not None:
                current.description.append(text)
            else:
                logger.debug("Experience line before any entry dropped: %r", text[:60])

        entries = [d.to_model() for d in drafts if d.jobTitle or d.company]
        return [e.model_copy(update={"id": i}) for i, e in enumerate(entries, start=1)]

    # ===== HELPERS =====

    def _is_company_candidate(self, text: str) -> bool:
        if self.shapes.is_job_title_line(text) or self.shapes.is_location_line(text):
            return False
        if text.endswith(".") or len(text.split()) > 8:
            return False
        return not (self.shapes.contains_email(text) or self.shapes.is_contact_line(text))

    def _fill_company(self, draft: _Draft, text: str) -> None:
        parts = split_header(text)
        if not parts:
            return
        draft.company = parts[0]
        for part in parts[1:]:
            if not draft.location and self.shapes.is_location_line(part):
                draft.location = part

    def _open(self, header: str, drafts: List[_Draft]) -> _Draft:
        draft = _Draft()
        self._apply_header(draft, header)
        drafts.append(draft)
        return draft

    def _apply_header(self, draft: _Draft, header: str) -> None:
        """
        Fill title/company/location from one header line.

        "Senior Engineer at Acme Corp"         -> title, company
        "Senior Engineer | Acme Corp | Remote" -> title, company, location
        "Senior Engineer, Acme Corp"           -> title, company
        """
        m = AT_RE.search(header)
        if m:
            draft.jobTitle = header[: m.start()].strip(" ,")
            rest = split_header(header[m.end():])
            if rest:
                draft.company = rest[0]
            for part in rest[1:]:
                if self.shapes.is_location_line(part):
                    draft.location = part
            return

        parts = split_header(header)
        if len(parts) == 1 and ", " in header:
            head, tail = header.split(", ", 1)
            if self.shapes.is_job_title_line(head) and not self.shapes.is_location_line(tail):
                parts = [head] + [p.strip() for p in tail.split(", ", 1)]

        for part in parts:
            if not draft.jobTitle and self.shapes.is_job_title_line(part):
                draft.jobTitle = part
            elif not draft.location and self.shapes.is_location_line(part):
                draft.location = part
            elif not draft.company:
                draft.company = part
        if not draft.jobTitle and not draft.company:
            draft.jobTitle = header

    def _handle_dated_line(self, text: str, current: Optional[_Draft], drafts: List[_Draft]) -> Optional[_Draft]:
        start, end = parse_date_range(text)
        rest = strip_dates(text)

        if rest and self.shapes.is_job_title_line(split_header(rest)[0] if split_header(rest) else rest):
            # A full header with dates on one line starts a new entry
            if not (current is not None and current.company and not current.jobTitle and current.is_bare()):
                current = self._open(rest, drafts)
            else:
                self._apply_header(current, rest)
        elif current is None:
            if not rest:
                return None
            current = _Draft()
            self._apply_header(current, rest)
            drafts.append(current)
        elif rest:
            if not current.location and self.shapes.is_location_line(rest):
                current.location = rest
            elif current.jobTitle and not current.company and self._is_company_candidate(rest):
                self._fill_company(current, rest)
            elif not current.location and len(rest.split()) <= 4 and rest[:1].isupper():
                current.location = rest
            else:
                current.description.append(text)
                return current

        if current.has_dates() and current.description:
            current.description.append(text)
        else:
            current.startDate, current.endDate = start, end
        return current
