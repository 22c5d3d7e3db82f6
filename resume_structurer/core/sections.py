"""
Section detection: split cleaned resume text into named blocks.

Two strategies, in order:

1. Heading-based. A line whose normalized text is a configured alias opens a
   section ("EXPERIENCE", "## Skills", "**Education:**", "2. Languages",
   "Skills: Python, SQL"). Content runs until the next recognized heading.
2. Content-based. Lines not claimed by any heading (the preamble, or the
   whole document when it has no headings at all) are classified one by one
   and absorbed into runs, but only for kinds that no heading claimed.

Placeholder/template boilerplate is dropped before either strategy runs.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from resume_structurer.core.config import SECTION_ORDER, ParserConfig, SectionKind
from resume_structurer.core.dates import is_date_line
from resume_structurer.core.line_shapes import (
    LineShapes,
    is_boundary_line,
    is_bullet_line,
    normalize_heading,
)

logger = logging.getLogger(__name__)

# "Skills: Python, SQL" / "Languages | English, French"
INLINE_HEADING_RE = re.compile(r"^([A-Za-z#*_][A-Za-z &/'*_]{1,40}?)\s*[:|]\s*(\S.*)$")

MAX_HEADING_CHARS = 60

# Kinds the content-based fallback knows how to recognize
CONTENT_KINDS = (
    SectionKind.CONTACT,
    SectionKind.EDUCATION,
    SectionKind.EXPERIENCE,
    SectionKind.SKILLS,
    SectionKind.SUMMARY,
)


@dataclass
class DetectedSections:
    """Lines per section kind, plus how each kind was found."""
    blocks: Dict[SectionKind, List[str]] = field(default_factory=dict)
    headed: Set[SectionKind] = field(default_factory=set)
    content_detected: Set[SectionKind] = field(default_factory=set)

    def lines(self, kind: SectionKind) -> List[str]:
        return self.blocks.get(kind, [])

    def text(self, kind: SectionKind) -> str:
        return "\n".join(self.lines(kind)).strip()

    def has(self, kind: SectionKind) -> bool:
        return any(line.strip() for line in self.lines(kind))

    def add(self, kind: SectionKind, lines: List[str]) -> None:
        existing = self.blocks.setdefault(kind, [])
        if existing and lines and existing[-1].strip():
            existing.append("")
        existing.extend(lines)

    def found_kinds(self) -> List[SectionKind]:
        return [k for k in SectionKind if self.has(k)]


class SectionDetector:
    def __init__(self, config: ParserConfig, aliases: Dict[SectionKind, Tuple[str, ...]], shapes: LineShapes):
        self.config = config
        self.shapes = shapes
        # First registration wins, so SECTION_ORDER settles ambiguous aliases
        self.alias_lookup: Dict[str, SectionKind] = {}
        for kind in SECTION_ORDER:
            for alias in aliases.get(kind, ()):
                self.alias_lookup.setdefault(alias, kind)

    # ===== HEADINGS =====

    def match_heading(self, line: str) -> Optional[Tuple[SectionKind, str]]:
        """
        Return (kind, inline_content) when `line` is a section heading.

        Examples:
          "WORK EXPERIENCE"        -> (EXPERIENCE, "")
          "Skills: Python, SQL"    -> (SKILLS, "Python, SQL")
          "Experienced engineer"   -> None
        """
        s = line.strip()
        if not s:
            return None

        if len(s) <= MAX_HEADING_CHARS:
            kind = self.alias_lookup.get(normalize_heading(s))
            if kind is not None:
                return kind, ""

        m = INLINE_HEADING_RE.match(s)
        if m:
            kind = self.alias_lookup.get(normalize_heading(m.group(1)))
            if kind is not None:
                return kind, m.group(2).strip()
        return None

    # ===== CONTENT CLASSIFICATION =====

    def classify_line(self, line: str) -> Optional[SectionKind]:
        """Single-line shape classification, strongest signal first."""
        s = line.strip()
        if not s:
            return None
        shapes = self.shapes
        if shapes.is_contact_line(s):
            return SectionKind.CONTACT
        if shapes.is_education_line(s):
            return SectionKind.EDUCATION
        if shapes.is_experience_line(s):
            return SectionKind.EXPERIENCE
        if shapes.is_skill_list_line(s):
            return SectionKind.SKILLS
        if shapes.is_narrative_sentence(s):
            return SectionKind.SUMMARY
        return None

    def _absorb_by_content(self, lines: List[str], claimed: Set[SectionKind]) -> Dict[SectionKind, List[str]]:
        """
        Group unclaimed lines into runs by line class.

        The top of the document starts in a contact run (name, headline).
        A run ends at a boundary line (ALL-CAPS, numbered, decorated or
        "Title Case:" header) or when a line of a different class appears.
        Unclassified lines, dates and bullets continue the current run.
        """
        runs: Dict[SectionKind, List[str]] = {}
        current: Optional[SectionKind] = SectionKind.CONTACT
        seen_blank = False
        header_lines = 0

        for line in lines:
            s = line.strip()
            if not s:
                seen_blank = True
                if current is not None:
                    runs.setdefault(current, []).append("")
                continue

            if is_boundary_line(s) and current is not SectionKind.CONTACT:
                current = None
                continue

            kind = self.classify_line(s)
            if kind is not None and kind not in CONTENT_KINDS:
                kind = None
            if kind is not None and kind in claimed and kind is not SectionKind.CONTACT:
                kind = None

            # Headline job titles right under the name belong to contact
            in_header = current is SectionKind.CONTACT and not seen_blank
            if in_header and kind is SectionKind.EXPERIENCE and header_lines < self.config.job_title_scan_lines:
                kind = SectionKind.CONTACT

            if kind is None or is_date_line(s):
                pass
            elif current in (SectionKind.EXPERIENCE, SectionKind.EDUCATION) and is_bullet_line(s):
                pass
            elif kind is not current:
                logger.debug("Content run switched %s -> %s at %r", current, kind, s[:40])
                current = kind

            if current is not None:
                runs.setdefault(current, []).append(s)
            if current is SectionKind.CONTACT:
                header_lines += 1

        return {k: _trim_blank(v) for k, v in runs.items() if any(x.strip() for x in v)}

    # ===== ENTRY POINT =====

    def detect(self, text: str) -> DetectedSections:
        lines = [ln for ln in (text or "").split("\n") if not (ln.strip() and self.shapes.is_placeholder(ln))]
        result = DetectedSections()

        headings: List[Tuple[int, SectionKind, str]] = []
        for i, line in enumerate(lines):
            hit = self.match_heading(line)
            if hit:
                headings.append((i, hit[0], hit[1]))

        first_heading = headings[0][0] if headings else len(lines)
        for n, (start, kind, inline) in enumerate(headings):
            end = headings[n + 1][0] if n + 1 < len(headings) else len(lines)
            body = ([inline] if inline else []) + lines[start + 1:end]
            result.add(kind, _trim_blank(body))
            result.headed.add(kind)
            logger.debug("Heading %r -> %s (%d lines)", lines[start].strip()[:40], kind.value, end - start - 1)

        preamble = lines[:first_heading]
        for kind, run in self._absorb_by_content(preamble, result.headed).items():
            if kind is SectionKind.CONTACT:
                result.blocks[kind] = run + ([""] + result.blocks[kind] if result.blocks.get(kind) else [])
            else:
                result.add(kind, run)
            result.content_detected.add(kind)

        logger.debug(
            "Detected sections: headed=%s content=%s",
            sorted(k.value for k in result.headed),
            sorted(k.value for k in result.content_detected),
        )
        return result


def _trim_blank(lines: List[str]) -> List[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]
