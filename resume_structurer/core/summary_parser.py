"""
Summary extraction.

Preference order:
  1. the text of an explicit summary/profile/objective section
  2. the first unlabeled narrative paragraph (see find_narrative_paragraph)
  3. a short run of professional-narrative sentences near the top
"""

import logging
import re
from typing import Iterable, List, Optional, Set

from resume_structurer.core.config import ParserConfig, SectionKind
from resume_structurer.core.line_shapes import (
    LineShapes,
    is_all_caps_heading,
    is_bullet_line,
    normalize_heading,
)
from resume_structurer.core.text_normalization import collapse_spaces

logger = logging.getLogger(__name__)

EARLY_LINES = 15
MAX_RUN_LINES = 3
MIN_PARAGRAPH_WORDS = 10
PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")


def split_paragraphs(text: str) -> List[str]:
    return [p.strip() for p in PARAGRAPH_SPLIT_RE.split(text or "") if p.strip()]


class SummaryParser:
    def __init__(self, config: ParserConfig, shapes: LineShapes, heading_aliases: Iterable[str] = ()):
        self.config = config
        self.shapes = shapes
        self.heading_aliases: Set[str] = set(heading_aliases)

    def parse(self, section_text: str, full_text: str) -> str:
        if section_text and section_text.strip():
            return collapse_spaces(section_text)
        paragraph = self.find_narrative_paragraph(full_text)
        if paragraph:
            return paragraph
        return self.find_early_narrative(full_text)

    def _is_heading(self, line: str) -> bool:
        return normalize_heading(line) in self.heading_aliases or is_all_caps_heading(line)

    def find_narrative_paragraph(self, text: str) -> str:
        """
        First paragraph that reads like prose rather than structure.

        A qualifying paragraph is 80-900 characters (configurable), has no
        email/phone/profile link, is not a list of bullets and is not a
        heading. Headings glued to the top of a paragraph are skipped, and any
        paragraph under a heading other than a summary one is ignored.
        """
        lo, hi = self.config.narrative_min_chars, self.config.narrative_max_chars
        under_foreign_heading = False

        for para in split_paragraphs(text):
            lines = [ln.strip() for ln in para.split("\n") if ln.strip()]
            if lines and self._is_heading(lines[0]):
                kind_alias = normalize_heading(lines[0])
                under_foreign_heading = kind_alias not in self._summary_aliases()
                lines = lines[1:]
            if not lines or under_foreign_heading:
                continue
            if any(self.shapes.is_contact_line(ln) for ln in lines):
                continue
            if sum(1 for ln in lines if is_bullet_line(ln)) > len(lines) / 2:
                continue
            candidate = collapse_spaces(" ".join(lines))
            if not lo <= len(candidate) <= hi:
                continue
            if len(candidate.split()) < MIN_PARAGRAPH_WORDS:
                continue
            logger.debug("Narrative paragraph found (%d chars)", len(candidate))
            return candidate
        return ""

    def _summary_aliases(self) -> Set[str]:
        spec = self.config.sections.get(SectionKind.SUMMARY)
        aliases = {" ".join(a.lower().split()) for a in (spec.aliases if spec else [])}
        return aliases or {"summary", "profile", "objective"}

    def find_early_narrative(self, text: str) -> str:
        """Concatenate a short contiguous run of narrative sentences near the top."""
        run: List[str] = []
        for line in [ln.strip() for ln in (text or "").split("\n")][:EARLY_LINES]:
            if line and self.shapes.is_narrative_sentence(line):
                run.append(line)
                if len(run) >= MAX_RUN_LINES:
                    break
            elif run:
                break
        return collapse_spaces(" ".join(run))

    def best_matching_paragraph(self, candidate: str, text: str) -> Optional[str]:
        """Paragraph of `text` with the highest token-set Jaccard similarity to `candidate`."""
        cand = token_set(candidate)
        if not cand:
            return None
        best, best_score = None, 0.0
        for para in split_paragraphs(text):
            lines = para.split("\n")
            if len(lines) > 1 and self._is_heading(lines[0]):
                para = "\n".join(lines[1:])
            score = jaccard(cand, token_set(para))
            if score > best_score:
                best, best_score = para, score
        if best is not None and best_score >= self.config.summary_similarity_threshold:
            return collapse_spaces(best)
        return None


def token_set(text: str) -> Set[str]:
    return set(re.findall(r"\w+", (text or "").lower()))


def jaccard(a: Set[str], b: Set[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)
