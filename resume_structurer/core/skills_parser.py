"""
Skills extraction.

The block is split through a delimiter cascade (list punctuation and
newlines, then " and ", then " & ", then " + "), each candidate is split into
name/level when it carries a proficiency hint, and finally filtered through
the skill-shape validator.
"""

import logging
import re
from typing import Iterable, List, Set, Tuple

from resume_structurer.core.config import ParserConfig
from resume_structurer.core.dates import is_date_shaped
from resume_structurer.core.line_shapes import (
    URL_RE,
    LineShapes,
    is_phone_shaped,
    normalize_heading,
    strip_bullet,
)
from resume_structurer.core.schemas import Skill

logger = logging.getLogger(__name__)

PRIMARY_DELIMITERS = ",•·|;▪●◦\n"
SECONDARY_SPLITS = (
    re.compile(r"\s+and\s+", re.IGNORECASE),
    re.compile(r"\s+&\s+"),
    re.compile(r"\s+\+\s+"),
)

LABEL_PREFIX_RE = re.compile(r"^([A-Za-z][A-Za-z /&-]{1,40}):\s*(.+)$")

LEVEL_WORDS = (
    "beginner", "basic", "elementary", "novice", "intermediate", "advanced",
    "expert", "proficient", "skilled", "master", "familiar", "competent",
    "fluent", "native", "strong", "working knowledge",
)
LEVEL_WORD_RE = re.compile(rf"\b({'|'.join(re.escape(w) for w in LEVEL_WORDS)})\b", re.IGNORECASE)
PAREN_LEVEL_RE = re.compile(r"^(.+?)\s*\(([^()]+)\)\s*$")
DASH_LEVEL_RE = re.compile(r"^(.+?)\s*(?:\s[-–—]\s|:)\s*(.+)$")
PERCENT_RE = re.compile(r"^(.+?)\s*[-–:]?\s*(\d{1,3}\s*%)$")
RATING_RE = re.compile(r"^(.+?)\s*[-–:]?\s*(\d{1,2}\s*/\s*\d{1,2})$")


def split_primary(text: str) -> List[str]:
    """Split on list delimiters, ignoring delimiters inside parentheses."""
    parts: List[str] = []
    depth = 0
    buf: List[str] = []
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")" and depth:
            depth -= 1
        if ch in PRIMARY_DELIMITERS and depth == 0:
            parts.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    parts.append("".join(buf))
    return [p.strip() for p in parts if p.strip()]


def split_level(token: str) -> Tuple[str, str]:
    """
    Separate an embedded proficiency hint from a skill token.

    Examples:
      "React (Advanced)"     -> ("React", "Advanced")
      "Python - Expert"      -> ("Python", "Expert")
      "Photoshop 80%"        -> ("Photoshop", "80%")
      "Excel (4/5)"          -> ("Excel", "4/5")
      "Angular v15"          -> ("Angular v15", "")
      "Advanced SQL"         -> ("SQL", "Advanced")
      "Docker"               -> ("Docker", "")
    """
    s = token.strip()

    m = PAREN_LEVEL_RE.match(s)
    if m:
        inner = m.group(2).strip()
        if LEVEL_WORD_RE.search(inner) or re.fullmatch(r"\d{1,3}\s*%|\d{1,2}\s*/\s*\d{1,2}", inner):
            return m.group(1).strip(), inner
        return s, ""

    m = PERCENT_RE.match(s) or RATING_RE.match(s)
    if m:
        return m.group(1).strip(), m.group(2).replace(" ", "")

    m = DASH_LEVEL_RE.match(s)
    if m and LEVEL_WORD_RE.fullmatch(m.group(2).strip()):
        return m.group(1).strip(), m.group(2).strip()

    m = LEVEL_WORD_RE.match(s)
    if m and len(s) > m.end():
        rest = s[m.end():].strip(" -:")
        if rest:
            return rest, m.group(1)

    return s, ""


class SkillsParser:
    def __init__(self, config: ParserConfig, shapes: LineShapes, heading_aliases: Iterable[str] = ()):
        self.config = config
        self.shapes = shapes
        self.heading_aliases: Set[str] = set(heading_aliases)

    def split(self, text: str) -> List[str]:
        tokens: List[str] = []
        for raw in (text or "").split("\n"):
            line = strip_bullet(raw)
            if not line:
                continue
            m = LABEL_PREFIX_RE.match(line)
            if m and len(m.group(1).split()) <= 4:
                line = m.group(2)
            pieces = split_primary(line)
            for pattern in SECONDARY_SPLITS:
                pieces = [p.strip() for piece in pieces for p in pattern.split(piece) if p.strip()]
            tokens.extend(strip_bullet(p).strip(" .") for p in pieces)
        return [t for t in tokens if t]

    def is_skill_shape(self, name: str) -> bool:
        """3-50 chars with a letter, and not a date, phone, email or URL."""
        s = (name or "").strip()
        if not (self.config.skill_min_length <= len(s) <= self.config.skill_max_length):
            return False
        if not any(c.isalpha() for c in s):
            return False
        if is_date_shaped(s) or is_phone_shaped(s):
            return False
        return not (self.shapes.contains_email(s) or URL_RE.search(s))

    def is_valid_skill(self, name: str) -> bool:
        """
        Skill-shape predicate for heuristic candidates: on top of the basic
        shape, not a heading, company, education term or person name.
        """
        s = (name or "").strip()
        if not self.is_skill_shape(s):
            return False
        if len(s.split()) > 6 or s.endswith("."):
            return False
        if normalize_heading(s) in self.heading_aliases:
            return False
        shapes = self.shapes
        if shapes.has_company_suffix(s) or shapes.has_degree_keyword(s) or shapes.has_institution_keyword(s):
            return False
        name_hit = shapes.match_name(s)
        if name_hit and shapes.is_common_first_name(name_hit[0]):
            return False
        return True

    def parse(self, text: str) -> List[Skill]:
        skills: List[Skill] = []
        seen: Set[str] = set()
        for token in self.split(text):
            name, level = split_level(token)
            name = name.strip(" -:;,")
            if not self.is_valid_skill(name):
                logger.debug("Rejected skill candidate %r", token[:50])
                continue
            key = name.lower()
            if key in seen:
                continue
            seen.add(key)
            skills.append(Skill(id=len(skills) + 1, name=name, level=level))
        return skills

    def scan_keywords(self, text: str) -> List[Skill]:
        """Full-text fallback: configured skill keywords mentioned anywhere."""
        skills: List[Skill] = []
        seen: Set[str] = set()
        for kw in self.config.skill_keywords:
            m = re.search(rf"(?<![A-Za-z]){re.escape(kw)}(?![A-Za-z])", text or "", re.IGNORECASE)
            if not m:
                continue
            name = m.group(0)
            if name.lower() in seen or not self.is_valid_skill(name):
                continue
            seen.add(name.lower())
            skills.append(Skill(id=len(skills) + 1, name=name))
        return skills
