"""
Line shape predicates shared by section detection, the field extractors and
the reclassifier.

Config-free shapes (URLs, bullets, heading decorations) are module level.
Everything driven by keyword lists lives on `LineShapes`, which compiles the
lists of one ParserConfig once and is then read-only.
"""

import re
from typing import Iterable, List, Optional, Tuple

from resume_structurer.core.config import ParserConfig
from resume_structurer.core.dates import is_date_line, is_date_shaped


# ===== CONFIG-FREE SHAPES =====

URL_RE = re.compile(r"(?:https?://|www\.)[^\s<>()\[\]{}\"',;|]+", re.IGNORECASE)
PROFILE_URL_RE = re.compile(
    r"(?<![\w/.])(?:[a-z]{2,3}\.)?(?:linkedin\.com|github\.com)/[^\s<>()\[\]{}\"',;|]+",
    re.IGNORECASE,
)
VALID_URL_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?[a-z0-9](?:[a-z0-9-]*[a-z0-9])?(?:\.[a-z0-9-]+)*\.[a-z]{2,}(?::\d+)?(?:[/?#][^\s]*)?$",
    re.IGNORECASE,
)

# Bullet glyphs seen in extracted resumes (word processors, PDF symbol fonts)
BULLET_CHARS = "-*•·▪●◦‣■□➢➤►▸✓✔→>–—"
BULLET_RE = re.compile(rf"^\s*[{re.escape(BULLET_CHARS)}]+\s*")
NUMBERED_ITEM_RE = re.compile(r"^\s*\d{1,2}[.)]\s+")

MARKDOWN_HEADING_RE = re.compile(r"^#{1,6}\s*(.+?)\s*#*$")
WRAPPED_HEADING_RE = re.compile(r"^(\*\*|__)(.+?)\1\s*:?$")
NUMBERED_HEADING_RE = re.compile(r"^(?:\d{1,2}|[IVX]{1,4})[.)]\s*(\S.*)$")
LETTER_SPACED_RE = re.compile(r"^(?:[A-Za-z] ){2,}[A-Za-z]$")

PHONE_CANDIDATE_PATTERNS = (
    # +44 20 7946 0958, +1 (555) 123-4567
    re.compile(r"\+\d{1,3}[\s.-]?(?:\(\d{1,4}\)[\s.-]?)?\d{1,4}(?:[\s.-]?\d{2,4}){1,4}"),
    # (555) 123-4567
    re.compile(r"\(\d{3}\)\s?\d{3}[\s.-]?\d{4}"),
    # 555-123-4567, 555.123.4567, 555 123 4567, 5551234567
    re.compile(r"(?<!\d)\d{3}[\s.-]?\d{3}[\s.-]?\d{4}(?!\d)"),
    # 123-4567
    re.compile(r"(?<![\d-])\d{3}[.-]\d{4}(?![\d-])"),
)
YEAR_RANGE_RE = re.compile(r"^(?:19|20)\d{2}\s*[-–—/]\s*(?:19|20)\d{2}$")

ADDRESS_RE = re.compile(
    r"\b\d{1,6}\s+(?:[A-Z0-9][A-Za-z0-9.'-]*\s+){0,4}"
    r"(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Court|Ct|Way|Place|Pl|Terrace|Close|Square|Sq)\b\.?",
)
US_POSTCODE_RE = re.compile(r"\b\d{5}(?:-\d{4})?\b")
UK_POSTCODE_RE = re.compile(r"\b[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}\b")
CITY_STATE_RE = re.compile(r"\b([A-Z][a-zA-Z.'-]+(?:\s[A-Z][a-zA-Z.'-]+){0,2}),\s*([A-Z]{2})\b")
LOCATION_LINE_RE = re.compile(
    r"^[A-Z][A-Za-z.'-]+(?:\s[A-Z][A-Za-z.'-]+){0,3},\s*(?:[A-Z]{2}|[A-Z][a-z]+(?:\s[A-Z][a-z]+){0,2})(?:\s+\d{5})?$"
)


def strip_bullet(line: str) -> str:
    """Remove leading bullet glyphs and "1." style list numbering."""
    s = BULLET_RE.sub("", line or "", count=1)
    s = NUMBERED_ITEM_RE.sub("", s, count=1)
    return s.strip()


def is_bullet_line(line: str) -> bool:
    return bool(BULLET_RE.match(line or "")) and bool(strip_bullet(line))


def normalize_heading(text: str) -> str:
    """
    Reduce a heading candidate to its comparable form.

    Examples:
      "## WORK EXPERIENCE"           -> "work experience"
      "**Skills:**"                  -> "skills"
      "2. Education"                 -> "education"
      "Licenses & Certifications"    -> "licenses and certifications"
      "E X P E R I E N C E"          -> "experience"
    """
    s = (text or "").strip()
    m = MARKDOWN_HEADING_RE.match(s)
    if m:
        s = m.group(1)
    m = WRAPPED_HEADING_RE.match(s)
    if m:
        s = m.group(2)
    s = BULLET_RE.sub("", s, count=1)
    m = NUMBERED_HEADING_RE.match(s)
    if m:
        s = m.group(1)
    s = s.strip().strip("*_").rstrip(":").strip()
    if LETTER_SPACED_RE.match(s):
        s = s.replace(" ", "")
    s = s.lower().replace("&", " and ")
    s = re.sub(r"[^a-z' ]+", " ", s)
    return " ".join(s.split())


def is_decorated_heading(line: str) -> bool:
    s = (line or "").strip()
    return bool(MARKDOWN_HEADING_RE.match(s) or WRAPPED_HEADING_RE.match(s))


def is_all_caps_heading(line: str) -> bool:
    s = (line or "").strip().rstrip(":").strip()
    letters = [c for c in s if c.isalpha()]
    if len(letters) < 3 or len(s) > 40 or len(s.split()) > 5:
        return False
    if any(c.isdigit() for c in s) or "@" in s:
        return False
    return s.upper() == s


def is_numbered_heading(line: str) -> bool:
    s = (line or "").strip()
    m = NUMBERED_HEADING_RE.match(s)
    if not m:
        return False
    rest = m.group(1).rstrip(":")
    return len(rest.split()) <= 4 and rest[:1].isupper()


def is_title_case_heading(line: str) -> bool:
    """Short Title-Case label terminated by a colon, e.g. "Key Projects:"."""
    s = (line or "").strip()
    if not s.endswith(":"):
        return False
    words = s.rstrip(":").split()
    if not words or len(words) > 4:
        return False
    return all(w[:1].isupper() or w.lower() in {"and", "of", "&"} for w in words)


def is_boundary_line(line: str) -> bool:
    """Lines that end an absorbed run during content-based detection."""
    return (
        is_all_caps_heading(line)
        or is_numbered_heading(line)
        or is_decorated_heading(line)
        or is_title_case_heading(line)
    )


def find_urls(text: str) -> List[str]:
    """URLs with a scheme or www, plus bare linkedin.com/github.com profile links."""
    found: List[str] = []
    for m in URL_RE.finditer(text or ""):
        found.append(m.group(0).rstrip(".,);:"))
    for m in PROFILE_URL_RE.finditer(text or ""):
        url = m.group(0).rstrip(".,);:")
        if not any(url.lower() in f.lower() for f in found):
            found.append(url)
    return found


def is_valid_url(url: str) -> bool:
    return bool(VALID_URL_RE.match((url or "").strip()))


def url_key(url: str) -> str:
    """Scheme-, www- and trailing-slash-insensitive comparison key for a URL."""
    s = (url or "").strip().lower()
    s = re.sub(r"^https?://", "", s)
    s = re.sub(r"^www\.", "", s)
    return s.rstrip("/")


def digits_of(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def is_valid_phone(candidate: str) -> bool:
    """
    Accept 7-15 digit phone numbers.

    Rejects year ranges ("2019-2022"), date shapes ("12/05/2020") and bare
    digit runs shorter than a full national number.
    """
    s = (candidate or "").strip()
    digits = digits_of(s)
    if not 7 <= len(digits) <= 15:
        return False
    if YEAR_RANGE_RE.match(s) or is_date_shaped(s):
        return False
    if s.isdigit() and len(s) < 10:
        return False
    return True


def find_phone(text: str) -> str:
    for pattern in PHONE_CANDIDATE_PATTERNS:
        for m in pattern.finditer(text or ""):
            candidate = m.group(0).strip()
            if is_valid_phone(candidate):
                return candidate
    return ""


def contains_phone(line: str) -> bool:
    return bool(find_phone(line))


def is_phone_shaped(value: str) -> bool:
    """The whole value is a phone number (used to reject phone-like skills)."""
    s = (value or "").strip()
    if not s or any(c.isalpha() for c in s):
        return False
    return is_valid_phone(s) or len(digits_of(s)) >= 7


CONNECTOR_WORDS = {"at", "of", "and", "&", "for", "in", "the", "to", "with", "on", "-", "–", "|", "@", "/"}


def _mostly_capitalized(line: str) -> bool:
    """Title-ish text: at least half the non-connector words start upper-case."""
    words = [w for w in line.split() if w.lower() not in CONNECTOR_WORDS]
    if not words:
        return False
    caps = sum(1 for w in words if not w[:1].isalpha() or w[:1].isupper())
    return caps * 2 >= len(words)


def _keyword_regex(words: Iterable[str]) -> Optional["re.Pattern[str]"]:
    cleaned = sorted({w.strip().lower() for w in words if w and w.strip()}, key=len, reverse=True)
    if not cleaned:
        return None
    alternation = "|".join(re.escape(w) for w in cleaned)
    return re.compile(rf"(?<![A-Za-z])(?:{alternation})(?![A-Za-z])", re.IGNORECASE)


class LineShapes:
    """Keyword-driven line predicates compiled from one ParserConfig."""

    def __init__(self, config: ParserConfig):
        self.config = config
        self.email_re = re.compile(config.email_pattern)
        self.name_res = [re.compile(p) for p in config.name_patterns]
        self.skill_res = [re.compile(p) for p in config.skill_patterns]
        self.placeholder_res = [re.compile(p, re.IGNORECASE) for p in config.placeholder_patterns]

        self._job_re = _keyword_regex(config.job_title_keywords)
        self._degree_re = _keyword_regex(config.degree_keywords)
        self._institution_re = _keyword_regex(config.institution_keywords)
        self._summary_re = _keyword_regex(config.summary_keywords)
        self._skill_kw_re = _keyword_regex(config.skill_keywords)
        self._country_re = _keyword_regex(config.countries)

        self.company_suffixes = {s.lower().rstrip(".") for s in config.company_suffixes}
        self.first_names = {n.lower() for n in config.common_first_names}
        self.languages = {n.lower() for n in config.common_languages}
        self.countries = list(config.countries)

    # ----- contact -----

    def find_email(self, text: str) -> str:
        m = self.email_re.search(text or "")
        return m.group(0) if m else ""

    def contains_email(self, line: str) -> bool:
        return bool(self.email_re.search(line or ""))

    def is_contact_line(self, line: str) -> bool:
        s = line or ""
        if self.contains_email(s) or contains_phone(s):
            return True
        if PROFILE_URL_RE.search(s) or ADDRESS_RE.search(s):
            return True
        return False

    def match_name(self, line: str) -> Optional[Tuple[str, str]]:
        """Split a name-shaped line into (first, last), or None."""
        s = " ".join((line or "").split())
        for pattern in self.name_res:
            m = pattern.match(s)
            if not m:
                continue
            groups = [g for g in m.groups() if g]
            if len(groups) < 2:
                continue
            return groups[0], " ".join(groups[1:])
        return None

    def is_common_first_name(self, word: str) -> bool:
        return (word or "").lower() in self.first_names

    def find_country(self, text: str) -> str:
        if not self._country_re:
            return ""
        m = self._country_re.search(text or "")
        if not m:
            return ""
        found = m.group(0).lower()
        for country in self.countries:
            if country.lower() == found:
                return country
        return m.group(0)

    # ----- keyword shapes -----

    def has_job_keyword(self, line: str) -> bool:
        return bool(self._job_re and self._job_re.search(line or ""))

    def has_degree_keyword(self, line: str) -> bool:
        return bool(self._degree_re and self._degree_re.search(line or ""))

    def has_institution_keyword(self, line: str) -> bool:
        return bool(self._institution_re and self._institution_re.search(line or ""))

    def has_summary_keyword(self, line: str) -> bool:
        return bool(self._summary_re and self._summary_re.search(line or ""))

    def has_skill_keyword(self, line: str) -> bool:
        return bool(self._skill_kw_re and self._skill_kw_re.search(line or ""))

    def has_company_suffix(self, line: str) -> bool:
        words = [w.strip(",.()").lower() for w in (line or "").split()]
        return any(w in self.company_suffixes for w in words[1:]) or (
            len(words) == 1 and words[0] in self.company_suffixes
        )

    def is_language_name(self, name: str) -> bool:
        return (name or "").strip().lower() in self.languages

    def is_placeholder(self, line: str) -> bool:
        s = strip_bullet(line)
        return any(p.search(s) for p in self.placeholder_res)

    # ----- line classes -----

    def is_job_title_line(self, line: str) -> bool:
        """Short Title-ish line carrying a job keyword, not a sentence."""
        s = strip_bullet(line)
        if not s or len(s) > 80 or len(s.split()) > 8:
            return False
        if s.endswith(".") or not s[0].isupper():
            return False
        if self.contains_email(s) or contains_phone(s) or self.has_degree_keyword(s):
            return False
        if is_date_line(s):
            return False
        return self.has_job_keyword(s) and _mostly_capitalized(s)

    def is_degree_line(self, line: str) -> bool:
        s = strip_bullet(line)
        if not s or len(s.split()) > 15:
            return False
        return self.has_degree_keyword(s)

    def is_institution_line(self, line: str) -> bool:
        s = strip_bullet(line)
        if not s or len(s.split()) > 12:
            return False
        return self.has_institution_keyword(s) and not self.has_job_keyword(s)

    def is_company_line(self, line: str) -> bool:
        s = strip_bullet(line)
        return bool(s) and len(s.split()) <= 8 and self.has_company_suffix(s)

    def is_location_line(self, line: str) -> bool:
        s = strip_bullet(line).strip()
        if s.lower() in {"remote", "hybrid", "on-site", "onsite"}:
            return True
        if not LOCATION_LINE_RE.match(s):
            return False
        return not self.has_company_suffix(s) and not self.has_job_keyword(s)

    def is_experience_line(self, line: str) -> bool:
        return self.is_job_title_line(line) or self.is_company_line(line)

    def is_education_line(self, line: str) -> bool:
        return self.is_degree_line(line) or self.is_institution_line(line)

    def is_narrative_sentence(self, line: str) -> bool:
        """Long professional-narrative sentence ("Experienced engineer with ...")."""
        s = strip_bullet(line)
        words = s.split()
        if len(words) < 8 or len(s) < 40:
            return False
        if self.is_contact_line(s):
            return False
        lower_words = sum(1 for w in words if w[:1].islower())
        if lower_words < len(words) / 2:
            return False
        return self.has_summary_keyword(s)

    def is_skill_token(self, token: str) -> bool:
        s = (token or "").strip()
        if not s or len(s) > self.config.skill_max_length:
            return False
        if self.has_skill_keyword(s) and len(s.split()) <= 4:
            return True
        return any(p.match(s) for p in self.skill_res) and len(s.split()) <= 3 and self.has_skill_keyword(s)

    def is_skill_list_line(self, line: str) -> bool:
        """A delimiter-separated run of short technical terms."""
        s = strip_bullet(line)
        if not s or s.endswith("."):
            return False
        if self.contains_email(s) or contains_phone(s) or is_date_line(s):
            return False
        parts = [p.strip() for p in re.split(r"[,|;•·]", s.split(":", 1)[-1]) if p.strip()]
        if len(parts) >= 3 and all(len(p.split()) <= 4 for p in parts):
            return sum(1 for p in parts if self.has_skill_keyword(p)) >= 1
        return len(parts) == 1 and self.is_skill_token(parts[0]) and len(s.split()) <= 3


HEADER_SPLIT_RE = re.compile(r"\s+[|•·]\s+|\s+[–—-]+\s+|\s*\|\s*")


def split_header(text: str) -> List[str]:
    """
    Split an entry header into its parts.

    "Engineer | Acme Corp | Remote" -> ["Engineer", "Acme Corp", "Remote"]
    "Engineer - Acme Corp"          -> ["Engineer", "Acme Corp"]
    """
    return [p.strip(" ,;") for p in HEADER_SPLIT_RE.split(text or "") if p.strip(" ,;")]
