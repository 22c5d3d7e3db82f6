"""
Final field normalization.

- deep clean of every string field: bullets, emoji/pictographs, dangling
  punctuation, runs of spaces (newlines inside descriptions are kept)
- dates to "Mon YYYY" / "YYYY" / "Present"
- phone numbers: digits and "+", 10-digit numbers as XXX-XXX-XXXX
- emails lower-cased, cleared when not a valid address
- skill levels mapped onto the canonical vocabulary
- case-insensitive de-duplication of every list, then sequential ids

Every function here is idempotent.
"""

import re
from typing import Any, Callable, Dict, Hashable, List, Sequence, TypeVar

from pydantic import BaseModel

from resume_structurer.core.dates import normalize_date, parse_date_range
from resume_structurer.core.line_shapes import digits_of, url_key
from resume_structurer.core.schemas import ParsedResume, Skill, with_sequential_ids

T = TypeVar("T", bound=BaseModel)

# Fields never touched by the deep clean
RAW_FIELDS = {"url", "email"}

EMOJI_RE = re.compile(
    "[\U0001F000-\U0001FAFF\u2600-\u27BF\u2B00-\u2BFF\uFE0F\u200D\u20E3]+"
)
BULLET_GLYPHS = "•·▪●◦‣■□➢➤►▸✓✔❖"
LEADING_BULLET_RE = re.compile(rf"^[\s{BULLET_GLYPHS}*\-–—>]+(?=\S)")
EMBEDDED_BULLET_RE = re.compile(rf"\s*[{BULLET_GLYPHS}]+\s*")
DANGLING_PUNCT_RE = re.compile(r"^[\s,;:|/\\]+|[\s,;:|/\\\-–—]+$")
SPACES_RE = re.compile(r"[ \t]+")

EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

CANONICAL_LEVELS = ("Beginner", "Basic", "Intermediate", "Advanced", "Expert", "Proficient", "Skilled", "Master")
LEVEL_SYNONYMS: Dict[str, str] = {
    "beginner": "Beginner", "novice": "Beginner", "elementary": "Beginner", "entry": "Beginner",
    "familiar": "Beginner",
    "basic": "Basic", "working knowledge": "Basic", "fundamental": "Basic", "fundamentals": "Basic",
    "intermediate": "Intermediate", "competent": "Intermediate", "moderate": "Intermediate",
    "medium": "Intermediate", "good": "Intermediate",
    "advanced": "Advanced", "strong": "Advanced", "very good": "Advanced",
    "expert": "Expert", "excellent": "Expert", "fluent": "Expert", "native": "Expert",
    "proficient": "Proficient", "proficiency": "Proficient",
    "skilled": "Skilled",
    "master": "Master", "mastery": "Master",
}
PERCENT_LEVEL_RE = re.compile(r"^(\d{1,3})\s*%$")
RATING_LEVEL_RE = re.compile(r"^(\d{1,2})\s*/\s*(\d{1,2})$")
VERSION_LEVEL_RE = re.compile(r"^v?\d+(?:\.\d+)*$", re.IGNORECASE)


# ===== STRINGS =====

def clean_string(value: str) -> str:
    """
    Strip bullets, emoji and dangling punctuation; collapse spaces per line.

    Examples:
      "• Python 🚀"           -> "Python"
      "Acme Corp,"            -> "Acme Corp"
      "Led team • shipped v2" -> "Led team shipped v2"
      "Built tools.\\n- Ran CI" -> "Built tools.\\nRan CI"
    """
    if not value:
        return ""
    out: List[str] = []
    for line in value.split("\n"):
        s = EMOJI_RE.sub(" ", line)
        s = LEADING_BULLET_RE.sub("", s)
        s = EMBEDDED_BULLET_RE.sub(" ", s)
        s = SPACES_RE.sub(" ", s).strip()
        s = DANGLING_PUNCT_RE.sub("", s).strip()
        if s:
            out.append(s)
    return "\n".join(out)


def deep_clean(value: Any, field: str = "") -> Any:
    """Apply clean_string to every string field of a model, list or dict."""
    if isinstance(value, str):
        return value.strip() if field in RAW_FIELDS else clean_string(value)
    if isinstance(value, BaseModel):
        update = {name: deep_clean(getattr(value, name), name) for name in type(value).model_fields}
        return value.model_copy(update=update)
    if isinstance(value, list):
        return [deep_clean(v, field) for v in value]
    if isinstance(value, dict):
        return {k: deep_clean(v, k) for k, v in value.items()}
    return value


# ===== SCALARS =====

def format_phone(phone: str) -> str:
    """
    "(555) 123-4567"   -> "555-123-4567"
    "44 20 7946 0958"  -> "+442079460958"
    "+1 555 123 4567"  -> "+15551234567"
    """
    s = (phone or "").strip()
    digits = digits_of(s)
    if not digits:
        return ""
    has_plus = s.startswith("+")
    if len(digits) == 10 and not has_plus:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    if len(digits) > 10 or has_plus:
        return f"+{digits}"
    return digits


def normalize_email(email: str) -> str:
    s = (email or "").strip().lower()
    return s if EMAIL_RE.match(s) else ""


def normalize_skill_level(level: str) -> str:
    """
    Map a raw level onto Beginner/Basic/Intermediate/Advanced/Expert/
    Proficient/Skilled/Master. Percentages and N/M ratings map to bands,
    anything else is title-cased. A version string ("v18") is not a level
    and gives ""; normalize_resume moves it back onto the skill name.
    """
    s = " ".join((level or "").split())
    if not s:
        return ""
    if s in CANONICAL_LEVELS:
        return s
    low = s.lower()
    if low in LEVEL_SYNONYMS:
        return LEVEL_SYNONYMS[low]

    pct = None
    m = PERCENT_LEVEL_RE.match(s)
    if m:
        pct = int(m.group(1))
    m = RATING_LEVEL_RE.match(s)
    if m and int(m.group(2)) > 0:
        pct = round(100 * int(m.group(1)) / int(m.group(2)))
    if pct is not None:
        return _level_for_percent(pct)

    if VERSION_LEVEL_RE.match(s):
        return ""
    for word in sorted(LEVEL_SYNONYMS, key=len, reverse=True):
        if re.search(rf"\b{re.escape(word)}\b", low):
            return LEVEL_SYNONYMS[word]
    return s.title()


def _level_for_percent(pct: int) -> str:
    if pct >= 90:
        return "Expert"
    if pct >= 75:
        return "Advanced"
    if pct >= 50:
        return "Intermediate"
    if pct >= 25:
        return "Basic"
    return "Beginner"


def _normalize_skill(skill: Skill) -> Skill:
    level = skill.level.strip()
    if VERSION_LEVEL_RE.match(level) and not skill.name.endswith(level):
        return skill.model_copy(update={"name": f"{skill.name} {level}", "level": ""})
    return skill.model_copy(update={"level": normalize_skill_level(level)})


def _normalize_dates(item: T) -> T:
    start, end = item.startDate, item.endDate
    # A whole range stuffed into one field
    if start and not end and re.search(r"\s-\s|[–—]|\bto\b", start):
        start, end = parse_date_range(start)
    elif end and not start and re.search(r"\s-\s|[–—]|\bto\b", end):
        start, end = parse_date_range(end)
    return item.model_copy(update={"startDate": normalize_date(start), "endDate": normalize_date(end)})


# ===== LISTS =====

def dedupe(items: Sequence[T], key: Callable[[T], Hashable]) -> List[T]:
    seen = set()
    out: List[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        out.append(item)
    return out


def _low(*values: str) -> tuple:
    return tuple(" ".join((v or "").lower().split()) for v in values)


def normalize_resume(resume: ParsedResume) -> ParsedResume:
    r: ParsedResume = deep_clean(resume)

    contact = r.contact.model_copy(update={
        "phone": format_phone(r.contact.phone),
        "email": normalize_email(r.contact.email),
    })
    experiences = [_normalize_dates(e) for e in r.experiences if e.jobTitle or e.company]
    education = [_normalize_dates(e) for e in r.education if e.school or e.degree]
    skills = [_normalize_skill(s) for s in r.skills if s.name]

    hobbies = dedupe([h for h in r.hobbies if h], key=lambda h: _low(h))

    return r.model_copy(update={
        "contact": contact,
        "experiences": with_sequential_ids(dedupe(experiences, key=lambda e: _low(e.jobTitle, e.company, e.startDate))),
        "education": with_sequential_ids(dedupe(education, key=lambda e: _low(e.school, e.degree))),
        "skills": with_sequential_ids(dedupe(skills, key=lambda s: _low(s.name))),
        "languages": with_sequential_ids(dedupe([x for x in r.languages if x.name], key=lambda x: _low(x.name))),
        "certifications": with_sequential_ids(dedupe([x for x in r.certifications if x.title], key=lambda x: _low(x.title))),
        "awards": with_sequential_ids(dedupe([x for x in r.awards if x.title], key=lambda x: _low(x.title))),
        "websites": with_sequential_ids(dedupe([w for w in r.websites if w.url], key=lambda w: url_key(w.url))),
        "references": with_sequential_ids(dedupe([x for x in r.references if x.name], key=lambda x: _low(x.name))),
        "hobbies": hobbies,
    })
