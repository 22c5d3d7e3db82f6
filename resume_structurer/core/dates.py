"""
Date parsing and normalization shared by the extractors, the normalizer and
the confidence scorer.

Canonical forms: "Mon YYYY", "YYYY", "Present", and ranges "A - B" built from
those. normalize_date() is idempotent: canonical input comes back unchanged,
and strings it does not recognize pass through untouched.
"""

import re
from typing import Optional, Tuple


MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
MONTHS = {abbr.lower(): i for i, abbr in enumerate(MONTH_ABBR, start=1)}

PRESENT_WORDS = {
    "present", "current", "currently", "now", "ongoing", "active", "today",
    "to date", "till date", "to present",
}

MONTH_NAME = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
# "Jan 2020", "January, 2020", "Jan-2020", "01/2020", "1.2020", "2020"
DATE_TOKEN = rf"(?:{MONTH_NAME}\.?[\s,\-]*\d{{4}}|\d{{1,2}}[/\-.]\d{{4}}|\d{{4}})"
PRESENT_TOKEN = r"(?:present|current(?:ly)?|now|ongoing|active|today)"

DATE_RANGE_RE = re.compile(
    rf"(?<![\w/])({DATE_TOKEN})\s*(?:[-–—]+|\bto\b|\buntil\b|\btill\b)\s*({DATE_TOKEN}|{PRESENT_TOKEN})\b",
    re.IGNORECASE,
)
DATE_TOKEN_RE = re.compile(rf"(?<![\w/]){DATE_TOKEN}\b", re.IGNORECASE)
SINCE_RE = re.compile(rf"\bsince\s+({DATE_TOKEN})\b", re.IGNORECASE)

# A whole line that is only a date, optionally with a short lead-in word
SINGLE_DATE_LINE_RE = re.compile(
    rf"^(?:(?:graduated|graduation|expected|completed|since|from|until|class of)\s*:?\s*)?"
    rf"\(?(?:{DATE_TOKEN}|{PRESENT_TOKEN})\)?$",
    re.IGNORECASE,
)

# Separators between the two sides of a range. A bare hyphen only counts when
# it has whitespace on one side or follows a 4-digit year, so "01-2019" and
# "Jan-2020" stay single dates.
RANGE_SPLIT_RE = re.compile(
    r"\s*[–—]+\s*|\s+-+\s*|\s*-+\s+|(?<=\d{4})-(?=\s*(?:\d{4}|[A-Za-z]))|\s+to\s+|\s+until\s+",
    re.IGNORECASE,
)

DATE_LEAD_IN_RE = re.compile(
    r"^\(?(?:graduated|graduation|expected|completed|since|from|until|class of|dates?)\)?\s*:?$",
    re.IGNORECASE,
)

MONTH_YEAR_RE = re.compile(rf"^({MONTH_NAME})\.?[\s,\-]*(\d{{4}})$", re.IGNORECASE)
NUMERIC_MONTH_YEAR_RE = re.compile(r"^(\d{1,2})[/\-.](\d{4})$")
YEAR_RE = re.compile(r"^\d{4}$")
FULL_NUMERIC_DATE_RE = re.compile(r"^\d{1,2}[/.\-]\d{1,2}[/.\-]\d{2,4}$")

CANONICAL_DATE_RE = re.compile(rf"^(?:(?:{'|'.join(MONTH_ABBR)}) \d{{4}}|\d{{4}}|Present)$")


def _normalize_single(value: str) -> str:
    s = value.strip().strip(",;")
    if not s:
        return ""
    low = " ".join(s.lower().split())

    if low in PRESENT_WORDS:
        return "Present"
    if YEAR_RE.match(s):
        return s

    m = MONTH_YEAR_RE.match(s)
    if m:
        month = MONTHS[m.group(1)[:3].lower()]
        return f"{MONTH_ABBR[month - 1]} {m.group(2)}"

    m = NUMERIC_MONTH_YEAR_RE.match(s)
    if m and 1 <= int(m.group(1)) <= 12:
        return f"{MONTH_ABBR[int(m.group(1)) - 1]} {m.group(2)}"

    return s


def normalize_date(value: Optional[str]) -> str:
    """
    Canonicalize a date or date range.

    Examples:
      "01/2019"            -> "Jan 2019"
      "january 2020"       -> "Jan 2020"
      "current"            -> "Present"
      "2019 – present"     -> "2019 - Present"
      "Jan 2020 - Present" -> "Jan 2020 - Present"  (already canonical)
      "Spring term"        -> "Spring term"         (unrecognized, unchanged)
    """
    if not value:
        return ""
    s = value.strip()
    if not s:
        return ""

    parts = RANGE_SPLIT_RE.split(s, maxsplit=1)
    if len(parts) == 2 and parts[0].strip() and parts[1].strip():
        return f"{_normalize_single(parts[0])} - {_normalize_single(parts[1])}"
    return _normalize_single(s)


def parse_date_range(text: str) -> Tuple[str, str]:
    """
    Find a date range in a line and return canonical (start, end).

    "since 2019" is an open range. A lone date is treated as the end date
    (graduation year, contract end). Returns ("", "") when nothing is found.
    """
    if not text:
        return "", ""

    m = DATE_RANGE_RE.search(text)
    if m:
        return normalize_date(m.group(1)), normalize_date(m.group(2))

    m = SINCE_RE.search(text)
    if m:
        return normalize_date(m.group(1)), "Present"

    m = DATE_TOKEN_RE.search(text)
    if m:
        return "", normalize_date(m.group(0))

    return "", ""


def is_date_line(line: str) -> bool:
    """True for lines whose job is to carry a date or date range."""
    s = line.strip()
    if not s:
        return False
    if DATE_RANGE_RE.search(s) and len(s) <= 80:
        return True
    return bool(SINGLE_DATE_LINE_RE.match(s))


def strip_dates(line: str) -> str:
    """Remove date ranges/tokens and the separators left dangling around them."""
    s = DATE_RANGE_RE.sub(" ", line)
    s = SINCE_RE.sub(" ", s)
    s = DATE_TOKEN_RE.sub(" ", s)
    s = re.sub(r"\(\s*\)", " ", s)
    s = re.sub(r"\s*[|•·]\s*$", "", s.strip())
    s = re.sub(r"^\s*[|•·,\-–—]\s*", "", s)
    s = " ".join(s.split()).strip(" ,;|-–—")
    return DATE_LEAD_IN_RE.sub("", s)


def is_date_shaped(value: str) -> bool:
    """True when the whole string is a date, a range, or a numeric d/m/y date."""
    s = (value or "").strip()
    if not s:
        return False
    if FULL_NUMERIC_DATE_RE.match(s):
        return True
    if SINGLE_DATE_LINE_RE.match(s):
        return True
    m = DATE_RANGE_RE.fullmatch(s)
    return m is not None


def is_canonical_date(value: str) -> bool:
    return bool(CANONICAL_DATE_RE.match((value or "").strip()))


def year_of(value: str) -> Optional[int]:
    """Sortable year of a canonical date ("Present" sorts last)."""
    s = (value or "").strip()
    if s == "Present":
        return 9999
    m = re.search(r"\d{4}", s)
    return int(m.group(0)) if m else None
