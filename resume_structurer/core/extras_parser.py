"""
Light parsers for the minor sections: languages, certifications, awards,
websites, references and hobbies.
"""

import re
from typing import List, Optional, Set

from resume_structurer.core.line_shapes import (
    LineShapes,
    contains_phone,
    find_urls,
    is_valid_url,
    strip_bullet,
    url_key,
)
from resume_structurer.core.schemas import Language, Reference, TitleEntry, Website
from resume_structurer.core.skills_parser import LABEL_PREFIX_RE, split_primary


LANG_PAREN_RE = re.compile(r"^(.+?)\s*\(([^()]+)\)$")
LANG_SEP_RE = re.compile(r"^(.+?)\s*(?:\s[-–—]\s|:|\s-|-\s)\s*(.+)$")

HOST_LABELS = (
    ("linkedin.com", "LinkedIn"),
    ("github.com", "GitHub"),
    ("twitter.com", "Twitter"),
    ("x.com", "Twitter"),
    ("instagram.com", "Instagram"),
)


def _items(text: str) -> List[str]:
    out: List[str] = []
    for raw in (text or "").split("\n"):
        line = strip_bullet(raw)
        if line:
            out.append(line)
    return out


# ===== LANGUAGES =====

def parse_languages(text: str, shapes: LineShapes) -> List[Language]:
    """
    "English (Native)", "French - Intermediate", "German: B2", "Native Spanish",
    or a bare comma-separated list of names.
    """
    result: List[Language] = []
    seen: Set[str] = set()
    for line in _items(text):
        m = LABEL_PREFIX_RE.match(line)
        if m and normalize_label(m.group(1)) in {"languages", "language", "spoken languages"}:
            line = m.group(2)
        for token in split_primary(line):
            parsed = _parse_language_token(token.strip(" ."), shapes)
            if parsed is None or parsed.name.lower() in seen:
                continue
            seen.add(parsed.name.lower())
            result.append(parsed.model_copy(update={"id": len(result) + 1}))
    return result


def normalize_label(label: str) -> str:
    return " ".join(label.lower().split())


def _parse_language_token(token: str, shapes: LineShapes) -> Optional[Language]:
    name, proficiency = token, ""
    m = LANG_PAREN_RE.match(token) or LANG_SEP_RE.match(token)
    if m:
        name, proficiency = m.group(1).strip(), m.group(2).strip()
    else:
        words = token.split()
        if len(words) > 1:
            known = [i for i, w in enumerate(words) if shapes.is_language_name(w)]
            if len(known) == 1:
                name = words[known[0]]
                proficiency = " ".join(w for i, w in enumerate(words) if i != known[0])

    if not name or any(c.isdigit() for c in name) or len(name.split()) > 3:
        return None
    if not any(c.isalpha() for c in name):
        return None
    return Language(name=name, proficiency=proficiency)


# ===== CERTIFICATIONS / AWARDS =====

def parse_titles(text: str) -> List[TitleEntry]:
    result: List[TitleEntry] = []
    seen: Set[str] = set()
    for line in _items(text):
        key = line.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(TitleEntry(id=len(result) + 1, title=line))
    return result


# ===== WEBSITES =====

def label_for_url(url: str) -> str:
    host = url_key(url).split("/", 1)[0]
    for domain, label in HOST_LABELS:
        if host == domain or host.endswith("." + domain):
            return label
    return "Website"


def parse_websites(text: str) -> List[Website]:
    """Every URL in `text`, schemeless ones prefixed with https://."""
    result: List[Website] = []
    seen: Set[str] = set()
    for url in find_urls(text):
        key = url_key(url)
        if key in seen or not is_valid_url(url):
            continue
        seen.add(key)
        full = url if re.match(r"^https?://", url, re.IGNORECASE) else f"https://{url}"
        result.append(Website(id=len(result) + 1, label=label_for_url(url), url=full))
    return result


# ===== REFERENCES =====

def _is_contact_info(line: str, shapes: LineShapes) -> bool:
    return shapes.contains_email(line) or contains_phone(line) or "linkedin" in line.lower()


def _single_line_reference(part: str, shapes: LineShapes) -> Optional[Reference]:
    """ "Jane Doe, Manager at Acme, jane@acme.com" """
    fields = [f.strip() for f in part.split(",") if f.strip()]
    if not fields:
        return None
    name = fields[0]
    contact = [f for f in fields[1:] if _is_contact_info(f, shapes)]
    relation = [f for f in fields[1:] if f not in contact]
    return Reference(name=name, relationship=", ".join(relation), contactInfo=", ".join(contact))


def parse_references(text: str, shapes: LineShapes) -> List[Reference]:
    """
    Group lines into name / relationship / contact info.

    Contact info (email, phone, linkedin) closes an entry; the next plain line
    opens a new one. Lines holding several entries separated by ";" or "•"
    are parsed one entry per part.
    """
    refs: List[Reference] = []
    current: Optional[Reference] = None

    for line in _items(text):
        parts = [p.strip() for p in re.split(r"\s*[;•]\s*", line) if p.strip()]
        if len(parts) > 1:
            for part in parts:
                ref = _single_line_reference(part, shapes)
                if ref:
                    refs.append(ref)
            current = None
            continue

        if _is_contact_info(line, shapes):
            if current is None:
                if "," in line and not shapes.contains_email(line.split(",", 1)[0]):
                    ref = _single_line_reference(line, shapes)
                    if ref:
                        refs.append(ref)
                continue
            current.contactInfo = f"{current.contactInfo}, {line}" if current.contactInfo else line
            continue

        if current is None or current.contactInfo:
            current = Reference(name=line)
            refs.append(current)
        elif not current.relationship:
            current.relationship = line
        else:
            current.relationship = f"{current.relationship}, {line}"

    named = [r for r in refs if r.name]
    return [r.model_copy(update={"id": i}) for i, r in enumerate(named, start=1)]


# ===== HOBBIES =====

def parse_hobbies(text: str) -> List[str]:
    hobbies: List[str] = []
    seen: Set[str] = set()
    for line in _items(text):
        m = LABEL_PREFIX_RE.match(line)
        if m and len(m.group(1).split()) <= 3:
            line = m.group(2)
        for token in split_primary(line):
            item = token.strip(" .")
            if not item or len(item.split()) > 6 or item.lower() in seen:
                continue
            seen.add(item.lower())
            hobbies.append(item)
    return hobbies
