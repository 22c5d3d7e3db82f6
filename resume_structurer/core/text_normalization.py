"""
Text normalization for extracted resume text.

Extractors hand us whatever they produced: sometimes clean UTF-8, sometimes a
byte soup from a badly encoded PDF or a legacy Word export. Everything
downstream (section detection, extraction, the evidence filter) works on the
output of clean_text(), so this module guarantees:

- the result is valid Unicode (unrecoverable bytes are dropped, never raised)
- no control, zero-width or replacement characters
- "\\n" line endings, at most one blank line between blocks
- single spaces between words, newlines untouched
"""

import logging
import re
from typing import Union

from resume_structurer.core.errors import EncodingError

logger = logging.getLogger(__name__)


# ============================================================================
# Encoding
# ============================================================================

# Tried in order; cp1252 rejects a handful of undefined bytes, so genuinely
# broken input still falls through to the lossy decode below.
LEGACY_ENCODINGS = ("utf-8", "cp1252")

UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")


def _strict_decode(raw: bytes) -> str:
    if raw.startswith(UTF16_BOMS):
        try:
            return raw.decode("utf-16")
        except UnicodeDecodeError:
            pass
    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]

    for encoding in LEGACY_ENCODINGS:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise EncodingError(f"no clean decode for {len(raw)} bytes")


def _decode_bytes(raw: bytes) -> str:
    try:
        return _strict_decode(raw)
    except EncodingError as exc:
        logger.debug("%s, dropping invalid sequences", exc)
        return raw.decode("utf-8", errors="ignore")


def sanitize_encoding(raw: Union[str, bytes, None]) -> str:
    """
    Return valid Unicode text for `raw`.

    Strings that carry lone surrogates (e.g. produced with errors="surrogateescape")
    are turned back into bytes and decoded like any other byte input.
    """
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return _decode_bytes(raw)

    try:
        raw.encode("utf-8")
        return raw
    except UnicodeEncodeError:
        pass

    try:
        data = raw.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        data = raw.encode("utf-8", errors="ignore")
    return _decode_bytes(data)


# ============================================================================
# Character and whitespace cleanup
# ============================================================================

LINE_BREAK_RE = re.compile(r"\r\n|\r|[\u2028\u2029\f\v]")
CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")
INVISIBLE_RE = re.compile(r"[\u00ad\u200b-\u200f\u2060-\u2064\ufeff\ufffd]")
HORIZONTAL_WS_RE = re.compile(r"[ \t\u00a0\u1680\u2000-\u200a\u202f\u205f\u3000]+")
EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")


def strip_invisible(text: str) -> str:
    """Remove control, zero-width and replacement characters (keeps \\n and \\t)."""
    text = CONTROL_RE.sub("", text)
    return INVISIBLE_RE.sub("", text)


def normalize_whitespace(text: str) -> str:
    """
    Normalize line endings and spacing without merging lines.

    Examples:
      "a\\r\\nb"          -> "a\\nb"
      "a  \\t b"         -> "a b"
      "a\\n\\n\\n\\nb"      -> "a\\n\\nb"
    """
    text = LINE_BREAK_RE.sub("\n", text)
    text = HORIZONTAL_WS_RE.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = EXTRA_BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def clean_text(raw: Union[str, bytes, None]) -> str:
    """Full text normalization pass. Never raises for any str/bytes input."""
    text = sanitize_encoding(raw)
    # Line breaks first: \f and \v are control characters too
    text = LINE_BREAK_RE.sub("\n", text)
    text = strip_invisible(text)
    return normalize_whitespace(text)


def collapse_spaces(text: str) -> str:
    """Collapse all whitespace (including newlines) to single spaces."""
    return " ".join((text or "").split())
