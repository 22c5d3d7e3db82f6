import re
from io import BytesIO
from typing import Any, List, Tuple

import pdfplumber

from resume_structurer.core.errors import EmptyDocumentError

# Gap between two lines, in multiples of the median line step, read as a paragraph break
PARAGRAPH_GAP = 1.6


def _page_lines(page: Any, *, x_tolerance: float = 3, line_y_tolerance: float = 3) -> List[Tuple[float, str]]:
    """
    Group the page's words into (top, text) lines by their vertical position.

    Word-level extraction avoids the glued and over-spaced words that
    layout-based extract_text() produces on designed resume templates.
    """
    words = page.extract_words(
        x_tolerance=x_tolerance,
        y_tolerance=2,
        keep_blank_chars=False,
        use_text_flow=True,
    )
    if not words:
        return []

    words.sort(key=lambda w: (round(w["top"] / line_y_tolerance), w["x0"]))
    lines: List[Tuple[float, str]] = []
    current_key = None
    current_top = 0.0
    current_words: List[str] = []

    for w in words:
        key = round(w["top"] / line_y_tolerance)
        if current_key is not None and key != current_key:
            lines.append((current_top, " ".join(current_words)))
            current_words = []
        if not current_words:
            current_top = w["top"]
        current_words.append(w["text"])
        current_key = key

    if current_words:
        lines.append((current_top, " ".join(current_words)))
    return lines


def _score_lines(lines: List[Tuple[float, str]]) -> float:
    """Lower is better: penalize glued words (18+ letters) and runs of single letters."""
    tokens = re.findall(r"[A-Za-z]+", " ".join(t for _, t in lines))
    if not tokens:
        return 1e9
    glued = sum(1 for t in tokens if len(t) >= 18)
    singles = max(0, sum(1 for t in tokens if len(t) == 1) - 10)
    return glued * 10 + singles * 3


def _best_lines(page: Any) -> List[Tuple[float, str]]:
    candidates = [_page_lines(page, x_tolerance=xt) for xt in (1.5, 2, 2.5, 3)]
    return min(candidates, key=_score_lines)


def _with_paragraph_breaks(lines: List[Tuple[float, str]]) -> List[str]:
    if len(lines) < 2:
        return [t for _, t in lines]
    steps = sorted(b[0] - a[0] for a, b in zip(lines, lines[1:]) if b[0] > a[0])
    median = steps[len(steps) // 2] if steps else 0.0

    out = [lines[0][1]]
    for (prev_top, _), (top, text) in zip(lines, lines[1:]):
        if median and top - prev_top > median * PARAGRAPH_GAP:
            out.append("")
        out.append(text)
    return out


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """
    Extract the text of a PDF, one output line per visual line.

    Pages are separated by a blank line, and so are paragraphs that sit
    visibly further apart than the page's usual line spacing.

    Raises:
        EmptyDocumentError: the PDF has no extractable text (scanned image)
    """
    pages: List[str] = []
    with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
        for page in pdf.pages:
            lines = _with_paragraph_breaks(_best_lines(page))
            if lines:
                pages.append("\n".join(lines))

    text = "\n\n".join(pages).strip()
    if not text:
        raise EmptyDocumentError("No extractable text found in PDF")
    return text
