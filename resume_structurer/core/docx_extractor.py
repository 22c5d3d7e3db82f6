from io import BytesIO
from typing import List

from docx import Document

from resume_structurer.core.errors import EmptyDocumentError


def extract_docx_text(docx_bytes: bytes) -> str:
    """
    Deterministically extract paragraph and table text from a DOCX.

    Empty paragraphs are kept as blank lines since they usually separate
    sections; table cells are read row by row, one line per row with the
    cells joined by " | ".
    """
    doc = Document(BytesIO(docx_bytes))
    out: List[str] = [(p.text or "").strip() for p in doc.paragraphs]

    for table in doc.tables:
        out.append("")
        for row in table.rows:
            cells: List[str] = []
            for cell in row.cells:
                t = (cell.text or "").strip()
                # Merged cells repeat the same text across the span
                if t and (not cells or cells[-1] != t):
                    cells.append(t)
            if cells:
                out.append(" | ".join(cells))

    text = "\n".join(out).strip()
    if not text:
        raise EmptyDocumentError("No text found in DOCX")
    return text
