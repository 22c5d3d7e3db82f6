"""
File-to-text dispatch for uploaded resumes.

Picks an extractor from the file extension first, then the declared content
type. Returns the extracted text together with the MIME type the AI client
may receive the raw file as (PDF only), or None when only text should be sent.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from resume_structurer.core.docx_extractor import extract_docx_text
from resume_structurer.core.errors import CorruptDocumentError, EmptyDocumentError, UnsupportedFormatError
from resume_structurer.core.html_extractor import extract_html_text
from resume_structurer.core.pdf_extractor import extract_pdf_text
from resume_structurer.core.text_normalization import sanitize_encoding

logger = logging.getLogger(__name__)

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_TYPE = "application/pdf"

TEXT_SUFFIXES = (".txt", ".md", ".text")
HTML_SUFFIXES = (".html", ".htm")


@dataclass
class ExtractedDocument:
    text: str
    kind: str
    ai_mime_type: Optional[str] = None


def detect_kind(filename: str, content_type: str) -> str:
    name = (filename or "").lower()
    ctype = (content_type or "").lower().split(";")[0].strip()

    if name.endswith(".docx") or ctype == DOCX_TYPE:
        return "docx"
    if name.endswith(".pdf") or ctype == PDF_TYPE:
        return "pdf"
    if name.endswith(HTML_SUFFIXES) or ctype == "text/html":
        return "html"
    if name.endswith(TEXT_SUFFIXES) or ctype.startswith("text/"):
        return "text"
    raise UnsupportedFormatError(
        f"Unsupported file type: {filename or content_type or 'unknown'}. Use DOCX, PDF, HTML or TXT."
    )


def _extract_binary(kind: str, data: bytes) -> ExtractedDocument:
    if kind == "docx":
        return ExtractedDocument(extract_docx_text(data), kind)
    if kind == "pdf":
        return ExtractedDocument(extract_pdf_text(data), kind, ai_mime_type=PDF_TYPE)
    return ExtractedDocument(extract_html_text(data), kind)


def extract_text(filename: str, content_type: str, data: bytes) -> ExtractedDocument:
    """
    Raises:
        UnsupportedFormatError: no extractor for this file type
        EmptyDocumentError: the file holds no extractable text
        CorruptDocumentError: the DOCX/PDF/HTML reader failed on the bytes
    """
    kind = detect_kind(filename, content_type)
    logger.debug("Extracting %s (%d bytes) as %s", filename, len(data), kind)

    if kind != "text":
        try:
            return _extract_binary(kind, data)
        except EmptyDocumentError:
            raise
        except Exception as exc:
            # python-docx and pdfplumber raise their own zip/xml/pdf errors
            logger.warning("Could not read %s as %s: %s", filename, kind, exc)
            raise CorruptDocumentError(f"File could not be read as {kind.upper()}") from exc

    text = sanitize_encoding(data).strip()
    if not text:
        raise EmptyDocumentError("Text file is empty")
    return ExtractedDocument(text, kind)
