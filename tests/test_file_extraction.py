from io import BytesIO

import pytest
from docx import Document
from resume_structurer.core.docx_extractor import extract_docx_text
from resume_structurer.core.errors import CorruptDocumentError, EmptyDocumentError, UnsupportedFormatError
from resume_structurer.core.file_extractor import DOCX_TYPE, PDF_TYPE, detect_kind, extract_text
from resume_structurer.core.html_extractor import extract_html_text


@pytest.mark.parametrize("filename,content_type,kind", [
    ("cv.docx", "", "docx"),
    ("upload", DOCX_TYPE, "docx"),
    ("CV.PDF", "application/octet-stream", "pdf"),
    ("upload", "application/pdf", "pdf"),
    ("cv.htm", "", "html"),
    ("upload", "text/html; charset=utf-8", "html"),
    ("cv.md", "", "text"),
    ("upload", "text/plain", "text"),
])
def test_detect_kind(filename, content_type, kind):
    assert detect_kind(filename, content_type) == kind


def test_unsupported_kind():
    with pytest.raises(UnsupportedFormatError):
        detect_kind("cv.odt", "application/vnd.oasis.opendocument.text")


def test_text_file_decoded():
    doc = extract_text("cv.txt", "text/plain", b"Jos\xe9 Garc\xeda\n")
    assert doc.text == "José García"
    assert doc.kind == "text"
    assert doc.ai_mime_type is None


def test_empty_text_file():
    with pytest.raises(EmptyDocumentError):
        extract_text("cv.txt", "text/plain", b"\n\n  ")


def test_pdf_kind_carries_mime_type_for_ai(monkeypatch):
    monkeypatch.setattr("resume_structurer.core.file_extractor.extract_pdf_text", lambda data: "Jane Doe")
    doc = extract_text("cv.pdf", PDF_TYPE, b"%PDF-1.4")
    assert (doc.text, doc.kind, doc.ai_mime_type) == ("Jane Doe", "pdf", PDF_TYPE)


def test_corrupt_docx_raises_corrupt_document():
    with pytest.raises(CorruptDocumentError):
        extract_text("cv.docx", DOCX_TYPE, b"not a zip at all")


def test_reader_crash_is_reported_as_corrupt(monkeypatch):
    def crash(data):
        raise ValueError("bad xref table")

    monkeypatch.setattr("resume_structurer.core.file_extractor.extract_pdf_text", crash)
    with pytest.raises(CorruptDocumentError):
        extract_text("cv.pdf", PDF_TYPE, b"%PDF-1.4")


def test_docx_paragraphs_and_tables():
    document = Document()
    document.add_paragraph("Jane Doe")
    document.add_paragraph("")
    document.add_paragraph("SKILLS")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Python"
    table.rows[0].cells[1].text = "SQL"
    buf = BytesIO()
    document.save(buf)

    assert extract_docx_text(buf.getvalue()) == "Jane Doe\n\nSKILLS\n\nPython | SQL"


def test_html_visible_text_only():
    html = (
        b"<html><head><title>CV</title><style>p { color: red; }</style></head>"
        b"<body><h1>Jane Doe</h1><p>jane@example.com</p><script>var x = 1;</script></body></html>"
    )
    assert extract_html_text(html) == "Jane Doe\njane@example.com"


def test_html_without_text():
    with pytest.raises(EmptyDocumentError):
        extract_html_text(b"<html><body><script>1</script></body></html>")
