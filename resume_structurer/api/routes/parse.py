from functools import lru_cache
from typing import Tuple

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from starlette.concurrency import run_in_threadpool

from resume_structurer.core.ai_client import AIStructuringClient
from resume_structurer.core.config import AISettings, load_parser_config
from resume_structurer.core.errors import CorruptDocumentError, EmptyDocumentError, UnsupportedFormatError
from resume_structurer.core.file_extractor import ExtractedDocument, extract_text
from resume_structurer.core.pipeline import ResumeParser
from resume_structurer.core.schemas import ParseResult, PreviewResponse, TextParseRequest

router = APIRouter(tags=["parse"])

PREVIEW_CHARS = 500

PARSE_EXAMPLE = {
    "success": True,
    "data": {
        "contact": {
            "firstName": "John",
            "lastName": "Smith",
            "desiredJobTitle": "",
            "phone": "555-123-4567",
            "email": "john@example.com",
            "country": "",
            "city": "",
            "address": "",
            "postCode": "",
        },
        "experiences": [
            {
                "id": 1,
                "jobTitle": "Software Engineer",
                "company": "Acme Corp",
                "location": "",
                "startDate": "Jan 2020",
                "endDate": "Present",
                "description": "Built internal tools.",
            }
        ],
        "education": [],
        "skills": [{"id": 1, "name": "React", "level": "Advanced"}],
        "summary": "",
        "hobbies": [],
    },
    "confidence": {
        "overall_score": 58,
        "confidence": "low",
        "sections_found": ["contact", "experience", "skills"],
        "missing_sections": ["summary", "education"],
        "suggestions": ["Education section not found. Please add your educational background."],
    },
    "ai_used": False,
    "error": None,
}


@lru_cache(maxsize=1)
def get_parser() -> ResumeParser:
    """One parser per process; configuration is read-only after construction."""
    return ResumeParser(load_parser_config(), AIStructuringClient(AISettings.from_env()))


async def _read_upload(file: UploadFile) -> Tuple[bytes, ExtractedDocument]:
    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")
    try:
        # pdfplumber and python-docx are blocking; keep them off the event loop
        doc = await run_in_threadpool(extract_text, file.filename or "", file.content_type or "", raw)
    except UnsupportedFormatError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except CorruptDocumentError as exc:
        raise HTTPException(status_code=422, detail=f"{exc}. The file may be damaged or mislabeled.") from exc
    except EmptyDocumentError as exc:
        raise HTTPException(
            status_code=422,
            detail=f"{exc}. Scanned documents need OCR, which is not supported.",
        ) from exc
    return raw, doc


def _parse_document(parser: ResumeParser, raw: bytes, doc: ExtractedDocument, use_ai: bool) -> ParseResult:
    file_bytes = raw if doc.ai_mime_type else None
    return parser.parse_text(doc.text, file_bytes=file_bytes, mime_type=doc.ai_mime_type, use_ai=use_ai)


@router.post(
    "/parse",
    response_model=ParseResult,
    summary="Parse Resume",
    description="Structure a resume file (DOCX, PDF, HTML or TXT) into contact, experience, education, "
                "skills and the other resume sections, with a confidence report.",
    responses={
        200: {
            "description": "Resume parsed (success=false with an empty record when parsing failed)",
            "content": {"application/json": {"example": PARSE_EXAMPLE}},
        },
        400: {"description": "Empty file uploaded"},
        415: {"description": "Unsupported file format"},
        422: {"description": "File has no extractable text or could not be read"},
    },
)
async def parse_resume(
    file: UploadFile = File(..., description="Resume file (DOCX, PDF, HTML or TXT format)"),
    use_ai: bool = Query(True, description="Allow the AI structuring pass when configured"),
    parser: ResumeParser = Depends(get_parser),
):
    """
    Parse a resume file and return the structured record.

    **Supported formats:**
    - DOCX (.docx)
    - PDF (.pdf) - text layer only, sent inline to the AI when it is enabled
    - HTML (.html, .htm)
    - TXT (.txt, .md)

    **Returns:**
    - **data**: the structured resume; every value is grounded in the file text
    - **confidence**: overall score, found/missing sections, quality metrics, suggestions
    - **ai_used**: whether AI output was merged in
    """
    raw, doc = await _read_upload(file)
    return await run_in_threadpool(_parse_document, parser, raw, doc, use_ai)


@router.post(
    "/parse/text",
    response_model=ParseResult,
    summary="Parse Resume Text",
    description="Structure already-extracted resume text.",
)
def parse_resume_text(request: TextParseRequest, parser: ResumeParser = Depends(get_parser)):
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Empty text submitted.")
    return parser.parse_text(request.text, use_ai=request.use_ai)


@router.post(
    "/parse/preview",
    response_model=PreviewResponse,
    summary="Preview Resume Parsing",
    description="Parse a resume file and also return the first characters of the extracted text, "
                "so the candidate can check what was read.",
    responses={
        400: {"description": "Empty file uploaded"},
        415: {"description": "Unsupported file format"},
        422: {"description": "File has no extractable text or could not be read"},
    },
)
async def preview_resume(
    file: UploadFile = File(..., description="Resume file (DOCX, PDF, HTML or TXT format)"),
    use_ai: bool = Query(True, description="Allow the AI structuring pass when configured"),
    parser: ResumeParser = Depends(get_parser),
):
    raw, doc = await _read_upload(file)
    result = await run_in_threadpool(_parse_document, parser, raw, doc, use_ai)
    source = result.raw_text or doc.text
    preview = source[:PREVIEW_CHARS] + ("..." if len(source) > PREVIEW_CHARS else "")
    return PreviewResponse(**result.model_dump(), raw_text_preview=preview)
