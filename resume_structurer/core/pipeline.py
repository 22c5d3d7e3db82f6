"""
Resume structuring pipeline.

  raw text
    -> clean_text                       (encoding, invisibles, whitespace)
    -> SectionDetector.detect           (headings, then content fallback)
    -> Reclassifier.reclassify_lines
    -> per-section strategies           (+ full-text fallback when empty)
    -> Reclassifier.reclassify_records
    -> AI structuring -> SchemaNormalizer -> merge_results   (optional)
    -> EvidenceFilter.apply
    -> normalize_resume
    -> ConfidenceCalculator.calculate

Configuration is resolved once in __init__ and only read afterwards, so a
single ResumeParser can serve concurrent requests.
"""

import logging
from typing import Any, Dict, Optional

from resume_structurer.core.ai_client import AIStructuringClient
from resume_structurer.core.confidence_calculator import ConfidenceCalculator
from resume_structurer.core.config import ParserConfig, resolve_section_aliases
from resume_structurer.core.evidence_filter import EvidenceFilter
from resume_structurer.core.merger import merge_results
from resume_structurer.core.normalizer import normalize_resume
from resume_structurer.core.reclassifier import Reclassifier
from resume_structurer.core.schema_normalizer import SchemaNormalizer
from resume_structurer.core.schemas import ConfidenceReport, ParsedResume, ParseResult
from resume_structurer.core.sections import DetectedSections, SectionDetector
from resume_structurer.core.strategies import build_extractors, build_strategies
from resume_structurer.core.text_normalization import clean_text

logger = logging.getLogger(__name__)

FAILURE_SUGGESTION = "We could not read this resume automatically. Please enter your details manually."


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list):
        return not value
    return False


class ResumeParser:
    """
    Turns resume text into a ParsedResume plus a confidence report.

    Args:
        config: parser configuration; the built-in defaults when omitted
        ai_client: optional AI structuring client; heuristics only when omitted
    """

    def __init__(self, config: Optional[ParserConfig] = None, ai_client: Optional[AIStructuringClient] = None):
        self.config = config or ParserConfig()
        self.ai_client = ai_client

        self.aliases = resolve_section_aliases(self.config)
        self.extractors = build_extractors(self.config, self.aliases)
        self.strategies = build_strategies(self.extractors)

        self.detector = SectionDetector(self.config, self.aliases, self.extractors.shapes)
        self.reclassifier = Reclassifier(self.extractors.shapes, self.strategies)
        self.schema_normalizer = SchemaNormalizer(self.config)
        self.evidence_filter = EvidenceFilter(self.extractors.shapes, self.extractors.skills, self.extractors.summary)
        self.calculator = ConfidenceCalculator(self.config)

    # ===== STAGES =====

    def extract_heuristic(self, sections: DetectedSections, text: str) -> ParsedResume:
        """Run every section strategy, falling back to full-text extraction."""
        fields: Dict[str, Any] = {}
        for kind, strategy in self.strategies.items():
            value: Any = None
            if sections.has(kind) or strategy.always:
                value = strategy.extract(sections, text)
            if _is_empty(value) and strategy.fallback is not None:
                value = strategy.fallback(text)
                if not _is_empty(value):
                    logger.debug("Section %s filled by full-text fallback", kind.value)
            if value is not None:
                fields[kind.record_key] = value

        resume = ParsedResume(**fields)
        return self.reclassifier.reclassify_records(resume, tuple(sections.headed))

    def structure_with_ai(self, text: str, file_bytes: Optional[bytes], mime_type: Optional[str]) -> Optional[ParsedResume]:
        if self.ai_client is None or not self.ai_client.available:
            return None
        data = self.ai_client.structure(text, file_bytes=file_bytes, mime_type=mime_type)
        if data is None:
            return None
        return self.schema_normalizer.normalize(data)

    # ===== ENTRY POINT =====

    def parse_text(
        self,
        raw_text: Any,
        file_bytes: Optional[bytes] = None,
        mime_type: Optional[str] = None,
        use_ai: bool = True,
    ) -> ParseResult:
        """
        Parse one resume.

        Args:
            raw_text: extracted text (str or bytes, possibly malformed)
            file_bytes: original file, sent to the AI inline when given with mime_type
            mime_type: MIME type of file_bytes
            use_ai: allow the AI pass for this call

        Returns:
            ParseResult; success=False with an empty record on unexpected errors
        """
        try:
            text = clean_text(raw_text)
            if not text:
                empty = ParsedResume()
                return ParseResult(success=True, data=empty, confidence=self.calculator.calculate(empty))

            sections = self.reclassifier.reclassify_lines(self.detector.detect(text))
            heuristic = self.extract_heuristic(sections, text)

            ai_resume = self.structure_with_ai(text, file_bytes, mime_type) if use_ai else None
            merged = merge_results(heuristic, ai_resume)

            grounded = self.evidence_filter.apply(merged, text)
            resume = normalize_resume(grounded)
            report = self.calculator.calculate(resume)

            logger.info(
                "Parsed resume: score=%d sections=%s ai_used=%s",
                report.overall_score, report.sections_found, ai_resume is not None,
            )
            return ParseResult(
                success=True,
                data=resume,
                confidence=report,
                ai_used=ai_resume is not None,
                raw_text=text,
            )
        except Exception as exc:
            logger.exception("Resume parsing failed")
            return ParseResult(
                success=False,
                error=str(exc) or exc.__class__.__name__,
                confidence=ConfidenceReport.failed(FAILURE_SUGGESTION),
            )
