"""
Client for the external AI structuring service (Gemini generateContent API).

The service is optional. structure() never raises: transport errors,
timeouts, non-2xx answers and unusable JSON are logged and reported as
"no AI data" (None), and the pipeline carries on with heuristic results.
"""

import base64
import json
import logging
import re
from typing import Any, Dict, Optional

import requests

from resume_structurer.core.config import AISettings
from resume_structurer.core.errors import AIMalformedResponseError, AIUnavailableError
from resume_structurer.core.schemas import (
    Contact,
    Education,
    Experience,
    Language,
    Reference,
    Skill,
    TitleEntry,
    Website,
)
from resume_structurer.core.text_normalization import sanitize_encoding

logger = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)


def _record(model) -> Dict[str, Any]:
    return model().model_dump(exclude={"id"})


CANONICAL_SCHEMA: Dict[str, Any] = {
    "contact": Contact().model_dump(),
    "experiences": [_record(Experience)],
    "education": [_record(Education)],
    "skills": [_record(Skill)],
    "languages": [_record(Language)],
    "certifications": [_record(TitleEntry)],
    "awards": [_record(TitleEntry)],
    "websites": [_record(Website)],
    "references": [_record(Reference)],
    "hobbies": [""],
    "summary": "",
}

PROMPT_TEMPLATE = """You convert resumes into JSON.

Return exactly one JSON object with this structure and these key names:
{schema}

Rules:
- Use only information that is written in the resume. Never invent, guess or
  embellish names, employers, dates, skills or any other value.
- Leave a field as an empty string (or an empty list) when the resume does
  not state it.
- Dates as "Mon YYYY" (e.g. "Jan 2020"), "YYYY" or "Present".
- Skill level, when stated, is one of: Beginner, Basic, Intermediate,
  Advanced, Expert, Proficient, Skilled, Master.
- Output JSON only. No explanations, no markdown.
"""


def build_prompt() -> str:
    return PROMPT_TEMPLATE.format(schema=json.dumps(CANONICAL_SCHEMA, indent=2))


def strip_code_fences(text: str) -> str:
    return CODE_FENCE_RE.sub("", text or "").strip()


def extract_first_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced top-level {...} block of `text`.

    Braces inside JSON strings (including escaped quotes) are ignored.
    Returns None when no complete object is present (e.g. truncated output).
    """
    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def parse_ai_response(text: str) -> Dict[str, Any]:
    """Turn the model's free-form answer into a dict, or raise AIMalformedResponseError."""
    body = extract_first_json_object(strip_code_fences(sanitize_encoding(text)))
    if body is None:
        raise AIMalformedResponseError("no JSON object in AI response")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise AIMalformedResponseError(f"invalid JSON in AI response: {exc}") from exc
    if not isinstance(data, dict):
        raise AIMalformedResponseError(f"AI response is a {type(data).__name__}, not an object")
    return data


class AIStructuringClient:
    """
    Sends resume text (or the raw file, inline) to the structuring model.

    Args:
        settings: endpoint, key, model and timeouts
        session: anything with a requests-style post(); requests.post per call by default
    """

    def __init__(self, settings: AISettings, session: Optional[Any] = None):
        self.settings = settings
        self.session = session

    @property
    def available(self) -> bool:
        return self.settings.is_configured

    def _endpoint(self) -> str:
        return f"{self.settings.api_url.rstrip('/')}/{self.settings.model}:generateContent"

    def _payload(self, text: str, file_bytes: Optional[bytes], mime_type: Optional[str]) -> Dict[str, Any]:
        parts = [{"text": build_prompt()}]
        if file_bytes and mime_type:
            parts.append({
                "inline_data": {
                    "mime_type": mime_type,
                    "data": base64.b64encode(file_bytes).decode("ascii"),
                }
            })
        else:
            parts.append({"text": f"Resume:\n{text}"})
        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "temperature": self.settings.temperature,
                "maxOutputTokens": self.settings.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

    def _request(self, payload: Dict[str, Any], timeout: float) -> str:
        post = self.session.post if self.session is not None else requests.post
        try:
            response = post(
                self._endpoint(),
                params={"key": self.settings.api_key},
                json=payload,
                timeout=timeout,
                verify=self.settings.verify_ssl,
            )
        except requests.exceptions.RequestException as exc:
            raise AIUnavailableError(f"AI request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise AIUnavailableError(f"AI service returned HTTP {response.status_code}")

        try:
            body = response.json()
            parts = body["candidates"][0]["content"]["parts"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise AIMalformedResponseError(f"unexpected AI response envelope: {exc}") from exc
        if not isinstance(parts, list):
            raise AIMalformedResponseError("AI response parts is not a list")
        texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
        if not texts:
            raise AIMalformedResponseError("AI response has no text parts")
        return "".join(texts)

    def structure(self, text: str, file_bytes: Optional[bytes] = None,
                  mime_type: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Return the model's JSON object, or None when AI data is unavailable."""
        if not self.available:
            return None
        timeout = self.settings.file_timeout if file_bytes else self.settings.timeout
        try:
            raw = self._request(self._payload(text, file_bytes, mime_type), timeout)
            data = parse_ai_response(raw)
        except (AIUnavailableError, AIMalformedResponseError) as exc:
            logger.warning("AI structuring skipped: %s", exc)
            return None
        logger.debug("AI structuring returned keys: %s", sorted(data))
        return data
