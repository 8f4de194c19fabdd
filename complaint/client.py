"""
Draft Service Client: sends create / regenerate / chat requests to the backend and
returns a ServiceResult tagged success or failure. Uses requests; no retry, no caching.

All response shapes are validated here (pydantic schemas) so UI code only ever sees
DraftDocument, OriginalInput and plain strings.
"""
import logging
from dataclasses import dataclass
from typing import Any

import requests
from pydantic import ValidationError

from complaint.config import Config
from complaint.document import SECTION_KEYS, DraftDocument, OriginalInput
from complaint.errors import InputValidationError
from complaint.file_intake import FileIntake
from complaint.schemas import AnalyzeResponse, ChatReply, DraftPayload
from complaint.utils import html_to_plain_text

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "서버와 통신할 수 없습니다. 잠시 후 다시 시도해 주세요."
INVALID_RESPONSE_MESSAGE = "서버 응답 형식이 올바르지 않습니다."
EMPTY_INPUT_MESSAGE = "요청 내용을 입력하거나 파일을 첨부해 주세요."


@dataclass
class ServiceResult:
    success: bool
    data: Any = None
    error: str | None = None
    placeholder: bool = False

    @classmethod
    def failure(cls, error: str) -> "ServiceResult":
        return cls(success=False, error=error)


@dataclass
class CreateResult:
    document: DraftDocument
    original: OriginalInput


class DraftServiceClient:
    """
    HTTP client for POST /api/analyze.
    ``session`` is anything with a requests-compatible ``post``; defaults to a requests.Session.
    """

    def __init__(self, api_url: str | None = None, session=None, timeout: float | None = None,
                 config: Config | None = None):
        cfg = config or Config()
        self.api_url = api_url or cfg.DRAFT_API_URL
        self.timeout = timeout if timeout is not None else cfg.CLIENT_TIMEOUT_SECONDS
        self._session = session or requests.Session()

    def _post(self, body: dict) -> AnalyzeResponse | ServiceResult:
        kind = body.get("type")
        try:
            resp = self._session.post(self.api_url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Request %s failed: %s", kind, e)
            return ServiceResult.failure(NETWORK_ERROR_MESSAGE)
        try:
            payload = resp.json()
        except ValueError:
            logger.error("Request %s returned non-JSON (status %s)", kind, resp.status_code)
            return ServiceResult.failure(f"{INVALID_RESPONSE_MESSAGE} (HTTP {resp.status_code})")
        try:
            parsed = AnalyzeResponse.model_validate(payload)
        except ValidationError as e:
            logger.error("Request %s returned invalid body: %s", kind, e)
            return ServiceResult.failure(INVALID_RESPONSE_MESSAGE)
        if not parsed.success or resp.status_code >= 400:
            logger.error("Request %s failed upstream (HTTP %s): %s", kind, resp.status_code, parsed.error)
            return ServiceResult.failure(parsed.error or f"HTTP {resp.status_code}")
        return parsed

    # ---- create -------------------------------------------------------

    def create(self, prompt: str, files: FileIntake | list[dict] | None = None) -> ServiceResult:
        """
        Request a full draft. Raises InputValidationError (before any network call)
        when the prompt is blank and no files are attached.
        """
        payloads = files.to_payloads() if isinstance(files, FileIntake) else list(files or [])
        if not (prompt or "").strip() and not payloads:
            raise InputValidationError(EMPTY_INPUT_MESSAGE)
        parsed = self._post({"type": "create", "prompt": prompt or "", "files": payloads})
        if isinstance(parsed, ServiceResult):
            return parsed
        if not parsed.data:
            return ServiceResult.failure(INVALID_RESPONSE_MESSAGE)
        draft = DraftPayload.model_validate(parsed.data)
        extracted = [f.model_dump() for f in parsed.extracted_files or []]
        result = CreateResult(
            document=DraftDocument.from_payload(draft.model_dump()),
            original=OriginalInput.from_response(prompt, extracted),
        )
        return ServiceResult(success=True, data=result, placeholder=parsed.placeholder)

    # ---- regenerate ---------------------------------------------------

    def regenerate(self, section: str, document: DraftDocument) -> ServiceResult:
        """Request replacement content for ``section`` only. data is the new section text."""
        if section not in SECTION_KEYS:
            raise InputValidationError(f"Unknown section '{section}'")
        body = {
            "type": "regenerate",
            "section": section,
            "currentContent": html_to_plain_text(document.get_section(section)),
            "context": _plain_context(document),
        }
        parsed = self._post(body)
        if isinstance(parsed, ServiceResult):
            return parsed
        content = (parsed.data or {}).get(section)
        if not isinstance(content, str) or not content.strip():
            logger.error("Regenerate response did not contain section %s", section)
            return ServiceResult.failure(INVALID_RESPONSE_MESSAGE)
        return ServiceResult(success=True, data=content, placeholder=parsed.placeholder)

    # ---- chat ---------------------------------------------------------

    def chat(self, section: str, message: str, history: list[dict], document: DraftDocument) -> ServiceResult:
        """One conversational turn. ``history`` is the ordered list of prior {role, content} turns."""
        if section not in SECTION_KEYS:
            raise InputValidationError(f"Unknown section '{section}'")
        body = {
            "type": "chat",
            "section": section,
            "message": message,
            "history": list(history),
            "context": _plain_context(document),
        }
        parsed = self._post(body)
        if isinstance(parsed, ServiceResult):
            return parsed
        try:
            reply = ChatReply.model_validate(parsed.data or {})
        except ValidationError:
            return ServiceResult.failure(INVALID_RESPONSE_MESSAGE)
        return ServiceResult(success=True, data=reply.response, placeholder=parsed.placeholder)


def _plain_context(document: DraftDocument) -> dict:
    return {key: html_to_plain_text(value) for key, value in document.narrative_context().items()}
