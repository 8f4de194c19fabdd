"""
Backend handling for POST /api/analyze: create a full draft, regenerate one section,
or answer one chat turn. Uses DraftService class (OOP).

Without LLM credentials the service answers with fixed placeholder content, clearly
marked as such, so the front-end flow can be exercised end to end.
"""
import json
import logging

from complaint.config import Config
from complaint.document import SECTION_LABELS
from complaint.errors import DraftServiceError, LLMError
from complaint.extraction import AttachmentExtractor
from complaint.prompts import PromptsBuilder
from complaint.schemas import AnalyzeRequest, AnalyzeResponse, DraftPayload, ExtractedFile
from complaint.utils import JsonParser

logger = logging.getLogger(__name__)

PLACEHOLDER_DRAFT = {
    "name": "홍길동(모의)",
    "idNumber": "900101-1234567",
    "address": "서울특별시 강남구 테헤란로 123",
    "job": "회사원",
    "officeAddress": "서울특별시 강남구 역삼동 솔루션 빌딩",
    "phone": "010-1234-5678",
    "email": "hong@example.com",
    "accusedName": "임꺽정(모의)",
    "accusedPhone": "010-9876-5432",
    "accusedAddress": "인천광역시 남동구 (모의 주소)",
    "purpose": "[AI 모의 데이터] 고소인은 피고소인을 사기죄로 고소하오니 엄벌에 처해 주시기 바랍니다.",
    "facts": (
        "[AI 모의 데이터] 피고소인은 고소인에게 금원을 빌려 가면서 곧 변제하겠다고 기망하였습니다. "
        "피고소인은 약정한 변제기일이 지나도록 금원을 반환하지 않았습니다. "
        "고소인의 거듭된 독촉에도 피고소인은 연락을 회피하고 있습니다."
    ),
    "reasons": "[AI 모의 데이터] 피고소인의 죄질이 불량하며 증거 인멸의 우려가 있어 고소에 이르렀습니다.",
}
PLACEHOLDER_SECTION = "[AI {label} 재작성 모의 데이터] 해당 섹션이 문맥에 맞춰 다시 작성되었습니다. (API 키 미설정)"
PLACEHOLDER_CHAT = "[AI {label} 모의 응답] API 키가 설정되지 않아 모의 응답을 반환합니다. 입력 내용: {message}"


class DraftService:
    """
    Dispatches an AnalyzeRequest to create / regenerate / chat.
    The LLM client is injected; when None and no credentials are configured, placeholder mode is used.
    """

    def __init__(self, llm_client=None, config: Config | None = None, extractor: AttachmentExtractor | None = None):
        self._config = config or Config()
        self._extractor = extractor or AttachmentExtractor()
        if llm_client is None and self._config.HAS_LLM_CREDENTIALS:
            from complaint.llm_client import LLMClient
            llm_client = LLMClient(self._config)
        self._llm = llm_client

    @property
    def placeholder_mode(self) -> bool:
        return self._llm is None

    def handle(self, request: AnalyzeRequest) -> AnalyzeResponse:
        """Raises DraftServiceError (bad upstream output) or LLMError (upstream unreachable)."""
        if request.type == "chat":
            return self.chat(request)
        if request.type == "regenerate":
            return self.regenerate(request)
        return self.create(request)

    # ---- create -------------------------------------------------------

    def create(self, request: AnalyzeRequest) -> AnalyzeResponse:
        files_content, extracted = self._extractor.extract(request.files)
        extracted_files = [ExtractedFile(**f) for f in extracted]
        if self.placeholder_mode:
            logger.warning("OPENAI_API_KEY is not configured. Returning placeholder draft.")
            payload = DraftPayload(**PLACEHOLDER_DRAFT)
            return AnalyzeResponse(
                success=True, data=payload.model_dump(), extracted_files=extracted_files, placeholder=True
            )

        logger.info("Calling LLM (type=create, files=%d)", len(request.files))
        messages = PromptsBuilder.build_create_messages(request.prompt, files_content)
        raw = self._llm.chat(messages, json_mode=True)
        data = self._parse_object(raw, "create")
        payload = DraftPayload.model_validate(data)
        return AnalyzeResponse(success=True, data=payload.model_dump(), extracted_files=extracted_files)

    # ---- regenerate ---------------------------------------------------

    def regenerate(self, request: AnalyzeRequest) -> AnalyzeResponse:
        section = request.section
        label = SECTION_LABELS[section]
        if self.placeholder_mode:
            logger.warning("OPENAI_API_KEY is not configured. Returning placeholder for section %s.", section)
            return AnalyzeResponse(
                success=True, data={section: PLACEHOLDER_SECTION.format(label=label)}, placeholder=True
            )

        logger.info("Calling LLM (type=regenerate, section=%s)", section)
        messages = PromptsBuilder.build_regenerate_messages(
            section, request.current_content, request.context.model_dump()
        )
        raw = self._llm.chat(messages, json_mode=True)
        data = self._parse_object(raw, "regenerate")
        content = pick_section_content(data, section)
        return AnalyzeResponse(success=True, data={section: content})

    # ---- chat ---------------------------------------------------------

    def chat(self, request: AnalyzeRequest) -> AnalyzeResponse:
        section = request.section
        if self.placeholder_mode:
            logger.warning("OPENAI_API_KEY is not configured. Returning placeholder chat reply.")
            reply = PLACEHOLDER_CHAT.format(label=SECTION_LABELS[section], message=request.message.strip())
            return AnalyzeResponse(success=True, data={"response": reply}, placeholder=True)

        logger.info("Calling LLM (type=chat, section=%s, history=%d)", section, len(request.history))
        messages = PromptsBuilder.build_chat_messages(
            section,
            request.message,
            [turn.model_dump() for turn in request.history],
            request.context.model_dump(),
        )
        reply = self._llm.chat(messages)
        if not reply.strip():
            raise DraftServiceError("LLM returned an empty chat reply.", "AI 응답이 비어 있습니다.")
        return AnalyzeResponse(success=True, data={"response": reply})

    @staticmethod
    def _parse_object(raw: str, kind: str) -> dict:
        try:
            data = JsonParser.extract_json_from_llm(raw)
        except ValueError as e:
            raise DraftServiceError(f"{kind}: {e}", "AI 응답을 해석할 수 없습니다.") from e
        if not isinstance(data, dict):
            raise DraftServiceError(f"{kind}: expected JSON object, got {type(data).__name__}",
                                    "AI 응답 형식이 올바르지 않습니다.")
        logger.debug("LLM %s response: %s", kind, json.dumps(data, ensure_ascii=False)[:2000])
        return data


def pick_section_content(data: dict, section: str) -> str:
    """
    Best-effort extraction of the regenerated text for ``section``.

    The requested key wins when it holds non-empty text. Otherwise a response with exactly
    one non-empty string value is accepted as the section. Anything else is rejected.
    Keys other than the requested one never leave the service.
    """
    extra = [k for k in data if k != section]
    if extra:
        logger.warning("Regenerate response for %s carried extra keys %s; dropping them", section, extra)
    value = data.get(section)
    if isinstance(value, str) and value.strip():
        return value.strip()
    texts = [v.strip() for v in data.values() if isinstance(v, str) and v.strip()]
    if len(texts) == 1:
        logger.warning("Regenerate response missing key %s; using its only text value", section)
        return texts[0]
    raise DraftServiceError(
        f"regenerate: response has no usable '{section}' value (keys={list(data)})",
        f"'{SECTION_LABELS[section]}' 재작성 결과를 찾을 수 없습니다.",
    )
