"""
Unit tests for DraftService (backend create / regenerate / chat).
"""
import json

import pytest

from complaint.document import PAYLOAD_FIELD_KEYS
from complaint.draft_service import DraftService, pick_section_content
from complaint.errors import DraftServiceError, LLMError
from complaint.schemas import AnalyzeRequest
from tests.conftest import FakeLLM


def _service(config, *replies):
    llm = FakeLLM(*replies)
    return DraftService(llm_client=llm, config=config), llm


class TestCreate:
    def test_normalizes_to_fixed_field_set(self, config):
        reply = json.dumps({"name": "홍길동", "facts": "사실관계", "extraKey": "dropped"}, ensure_ascii=False)
        service, llm = _service(config, reply)
        result = service.handle(AnalyzeRequest(prompt="돈을 빌려주었습니다"))
        assert set(result.data) == set(PAYLOAD_FIELD_KEYS) | {"purpose", "facts", "reasons"}
        assert result.data["facts"] == "사실관계"
        assert result.data["email"] == ""
        assert llm.calls[0]["json_mode"] is True
        assert "돈을 빌려주었습니다" in llm.calls[0]["messages"][-1]["content"]

    def test_unparseable_reply(self, config):
        service, _ = _service(config, "죄송합니다")
        with pytest.raises(DraftServiceError):
            service.handle(AnalyzeRequest(prompt="x"))

    def test_upstream_error_propagates(self, config):
        service, _ = _service(config, LLMError("Cannot reach OpenAI/Azure: timeout"))
        with pytest.raises(LLMError):
            service.handle(AnalyzeRequest(prompt="x"))


class TestRegenerate:
    def _request(self):
        return AnalyzeRequest.model_validate(
            {
                "type": "regenerate",
                "section": "facts",
                "currentContent": "B",
                "context": {"purpose": "A", "facts": "B", "reasons": "C"},
            }
        )

    def test_returns_only_requested_key(self, config):
        service, llm = _service(config, json.dumps({"facts": "B'", "purpose": "changed"}))
        result = service.handle(self._request())
        assert result.data == {"facts": "B'"}
        prompt = llm.calls[0]["messages"][-1]["content"]
        assert "고소취지: A" in prompt and "기존 내용: B" in prompt

    def test_single_mislabeled_key_accepted(self, config):
        service, _ = _service(config, json.dumps({"범죄사실": "B'"}, ensure_ascii=False))
        assert service.handle(self._request()).data == {"facts": "B'"}

    def test_ambiguous_reply_rejected(self, config):
        service, _ = _service(config, json.dumps({"purpose": "x", "reasons": "y"}))
        with pytest.raises(DraftServiceError):
            service.handle(self._request())


def test_pick_section_prefers_requested_key():
    assert pick_section_content({"facts": " new ", "reasons": "other"}, "facts") == "new"


class TestChat:
    def test_history_and_context_forwarded(self, config):
        service, llm = _service(config, "피고소인의 행위는 사기죄에 해당합니다.")
        request = AnalyzeRequest.model_validate(
            {
                "type": "chat",
                "section": "purpose",
                "message": "사기죄로 써주세요",
                "history": [{"role": "user", "content": "처음"}, {"role": "assistant", "content": "답변"}],
                "context": {"facts": "돈을 빌림"},
            }
        )
        result = service.handle(request)
        assert result.data == {"response": "피고소인의 행위는 사기죄에 해당합니다."}
        messages = llm.calls[0]["messages"]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert "고소취지" in messages[0]["content"]
        assert "돈을 빌림" in messages[0]["content"]
        assert llm.calls[0]["json_mode"] is False


class TestPlaceholderMode:
    def test_create_marked_placeholder(self, placeholder_service):
        result = placeholder_service.handle(AnalyzeRequest(prompt="x"))
        assert result.placeholder is True
        assert "(모의)" in result.data["name"]
        assert result.data["facts"]

    def test_regenerate_only_requested_key(self, placeholder_service):
        request = AnalyzeRequest.model_validate({"type": "regenerate", "section": "reasons"})
        result = placeholder_service.handle(request)
        assert list(result.data) == ["reasons"]

    def test_chat_reply(self, placeholder_service):
        request = AnalyzeRequest.model_validate({"type": "chat", "section": "facts", "message": "안녕"})
        assert "모의 응답" in placeholder_service.handle(request).data["response"]
