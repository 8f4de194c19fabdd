import pytest
from pydantic import ValidationError

from complaint.document import PAYLOAD_FIELD_KEYS
from complaint.schemas import AnalyzeRequest, AnalyzeResponse, DraftPayload


class TestAnalyzeRequest:
    def test_create_requires_prompt_or_files(self):
        with pytest.raises(ValidationError):
            AnalyzeRequest.model_validate({"type": "create", "prompt": "   "})

    def test_create_with_files_only(self):
        req = AnalyzeRequest.model_validate({"files": [{"name": "a.pdf", "type": "application/pdf", "data": "AA=="}]})
        assert req.type == "create"
        assert req.files[0].name == "a.pdf"

    def test_regenerate_needs_known_section(self):
        with pytest.raises(ValidationError):
            AnalyzeRequest.model_validate({"type": "regenerate", "section": "summary"})

    def test_chat_history_roles_normalized(self):
        req = AnalyzeRequest.model_validate(
            {
                "type": "chat",
                "section": "facts",
                "message": "질문",
                "history": [{"role": "ai", "content": "답"}, {"role": "user", "content": "q"}],
                "currentContent": "ignored alias check",
            }
        )
        assert [t.role for t in req.history] == ["assistant", "user"]
        assert req.current_content == "ignored alias check"


class TestDraftPayload:
    def test_missing_keys_default_and_extras_dropped(self):
        payload = DraftPayload.model_validate({"name": "홍길동", "facts": ["a", "b"], "bonus": 1})
        dumped = payload.model_dump()
        assert set(dumped) == set(PAYLOAD_FIELD_KEYS) | {"purpose", "facts", "reasons"}
        assert dumped["facts"] == "a\nb"
        assert dumped["email"] == ""

    def test_non_string_values_coerced(self):
        assert DraftPayload.model_validate({"phone": None, "job": 3}).model_dump()["job"] == "3"


def test_response_serializes_with_aliases():
    body = AnalyzeResponse(success=True, data={"facts": "x"}, extracted_files=[{"name": "a", "content": "b"}]).to_json()
    assert body["extractedFiles"] == [{"name": "a", "content": "b"}]
    assert "error" not in body
