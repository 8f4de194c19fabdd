"""
Tests for the ViewCoordinator, including the compose -> regenerate -> export scenario.
"""
from io import BytesIO

import pdfplumber
import pytest

from complaint.client import ServiceResult
from complaint.coordinator import View, ViewCoordinator
from complaint.errors import ExportError, InputValidationError
from complaint.file_intake import FileIntake
from complaint.utils import html_to_plain_text


@pytest.fixture
def coordinator(client):
    return ViewCoordinator(client)


def test_end_to_end_create_regenerate_export(coordinator):
    result = coordinator.generate("피고소인이 돈을 빌리고 갚지 않았습니다")
    assert result.success
    assert coordinator.state.view == View.EDIT
    document = coordinator.document
    assert html_to_plain_text(document.facts)

    before = document.narrative_context()
    assert coordinator.regenerate("facts").success
    after = document.narrative_context()
    assert after["facts"] != before["facts"]
    assert after["purpose"] == before["purpose"]
    assert after["reasons"] == before["reasons"]

    export = coordinator.export_pdf()
    with pdfplumber.open(BytesIO(export.data)) as pdf:
        assert len(pdf.pages) >= 2


def test_empty_input_blocked(coordinator, session):
    with pytest.raises(InputValidationError):
        coordinator.generate("", FileIntake())
    assert session.requests == []
    assert coordinator.state.error
    assert not coordinator.state.creating
    assert coordinator.state.view == View.COMPOSE


class _FailingClient:
    def create(self, prompt, files=None):
        return ServiceResult.failure("서버 오류")

    def regenerate(self, section, document):
        return ServiceResult.failure("재작성 실패")

    def chat(self, *args):
        return ServiceResult.failure("채팅 실패")


def test_create_failure_keeps_view(coordinator):
    coordinator.client = _FailingClient()
    result = coordinator.generate("x")
    assert not result.success
    assert coordinator.state.view == View.COMPOSE
    assert coordinator.state.error == "서버 오류"
    assert coordinator.document is None


def test_regenerate_failure_leaves_document(coordinator):
    coordinator.generate("x")
    snapshot = coordinator.document.narrative_context()
    coordinator.client = _FailingClient()
    assert not coordinator.regenerate("facts").success
    assert coordinator.document.narrative_context() == snapshot
    assert coordinator.state.error == "재작성 실패"
    assert coordinator.state.regenerating is None


def test_editor_flow(coordinator):
    coordinator.generate("x")
    coordinator.open_editor("reasons")
    assert coordinator.state.editor_section == "reasons"
    coordinator.editor.update("<p>새 고소이유</p>")
    coordinator.save_editor()
    assert coordinator.document.reasons == "<p>새 고소이유</p>"
    assert coordinator.state.editor_section is None


def test_auto_paragraph_modal(coordinator):
    coordinator.generate("x")
    coordinator.open_editor("facts")
    coordinator.editor.update("<p>A. B! C?</p>")
    coordinator.request_auto_paragraph()
    assert coordinator.state.confirm_auto_paragraph
    coordinator.confirm_auto_paragraph()
    assert not coordinator.state.confirm_auto_paragraph
    assert coordinator.editor.working_content == "<p>A.<br>B!<br>C?</p>"


def test_assistant_flow(coordinator):
    coordinator.generate("x")
    coordinator.open_assistant("purpose")
    reply = coordinator.send_chat("사기죄로 작성해 주세요")
    assert reply.role == "assistant" and not reply.is_error
    coordinator.apply_chat(reply.content)
    assert html_to_plain_text(coordinator.document.purpose) == reply.content
    assert coordinator.state.assistant_section is None
    assert not coordinator.assistant.is_open


def test_views_require_document(coordinator):
    with pytest.raises(InputValidationError):
        coordinator.show_analysis()
    coordinator.generate("x")
    assert coordinator.show_analysis().view == View.ANALYSIS
    assert coordinator.show_compose().view == View.COMPOSE
    assert coordinator.original_input.prompt == "x"


def test_generated_sections_track_ai_output(coordinator):
    coordinator.generate("x")
    coordinator.open_editor("facts")
    coordinator.editor.update("<p>user edit</p>")
    coordinator.save_editor()
    assert coordinator.generated_sections["facts"] != coordinator.document.facts
    coordinator.regenerate("facts")
    assert coordinator.generated_sections["facts"] == coordinator.document.facts


def test_export_failure_recorded(client):
    class BrokenExporter:
        def export(self, document):
            raise ExportError("rasterization failed")

    coordinator = ViewCoordinator(client, pdf_exporter=BrokenExporter())
    coordinator.generate("x")
    with pytest.raises(ExportError):
        coordinator.export_pdf()
    assert coordinator.state.error == "rasterization failed"


def test_docx_export_and_estimate(coordinator):
    coordinator.generate("x")
    assert coordinator.export_docx()[:2] == b"PK"
    assert coordinator.page_count_estimate() >= 2


def test_regenerate_refused_while_section_is_being_edited(coordinator, session):
    coordinator.generate("x")
    coordinator.open_editor("facts")
    before = coordinator.document.facts
    sent = len(session.requests)

    result = coordinator.regenerate("facts")
    assert not result.success
    assert coordinator.state.error
    assert len(session.requests) == sent
    assert coordinator.document.facts == before

    coordinator.save_editor()
    assert coordinator.document.facts == before
    assert coordinator.regenerate("facts").success
    assert coordinator.document.facts != before


def test_regenerate_other_section_while_editing(coordinator):
    coordinator.generate("x")
    coordinator.open_editor("facts")
    assert coordinator.regenerate("reasons").success
    coordinator.save_editor()
    assert coordinator.generated_sections["reasons"] == coordinator.document.reasons


def test_apply_chat_refused_while_section_is_being_edited(coordinator):
    coordinator.generate("x")
    coordinator.open_assistant("purpose")
    reply = coordinator.send_chat("사기죄로 작성해 주세요")
    coordinator.open_editor("purpose")
    before = coordinator.document.purpose

    assert not coordinator.apply_chat(reply.content).success
    assert coordinator.document.purpose == before
    assert coordinator.assistant.is_open

    coordinator.cancel_editor()
    assert coordinator.apply_chat(reply.content).success
    assert html_to_plain_text(coordinator.document.purpose) == reply.content
