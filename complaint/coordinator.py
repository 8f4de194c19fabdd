"""
View coordinator: owns the DraftDocument and the OriginalInput, switches between the
compose, edit and analysis views, and exposes every state transition the UI may trigger.

View state is an immutable ViewState; panels read it and call coordinator methods to
change it. Every failing action leaves the document untouched and records an error.
A section open in the editor is never overwritten by regenerate or an applied chat reply;
those actions are refused until the editor is saved or cancelled.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum

from complaint.assistant import AssistantPanel, ChatMessage
from complaint.client import DraftServiceClient, ServiceResult
from complaint.document import SECTION_LABELS, DraftDocument, OriginalInput, check_section
from complaint.errors import ExportError, InputValidationError
from complaint.file_intake import FileIntake
from complaint.layout import PanelLayout
from complaint.section_editor import SectionEditor
from complaint.utils import plain_text_to_html

logger = logging.getLogger(__name__)


class View(str, Enum):
    COMPOSE = "compose"
    EDIT = "edit"
    ANALYSIS = "analysis"


@dataclass(frozen=True)
class ViewState:
    view: View = View.COMPOSE
    creating: bool = False
    regenerating: str | None = None
    editor_section: str | None = None
    assistant_section: str | None = None
    confirm_auto_paragraph: bool = False
    placeholder: bool = False
    error: str | None = None


class ViewCoordinator:
    def __init__(self, client: DraftServiceClient | None = None, pdf_exporter=None, docx_exporter=None):
        self.client = client or DraftServiceClient()
        self.document: DraftDocument | None = None
        self.original_input: OriginalInput | None = None
        self.generated_sections: dict = {}
        self.editor = SectionEditor()
        self.assistant = AssistantPanel(self.client)
        self.layout = PanelLayout()
        self._pdf_exporter = pdf_exporter
        self._docx_exporter = docx_exporter
        self._state = ViewState()

    @property
    def state(self) -> ViewState:
        return self._state

    def _set(self, **changes) -> ViewState:
        self._state = replace(self._state, **changes)
        return self._state

    def clear_error(self) -> None:
        self._set(error=None)

    def _editing(self, section: str) -> bool:
        session = self.editor.session
        return session is not None and session.target_section == section

    def _require_document(self) -> DraftDocument:
        if self.document is None:
            raise InputValidationError("작성된 고소장이 없습니다.")
        return self.document

    # ---- compose ------------------------------------------------------

    def generate(self, prompt: str, intake: FileIntake | None = None) -> ServiceResult:
        """Create a draft. On success the whole document is replaced and the edit view shown."""
        if self._state.creating:
            return ServiceResult.failure("이미 생성 중입니다.")
        self._set(creating=True, error=None)
        try:
            result = self.client.create(prompt, intake)
        except InputValidationError as e:
            self._set(creating=False, error=str(e))
            raise
        if not result.success:
            self._set(creating=False, error=result.error)
            return result
        self.document = result.data.document
        self.original_input = result.data.original
        self.generated_sections = self.document.narrative_context()
        self.editor.cancel()
        self.assistant = AssistantPanel(self.client)
        self._set(
            view=View.EDIT,
            creating=False,
            placeholder=result.placeholder,
            editor_section=None,
            assistant_section=None,
            confirm_auto_paragraph=False,
        )
        return result

    # ---- regenerate ---------------------------------------------------

    def regenerate(self, section: str) -> ServiceResult:
        """Replace exactly one narrative section with freshly generated content."""
        document = self._require_document()
        check_section(section)
        if self._editing(section):
            return self._refuse_while_editing(section)
        self._set(regenerating=section, error=None)
        result = self.client.regenerate(section, document)
        if result.success:
            document.set_section(section, plain_text_to_html(result.data))
            self.generated_sections[section] = document.get_section(section)
            self._set(regenerating=None, placeholder=self._state.placeholder or result.placeholder)
        else:
            self._set(regenerating=None, error=result.error)
        return result

    def _refuse_while_editing(self, section: str) -> ServiceResult:
        message = f"'{SECTION_LABELS[section]}' 섹션을 편집 중입니다. 저장하거나 취소한 뒤 다시 시도해 주세요."
        logger.warning("Refused to overwrite %s while its editor is open", section)
        self._set(error=message)
        return ServiceResult.failure(message)

    # ---- section editor -----------------------------------------------

    def open_editor(self, section: str):
        session = self.editor.open(self._require_document(), section)
        self._set(editor_section=section, confirm_auto_paragraph=False)
        return session

    def save_editor(self) -> str:
        content = self.editor.save(self._require_document())
        self._set(editor_section=None, confirm_auto_paragraph=False)
        return content

    def cancel_editor(self) -> None:
        self.editor.cancel()
        self._set(editor_section=None, confirm_auto_paragraph=False)

    def request_auto_paragraph(self) -> None:
        self.editor.request_auto_paragraph()
        self._set(confirm_auto_paragraph=True)

    def confirm_auto_paragraph(self) -> str:
        content = self.editor.confirm_auto_paragraph()
        self._set(confirm_auto_paragraph=False)
        return content

    def dismiss_auto_paragraph(self) -> None:
        self.editor.dismiss_auto_paragraph()
        self._set(confirm_auto_paragraph=False)

    # ---- assistant ----------------------------------------------------

    def open_assistant(self, section: str):
        self._require_document()
        session = self.assistant.open(section)
        self._set(assistant_section=section)
        return session

    def close_assistant(self) -> None:
        self.assistant.close()
        self._set(assistant_section=None)

    def send_chat(self, message: str) -> ChatMessage | None:
        return self.assistant.send(message, self._require_document())

    def apply_chat(self, content: str) -> ServiceResult:
        document = self._require_document()
        section = self.assistant.section
        if section is not None and self._editing(section):
            return self._refuse_while_editing(section)
        self.assistant.apply_to_section(content, document)
        self._set(assistant_section=None)
        return ServiceResult(success=True, data=document.get_section(section))

    # ---- views --------------------------------------------------------

    def show_compose(self) -> ViewState:
        return self._set(view=View.COMPOSE)

    def show_editor(self) -> ViewState:
        self._require_document()
        return self._set(view=View.EDIT)

    def show_analysis(self) -> ViewState:
        self._require_document()
        return self._set(view=View.ANALYSIS)

    # ---- export -------------------------------------------------------

    def export_pdf(self):
        """Returns rendering.pdf_export.ExportResult; raises ExportError after recording it."""
        document = self._require_document()
        if self._pdf_exporter is None:
            from rendering.pdf_export import PdfExporter
            self._pdf_exporter = PdfExporter()
        try:
            return self._pdf_exporter.export(document)
        except ExportError as e:
            self._set(error=str(e))
            raise

    def export_docx(self) -> bytes:
        document = self._require_document()
        if self._docx_exporter is None:
            from rendering.docx_export import DocxExporter
            self._docx_exporter = DocxExporter()
        try:
            return self._docx_exporter.export(document)
        except ExportError as e:
            self._set(error=str(e))
            raise

    def page_count_estimate(self) -> int:
        from rendering.pagination import preview_page_count
        return preview_page_count(self._require_document())
