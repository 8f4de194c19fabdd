"""
Streamlit front end for the complaint drafting tool.
Run the backend first (python run_flask.py), then: streamlit run complaint/app.py
"""
import streamlit as st
from streamlit_quill import st_quill

from complaint.config import Config
from complaint.coordinator import View, ViewCoordinator
from complaint.diffing import unified_diff
from complaint.client import DraftServiceClient
from complaint.document import ACCUSED, PERSONAL, SECTION_KEYS, SECTION_LABELS
from complaint.errors import AssistantBusyError, ExportError, InputValidationError
from complaint.file_intake import ALLOWED_EXTENSIONS, FileIntake
from complaint.layout import Column
from complaint.logging_config import setup_logging
from complaint.section_editor import DiffMode
from complaint.utils import display_html, html_to_plain_text, is_blank
from rendering.docx_export import DEFAULT_DOCX_FILENAME, DOCX_MIME_TYPE

COLUMN_TITLES = {
    Column.ORIGINAL: "원문 (입력 내용)",
    Column.PROMPT_OUTPUT: "AI 생성 결과",
    Column.EDITOR: "편집기",
}

DIFF_CSS = """
<style>
.diff-added { background-color: #dcfce7; color: #166534; text-decoration: none; }
.diff-removed { background-color: #fee2e2; color: #991b1b; }
.draft-box { background-color: #f9fafb; padding: 12px; border-radius: 6px; color: #1f2937; }
</style>
"""


# -------------------------
# Session setup
# -------------------------
def _coordinator() -> ViewCoordinator:
    if "coordinator" not in st.session_state:
        config = Config()
        setup_logging(config.LOG_LEVEL)
        st.session_state["coordinator"] = ViewCoordinator(DraftServiceClient(config=config))
    return st.session_state["coordinator"]


def _show_error(coord: ViewCoordinator) -> None:
    if coord.state.error:
        st.error(coord.state.error)
        coord.clear_error()


def _section_box(markup: str) -> None:
    """Read-only section display."""
    if is_blank(markup):
        st.caption("(미작성)")
        return
    st.markdown(f"<div class='draft-box'>{display_html(markup)}</div>", unsafe_allow_html=True)


# -------------------------
# Compose view
# -------------------------
def render_compose(coord: ViewCoordinator) -> None:
    st.subheader("고소장 작성 요청")
    prompt = st.text_area(
        "요청 내용",
        height=180,
        placeholder="예: 피고소인이 돈을 빌리고 갚지 않았습니다.",
        key="compose_prompt",
    )
    uploads = st.file_uploader(
        "첨부파일 (PDF 내용만 분석됩니다)",
        type=[ext.lstrip(".") for ext in ALLOWED_EXTENSIONS],
        accept_multiple_files=True,
    )
    if st.button("고소장 생성", type="primary", disabled=coord.state.creating):
        intake = FileIntake()
        try:
            for upload in uploads or []:
                intake.add(upload.name, upload.getvalue(), upload.type or None)
            with st.spinner("AI가 고소장을 작성하고 있습니다…"):
                result = coord.generate(prompt, intake)
        except InputValidationError as e:
            st.warning(str(e))
            return
        if result.success:
            st.rerun()


# -------------------------
# Edit view
# -------------------------
def render_party_fields(coord: ViewCoordinator, group: str, title: str) -> None:
    document = coord.document
    st.markdown(f"**{title}**")
    for f in list(document.fields(group)):
        c1, c2, c3 = st.columns([2, 5, 1])
        label = c1.text_input("항목", value=f.label, key=f"label_{group}_{f.id}", label_visibility="collapsed")
        value = c2.text_input(
            "값", value=f.value, placeholder=f.placeholder, key=f"value_{group}_{f.id}", label_visibility="collapsed"
        )
        if label != f.label or value != f.value:
            document.update_field(group, f.id, label=label, value=value)
        if c3.button("삭제", key=f"remove_{group}_{f.id}"):
            document.remove_field(group, f.id)
            st.rerun()
    if st.button("항목 추가", key=f"add_{group}"):
        document.add_field(group, label="새 항목")
        st.rerun()


def render_section_editor(coord: ViewCoordinator) -> None:
    editor = coord.editor
    session = editor.session
    if session is None:
        return
    section = session.target_section
    st.markdown(f"#### {SECTION_LABELS[section]} 편집")

    b1, b2, b3 = st.columns(3)
    if b1.button("수정 내용 표시 끄기" if editor.mode == DiffMode.INLINE else "수정 내용 표시", key="toggle_inline"):
        editor.toggle_inline_diff()
        st.rerun()
    if b2.button("원문 비교 닫기" if editor.mode == DiffMode.SIDE_BY_SIDE else "원문과 비교", key="toggle_split"):
        if editor.mode == DiffMode.SIDE_BY_SIDE:
            editor.exit_split_diff()
        else:
            editor.enter_split_diff()
        st.rerun()
    if b3.button("자동 문단 정리", key="auto_paragraph", disabled=not editor.editable):
        coord.request_auto_paragraph()
        st.rerun()

    if coord.state.confirm_auto_paragraph:
        st.warning("문장 단위로 줄을 나누면 기존 서식이 사라집니다. 계속하시겠습니까?")
        c1, c2 = st.columns(2)
        if c1.button("적용", key="confirm_auto_paragraph"):
            coord.confirm_auto_paragraph()
            st.rerun()
        if c2.button("취소", key="dismiss_auto_paragraph"):
            coord.dismiss_auto_paragraph()
            st.rerun()

    if editor.mode == DiffMode.SIDE_BY_SIDE:
        split = editor.split_view()
        left, right = st.columns(2)
        left.markdown("**AI 원문**")
        left.markdown(f"<div class='draft-box'>{split.original_html}</div>", unsafe_allow_html=True)
        right.markdown("**현재 내용**")
        right.markdown(f"<div class='draft-box'>{split.current_html}</div>", unsafe_allow_html=True)
    elif editor.mode == DiffMode.INLINE:
        st.markdown(f"<div class='draft-box'>{editor.working_content}</div>", unsafe_allow_html=True)
    else:
        content = st_quill(value=editor.working_content, html=True, key=f"quill_{section}")
        if content is not None and content != editor.working_content:
            editor.update(content)

    s1, s2 = st.columns(2)
    if s1.button("저장", type="primary", key="editor_save"):
        coord.save_editor()
        st.rerun()
    if s2.button("취소", key="editor_cancel"):
        coord.cancel_editor()
        st.rerun()


def render_assistant(coord: ViewCoordinator) -> None:
    panel = coord.assistant
    if not panel.is_open:
        return
    section = panel.section
    locked = coord.editor.is_open and coord.editor.session.target_section == section
    st.markdown(f"#### AI 도우미 · {SECTION_LABELS[section]}")
    if locked:
        st.caption("편집 중인 섹션에는 적용할 수 없습니다. 편집기를 저장하거나 취소해 주세요.")
    for i, msg in enumerate(panel.messages):
        with st.chat_message("assistant" if msg.role == "assistant" else "user"):
            if msg.is_error:
                st.error(msg.content)
            else:
                st.write(msg.content)
            if msg.role == "assistant" and not msg.is_error:
                if st.button("이 내용 적용", key=f"apply_{section}_{i}", disabled=locked):
                    if coord.apply_chat(msg.content).success:
                        st.rerun()
    message = st.chat_input("상황을 설명해 주세요", disabled=panel.busy, key=f"chat_{section}")
    if message:
        try:
            with st.spinner("AI가 답변을 작성하고 있습니다…"):
                coord.send_chat(message)
        except AssistantBusyError as e:
            st.warning(str(e))
        st.rerun()
    if st.button("도우미 닫기", key="close_assistant"):
        coord.close_assistant()
        st.rerun()


def render_export(coord: ViewCoordinator) -> None:
    st.caption(f"예상 페이지 수: {coord.page_count_estimate()}쪽 (표지 포함, 실제 PDF와 다를 수 있음)")
    c1, c2 = st.columns(2)
    if c1.button("PDF 만들기", key="build_pdf"):
        try:
            st.session_state["pdf_export"] = coord.export_pdf()
        except ExportError as e:
            st.session_state.pop("pdf_export", None)
            st.error(str(e))
    result = st.session_state.get("pdf_export")
    if result is not None:
        c1.download_button("PDF 다운로드", data=result.data, file_name=result.filename, mime=result.mime_type)
    if c2.button("DOCX 만들기", key="build_docx"):
        try:
            st.session_state["docx_export"] = coord.export_docx()
        except ExportError as e:
            st.session_state.pop("docx_export", None)
            st.error(str(e))
    if st.session_state.get("docx_export"):
        c2.download_button(
            "DOCX 다운로드",
            data=st.session_state["docx_export"],
            file_name=DEFAULT_DOCX_FILENAME,
            mime=DOCX_MIME_TYPE,
        )


def render_edit(coord: ViewCoordinator) -> None:
    document = coord.document
    if coord.state.placeholder:
        st.info("API 키가 설정되지 않아 모의 데이터가 표시됩니다.")
    col_left, col_right = st.columns([3, 2])
    with col_left:
        render_party_fields(coord, PERSONAL, "고소인")
        render_party_fields(coord, ACCUSED, "피고소인")
        editing_section = coord.editor.session.target_section if coord.editor.is_open else None
        for index, key in enumerate(SECTION_KEYS, start=1):
            st.markdown(f"### {index}. {SECTION_LABELS[key]}")
            _section_box(document.get_section(key))
            c1, c2, c3 = st.columns(3)
            if c1.button("편집", key=f"edit_{key}", disabled=coord.editor.is_open):
                coord.open_editor(key)
                st.rerun()
            regen_disabled = coord.state.regenerating == key or editing_section == key
            if c2.button("AI 재작성", key=f"regen_{key}", disabled=regen_disabled):
                with st.spinner("재작성 중…"):
                    coord.regenerate(key)
                st.rerun()
            if c3.button("AI 도우미", key=f"assist_{key}"):
                coord.open_assistant(key)
                st.rerun()
        c1, c2 = st.columns(2)
        document.date = c1.text_input("작성일", value=document.date)
        document.filing_office = c2.text_input("제출처", value=document.filing_office)
    with col_right:
        render_section_editor(coord)
        render_assistant(coord)
        render_export(coord)


# -------------------------
# Analysis view
# -------------------------
def _sync_column(layout, column: Column, key: str) -> None:
    # a refused hide snaps the checkbox back to the column's real visibility
    st.session_state[key] = layout.set_visible(column, st.session_state[key])
    if layout.last_warning:
        st.session_state["column_warning"] = layout.last_warning


def render_analysis(coord: ViewCoordinator) -> None:
    layout = coord.layout
    toggles = st.columns(len(COLUMN_TITLES))
    for slot, column in zip(toggles, COLUMN_TITLES):
        key = f"show_{column.value}"
        st.session_state[key] = layout.is_visible(column)
        slot.checkbox(COLUMN_TITLES[column], key=key, on_change=_sync_column, args=(layout, column, key))
    warning = st.session_state.pop("column_warning", None)
    if warning:
        st.warning(warning)

    rendered = layout.rendered_columns()
    for slot, column in zip(st.columns(len(rendered)), rendered):
        with slot:
            title_col, expand_col = st.columns([4, 1])
            title_col.markdown(f"**{COLUMN_TITLES[column]}**")
            if expand_col.button("축소" if layout.expanded == column else "확대", key=f"expand_{column.value}"):
                layout.toggle_expand(column)
                st.rerun()
            if column == Column.ORIGINAL:
                original = coord.original_input
                st.markdown("**요청 내용**")
                st.text(original.prompt if original else "")
                for f in original.attached_files if original else ():
                    with st.expander(f.name, expanded=False):
                        st.text(f.extracted_text)
            elif column == Column.PROMPT_OUTPUT:
                for key in SECTION_KEYS:
                    st.markdown(f"**{SECTION_LABELS[key]}**")
                    generated = coord.generated_sections.get(key, "")
                    _section_box(generated)
                    current = coord.document.get_section(key)
                    if html_to_plain_text(generated) != html_to_plain_text(current):
                        with st.expander("변경 내역", expanded=False):
                            st.code(unified_diff(generated, current), language="diff")
            else:
                if not coord.editor.is_open:
                    choice = st.selectbox("편집할 섹션", SECTION_KEYS, format_func=SECTION_LABELS.get)
                    if st.button("편집 시작", key="analysis_open_editor"):
                        coord.open_editor(choice)
                        st.rerun()
                render_section_editor(coord)


# -------------------------
# Page
# -------------------------
def main() -> None:
    st.set_page_config(page_title="AI 고소장 작성", layout="wide")
    st.markdown(DIFF_CSS, unsafe_allow_html=True)
    st.title("AI 고소장 작성")
    coord = _coordinator()

    with st.sidebar:
        st.header("화면")
        if st.button("작성 요청"):
            coord.show_compose()
        if st.button("편집", disabled=coord.document is None):
            coord.show_editor()
        if st.button("원문 비교 분석", disabled=coord.document is None):
            coord.show_analysis()

    _show_error(coord)
    view = coord.state.view
    if view == View.COMPOSE or coord.document is None:
        render_compose(coord)
    elif view == View.EDIT:
        render_edit(coord)
    else:
        render_analysis(coord)


main()
