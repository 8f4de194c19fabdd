"""
Section editor: a transient EditSession over one narrative section.

States: closed -> editing <-> diff-inline | diff-split -> saved/cancelled -> closed.
Diff modes never touch the DraftDocument; inline diff swaps the working content for a
read-only annotated rendering and restores the exact pre-diff content on exit.
"""
import html
import logging
import re
from dataclasses import dataclass
from enum import Enum

from complaint.diffing import SplitDiff, inline_diff, side_by_side_diff
from complaint.document import DraftDocument, check_section
from complaint.errors import EditorStateError
from complaint.utils import html_to_plain_text

logger = logging.getLogger(__name__)

_SENTENCE_END = re.compile(r"(?<=[.?!])\s+")


class DiffMode(str, Enum):
    NONE = "none"
    INLINE = "inline"
    SIDE_BY_SIDE = "sideBySide"


@dataclass
class EditSession:
    target_section: str
    working_content: str
    original_snapshot: str
    diff_mode: DiffMode = DiffMode.NONE
    pre_diff_snapshot: str | None = None


def split_sentences(text: str) -> list[str]:
    """Split plain text after '.', '?' or '!' followed by whitespace. "A. B! C?" -> ["A.", "B!", "C?"]."""
    return [s.strip() for s in _SENTENCE_END.split((text or "").strip()) if s.strip()]


def auto_paragraph(content: str) -> str:
    """One sentence per line inside a single paragraph block. Drops existing rich-text formatting."""
    sentences = split_sentences(html_to_plain_text(content).replace("\n", " "))
    return "<p>" + "<br>".join(html.escape(s, quote=False) for s in sentences) + "</p>"


class SectionEditor:
    """
    Owns at most one EditSession. Nothing reaches the DraftDocument except through save().
    """

    def __init__(self):
        self._session: EditSession | None = None
        self._auto_paragraph_pending = False

    # ---- lifecycle ----------------------------------------------------

    @property
    def session(self) -> EditSession | None:
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None

    def _require_session(self) -> EditSession:
        if self._session is None:
            raise EditorStateError("Section editor is not open.")
        return self._session

    def open(self, document: DraftDocument, section: str) -> EditSession:
        content = document.get_section(check_section(section))
        self._session = EditSession(target_section=section, working_content=content, original_snapshot=content)
        self._auto_paragraph_pending = False
        logger.debug("Editor opened for %s", section)
        return self._session

    def save(self, document: DraftDocument) -> str:
        """Commit into document.<section> and close. Inline diff markup is never committed."""
        session = self._require_session()
        if session.diff_mode == DiffMode.INLINE:
            content = session.pre_diff_snapshot
        else:
            content = session.working_content
        document.set_section(session.target_section, content)
        logger.info("Saved section %s (%d chars)", session.target_section, len(content))
        self._close()
        return content

    def cancel(self) -> None:
        """Discard the working content; the document is untouched."""
        self._close()

    def _close(self) -> None:
        self._session = None
        self._auto_paragraph_pending = False

    # ---- editing ------------------------------------------------------

    @property
    def mode(self) -> DiffMode:
        return self._session.diff_mode if self._session else DiffMode.NONE

    @property
    def editable(self) -> bool:
        return self._session is not None and self._session.diff_mode != DiffMode.INLINE

    @property
    def working_content(self) -> str:
        return self._require_session().working_content

    def update(self, content: str) -> None:
        session = self._require_session()
        if session.diff_mode == DiffMode.INLINE:
            raise EditorStateError("Editor is read-only while the inline diff is shown.")
        session.working_content = content or ""

    # ---- inline diff --------------------------------------------------

    def enter_inline_diff(self) -> str:
        session = self._require_session()
        if session.diff_mode == DiffMode.INLINE:
            return session.working_content
        if session.diff_mode == DiffMode.SIDE_BY_SIDE:
            self.exit_split_diff()
        session.pre_diff_snapshot = session.working_content
        session.working_content = inline_diff(session.original_snapshot, session.pre_diff_snapshot)
        session.diff_mode = DiffMode.INLINE
        return session.working_content

    def exit_inline_diff(self) -> str:
        session = self._require_session()
        if session.diff_mode != DiffMode.INLINE:
            return session.working_content
        session.working_content = session.pre_diff_snapshot
        session.pre_diff_snapshot = None
        session.diff_mode = DiffMode.NONE
        return session.working_content

    def toggle_inline_diff(self) -> str:
        if self.mode == DiffMode.INLINE:
            return self.exit_inline_diff()
        return self.enter_inline_diff()

    # ---- side-by-side diff --------------------------------------------

    def enter_split_diff(self) -> SplitDiff:
        session = self._require_session()
        if session.diff_mode == DiffMode.INLINE:
            self.exit_inline_diff()
        session.diff_mode = DiffMode.SIDE_BY_SIDE
        return self.split_view()

    def exit_split_diff(self) -> None:
        session = self._require_session()
        if session.diff_mode == DiffMode.SIDE_BY_SIDE:
            session.diff_mode = DiffMode.NONE

    def split_view(self) -> SplitDiff:
        session = self._require_session()
        return side_by_side_diff(session.original_snapshot, session.working_content)

    # ---- auto-paragraph (confirmed via modal) -------------------------

    @property
    def auto_paragraph_pending(self) -> bool:
        return self._auto_paragraph_pending

    def request_auto_paragraph(self) -> None:
        session = self._require_session()
        if session.diff_mode == DiffMode.INLINE:
            raise EditorStateError("Leave the inline diff before re-segmenting paragraphs.")
        self._auto_paragraph_pending = True

    def dismiss_auto_paragraph(self) -> None:
        self._auto_paragraph_pending = False

    def confirm_auto_paragraph(self) -> str:
        if not self._auto_paragraph_pending:
            raise EditorStateError("Auto-paragraph was not requested.")
        session = self._require_session()
        self._auto_paragraph_pending = False
        session.working_content = auto_paragraph(session.working_content)
        return session.working_content
