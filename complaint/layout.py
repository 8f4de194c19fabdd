"""
Column layout of the analysis view: original input, AI prompt output, and editor panels.

Columns toggle independently but at least one stays visible. At most one column is
expanded (fullscreen); while expanded, the other two are not rendered at all.
"""
import logging
from enum import Enum

logger = logging.getLogger(__name__)

LAST_COLUMN_WARNING = "최소 한 개의 패널은 표시되어야 합니다."


class Column(str, Enum):
    ORIGINAL = "original"
    PROMPT_OUTPUT = "promptOutput"
    EDITOR = "editor"


COLUMN_ORDER = (Column.ORIGINAL, Column.PROMPT_OUTPUT, Column.EDITOR)


class PanelLayout:
    def __init__(self, visible: set[Column] | None = None):
        self._visible = set(visible) if visible else set(COLUMN_ORDER)
        self._expanded: Column | None = None
        self.last_warning: str | None = None

    def is_visible(self, column: Column) -> bool:
        return column in self._visible

    def visible_columns(self) -> list[Column]:
        return [c for c in COLUMN_ORDER if c in self._visible]

    def toggle(self, column: Column) -> bool:
        """Flip visibility. Hiding the last visible column is refused: returns False and records a warning."""
        column = Column(column)
        self.last_warning = None
        if column in self._visible:
            if len(self._visible) == 1:
                self.last_warning = LAST_COLUMN_WARNING
                logger.warning("Refused to hide %s: it is the last visible column", column.value)
                return False
            self._visible.remove(column)
            if self._expanded == column:
                self._expanded = None
        else:
            self._visible.add(column)
        return True

    def set_visible(self, column: Column, visible: bool) -> bool:
        """Idempotent form of toggle for checkbox widgets. Returns the visibility actually in effect."""
        column = Column(column)
        self.last_warning = None
        if self.is_visible(column) != visible:
            self.toggle(column)
        return self.is_visible(column)

    @property
    def expanded(self) -> Column | None:
        return self._expanded

    def expand(self, column: Column) -> None:
        column = Column(column)
        self._visible.add(column)
        self._expanded = column

    def collapse(self) -> None:
        self._expanded = None

    def toggle_expand(self, column: Column) -> None:
        if self._expanded == Column(column):
            self.collapse()
        else:
            self.expand(column)

    def rendered_columns(self) -> list[Column]:
        if self._expanded is not None:
            return [self._expanded]
        return self.visible_columns()
