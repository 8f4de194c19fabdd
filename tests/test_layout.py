import itertools
import random

from complaint.layout import COLUMN_ORDER, LAST_COLUMN_WARNING, Column, PanelLayout


def test_hiding_last_column_refused():
    layout = PanelLayout()
    assert layout.toggle(Column.ORIGINAL)
    assert layout.toggle(Column.PROMPT_OUTPUT)
    assert layout.toggle(Column.EDITOR) is False
    assert layout.last_warning == LAST_COLUMN_WARNING
    assert layout.visible_columns() == [Column.EDITOR]


def test_never_zero_visible_after_any_toggle_sequence():
    rng = random.Random(7)
    layout = PanelLayout()
    for column in (rng.choice(COLUMN_ORDER) for _ in range(300)):
        layout.toggle(column)
        assert len(layout.visible_columns()) >= 1


def test_all_short_sequences():
    for seq in itertools.product(COLUMN_ORDER, repeat=4):
        layout = PanelLayout()
        for column in seq:
            layout.toggle(column)
        assert layout.visible_columns()


def test_expand_suppresses_others():
    layout = PanelLayout()
    layout.expand(Column.EDITOR)
    assert layout.rendered_columns() == [Column.EDITOR]
    layout.expand(Column.ORIGINAL)
    assert layout.expanded == Column.ORIGINAL
    layout.toggle_expand(Column.ORIGINAL)
    assert layout.rendered_columns() == list(COLUMN_ORDER)


def test_hiding_expanded_column_collapses():
    layout = PanelLayout()
    layout.expand(Column.PROMPT_OUTPUT)
    layout.toggle(Column.PROMPT_OUTPUT)
    assert layout.expanded is None
    assert layout.rendered_columns() == [Column.ORIGINAL, Column.EDITOR]


def test_string_column_names_accepted():
    layout = PanelLayout()
    assert layout.toggle("editor")
    assert not layout.is_visible(Column.EDITOR)


def test_set_visible_refusal_reports_real_state():
    layout = PanelLayout(visible={Column.EDITOR})
    assert layout.set_visible(Column.EDITOR, False) is True
    assert layout.last_warning == LAST_COLUMN_WARNING
    # showing another column afterwards must not retroactively hide the editor
    assert layout.set_visible(Column.ORIGINAL, True) is True
    assert layout.last_warning is None
    assert layout.set_visible(Column.EDITOR, True) is True
    assert layout.visible_columns() == [Column.ORIGINAL, Column.EDITOR]


def test_set_visible_is_idempotent():
    layout = PanelLayout()
    assert layout.set_visible(Column.ORIGINAL, False) is False
    assert layout.set_visible(Column.ORIGINAL, False) is False
    assert layout.visible_columns() == [Column.PROMPT_OUTPUT, Column.EDITOR]
