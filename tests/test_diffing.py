import re

from complaint.diffing import inline_diff, side_by_side_diff, unified_diff


def _text(markup: str) -> str:
    return re.sub(r"<[^>]+>", "", markup)


def test_inline_marks_insertions():
    rendered = inline_diff("<p>고소인은 피해를 입었다</p>", "<p>고소인은 큰 피해를 입었다</p>")
    assert 'class="diff-added"' in rendered
    assert _text(rendered) == "고소인은 큰 피해를 입었다"


def test_inline_hides_deletions():
    assert inline_diff("<p>abc</p>", "<p>ac</p>") == "<p>ac</p>"


def test_inline_escapes_text():
    assert "&lt;b&gt;" in inline_diff("", "<p>&lt;b&gt;</p>")


def test_side_by_side_marks_words():
    split = side_by_side_diff("<p>one two three</p>", "<p>one 2 three four</p>")
    assert '<del class="diff-removed">two</del>' in split.original_html
    assert '<ins class="diff-added">2</ins>' in split.current_html
    assert split.added == 2 and split.removed == 1
    assert not split.identical


def test_side_by_side_identical():
    assert side_by_side_diff("<p>same</p>", "<p>same</p>").identical


def test_unified_diff():
    assert "+new" in unified_diff("<p>old</p>", "<p>new</p>")
    assert "차이 없음" in unified_diff("<p>x</p>", "<p>x</p>")
