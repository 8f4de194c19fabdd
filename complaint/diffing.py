"""
Text comparison between the original AI output of a section and the user's current text.

- inline_diff: character-level, additions highlighted, deletions hidden (read-only overlay)
- side_by_side_diff: line-level alignment refined to words, two panes
- unified_diff: plain unified diff for the analysis view
"""
import difflib
import html
import re
from dataclasses import dataclass

from complaint.utils import html_to_plain_text

ADDED_CLASS = "diff-added"
REMOVED_CLASS = "diff-removed"

_TOKEN = re.compile(r"\s+|[^\s]+")


def _esc(text: str) -> str:
    return html.escape(text, quote=False).replace("\n", "<br>")


def inline_diff(original: str, current: str) -> str:
    """
    Character-level diff of two editor HTML strings (compared as plain text).
    Inserted text is wrapped in <span class="diff-added">; deleted text is omitted.
    """
    a = html_to_plain_text(original)
    b = html_to_plain_text(current)
    out = []
    matcher = difflib.SequenceMatcher(None, a, b, autojunk=False)
    for tag, _i1, _i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            out.append(_esc(b[j1:j2]))
        elif tag in ("insert", "replace"):
            out.append(f'<span class="{ADDED_CLASS}">{_esc(b[j1:j2])}</span>')
    return "<p>" + "".join(out) + "</p>"


@dataclass
class SplitDiff:
    original_html: str
    current_html: str
    added: int
    removed: int

    @property
    def identical(self) -> bool:
        return self.added == 0 and self.removed == 0


def _word_diff(left: str, right: str) -> tuple[list[str], list[str], int, int]:
    a = _TOKEN.findall(left)
    b = _TOKEN.findall(right)
    left_out, right_out = [], []
    added = removed = 0
    for tag, i1, i2, j1, j2 in difflib.SequenceMatcher(None, a, b, autojunk=False).get_opcodes():
        old = "".join(a[i1:i2])
        new = "".join(b[j1:j2])
        if tag == "equal":
            left_out.append(_esc(old))
            right_out.append(_esc(new))
            continue
        if old:
            left_out.append(f'<del class="{REMOVED_CLASS}">{_esc(old)}</del>')
            removed += sum(1 for t in a[i1:i2] if t.strip())
        if new:
            right_out.append(f'<ins class="{ADDED_CLASS}">{_esc(new)}</ins>')
            added += sum(1 for t in b[j1:j2] if t.strip())
    return left_out, right_out, added, removed


def side_by_side_diff(original: str, current: str) -> SplitDiff:
    """Two read-only panes: original with removed words struck, current with added words marked."""
    a_lines = html_to_plain_text(original).split("\n")
    b_lines = html_to_plain_text(current).split("\n")
    left, right = [], []
    added = removed = 0
    for tag, i1, i2, j1, j2 in difflib.SequenceMatcher(None, a_lines, b_lines, autojunk=False).get_opcodes():
        if tag == "equal":
            block = _esc("\n".join(a_lines[i1:i2]))
            left.append(block)
            right.append(block)
            continue
        l_words, r_words, n_add, n_rem = _word_diff("\n".join(a_lines[i1:i2]), "\n".join(b_lines[j1:j2]))
        if i2 > i1:
            left.append("".join(l_words))
        if j2 > j1:
            right.append("".join(r_words))
        added += n_add
        removed += n_rem
    return SplitDiff(
        original_html="<p>" + "<br>".join(left) + "</p>",
        current_html="<p>" + "<br>".join(right) + "</p>",
        added=added,
        removed=removed,
    )


def unified_diff(before: str, after: str, fromfile: str = "AI 원문", tofile: str = "수정본") -> str:
    """
    Unified diff between two texts. Lines prefixed with '-' were removed, '+' were added.
    """
    before_lines = html_to_plain_text(before).splitlines(keepends=True)
    after_lines = html_to_plain_text(after).splitlines(keepends=True)
    if not before_lines and not after_lines:
        return "(변경 사항 없음: 두 내용이 모두 비어 있습니다.)"
    diff = difflib.unified_diff(before_lines, after_lines, fromfile=fromfile, tofile=tofile, lineterm="")
    result = "\n".join(line.rstrip("\n") for line in diff)
    return result if result.strip() else "(차이 없음: 두 내용이 동일합니다.)"
