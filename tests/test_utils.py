import pytest

from complaint.utils import JsonParser, TextUtils


class TestJsonParser:
    def test_fenced_json(self):
        raw = '```json\n{"facts": "내용"}\n```'
        assert JsonParser.extract_json_from_llm(raw) == {"facts": "내용"}

    def test_raw_newlines_and_trailing_comma(self):
        raw = '{"facts": "첫째 줄\n둘째 줄",}'
        assert JsonParser.extract_json_from_llm(raw) == {"facts": "첫째 줄\n둘째 줄"}

    def test_leading_chatter(self):
        assert JsonParser.extract_json_from_llm('결과입니다: {"a": "b"} 끝') == {"a": "b"}

    @pytest.mark.parametrize("raw", ["", "   ", "no json here"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            JsonParser.extract_json_from_llm(raw)


class TestHtml:
    def test_plain_text_to_html_escapes(self):
        assert TextUtils.plain_text_to_html("a < b\nc") == "<p>a &lt; b<br>c</p>"

    def test_html_to_plain_text(self):
        markup = "<p><strong>굵게</strong> 글자</p><p>둘째&nbsp;줄<br>셋째</p>"
        assert TextUtils.html_to_plain_text(markup) == "굵게 글자\n둘째 줄\n셋째"

    def test_blank(self):
        assert TextUtils.is_blank("<p><br></p>")
        assert not TextUtils.is_blank("<p>x</p>")

    def test_display_html_keeps_only_paragraph_markup(self):
        markup = '<p onclick="x()">첫째<img src=x onerror=alert(1)></p><p>&lt;script&gt;둘째</p>'
        assert TextUtils.display_html(markup) == "<p>첫째<br>&lt;script&gt;둘째</p>"
