"""
JSON parsing and text utilities. Encapsulated in classes (OOP).
"""
import html
import json
import re


class JsonParser:
    """
    Handles parsing JSON from LLM responses: strip markdown fences, escape raw newlines
    inside strings, drop trailing commas, and extract the JSON object.
    """

    _TRAILING_COMMA = re.compile(r",\s*([}\]])")

    @staticmethod
    def _escape_newlines_in_json_strings(s: str) -> str:
        """Replace raw newlines and tabs inside JSON string values with \\n and \\t."""
        result = []
        in_string = False
        escape = False
        for c in s:
            if escape:
                result.append(c)
                escape = False
            elif c == "\\" and in_string:
                result.append(c)
                escape = True
            elif c == '"':
                result.append(c)
                in_string = not in_string
            elif in_string and c == "\n":
                result.append("\\n")
            elif in_string and c == "\r":
                result.append("\\r")
            elif in_string and c == "\t":
                result.append("\\t")
            else:
                result.append(c)
        return "".join(result)

    @classmethod
    def _try_parse(cls, s: str):
        candidates = (
            s,
            cls._TRAILING_COMMA.sub(r"\1", s),
            cls._escape_newlines_in_json_strings(s),
            cls._TRAILING_COMMA.sub(r"\1", cls._escape_newlines_in_json_strings(s)),
        )
        for candidate in candidates:
            try:
                return json.loads(candidate)
            except json.JSONDecodeError:
                continue
        return None

    @classmethod
    def extract_json_from_llm(cls, response: str):
        """Parse JSON from an LLM response. Raises ValueError when nothing parseable is found."""
        if not response or not response.strip():
            raise ValueError("LLM returned empty response.")
        text = response.strip()
        if "```" in text:
            start = text.find("```")
            if text[start:].startswith("```json"):
                start += 7
            else:
                start = text.find("\n", start) + 1 if "\n" in text[start:] else start + 3
            end = text.rfind("```")
            if end > start:
                text = text[start:end].strip()
        pos = text.find("{")
        if pos >= 0:
            end = text.rfind("}")
            text = text[pos:end + 1] if end > pos else text[pos:]
        parsed = cls._try_parse(text)
        if parsed is not None:
            return parsed
        raise ValueError("LLM did not return valid JSON.")


class TextUtils:
    """
    Plain text <-> editor HTML conversion.
    Section content lives as the HTML emitted by the rich-text editor.
    """

    _BLOCK_BREAK = re.compile(r"</(p|div|h[1-6]|li|blockquote|pre)>\s*", re.I)
    _LINE_BREAK = re.compile(r"<br\s*/?>", re.I)
    _TAG = re.compile(r"<[^>]+>")

    @staticmethod
    def plain_text_to_html(text: str) -> str:
        """Wrap plain text in editor HTML: blank-line separated blocks become <p>, single newlines <br>."""
        if not (text or "").strip():
            return "<p><br></p>"
        parts = []
        for para in text.replace("\r\n", "\n").split("\n\n"):
            para = para.strip()
            if para:
                parts.append("<p>" + html.escape(para, quote=False).replace("\n", "<br>") + "</p>")
        return "".join(parts) or "<p><br></p>"

    @classmethod
    def html_to_plain_text(cls, markup: str) -> str:
        """Extract plain text from editor HTML. Paragraph ends become newlines; other tags are stripped."""
        if not markup:
            return ""
        if "<" not in markup:
            return markup.strip()
        text = cls._LINE_BREAK.sub("\n", markup)
        text = cls._BLOCK_BREAK.sub("\n", text)
        text = cls._TAG.sub("", text)
        text = html.unescape(text).replace("\xa0", " ")
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()

    @classmethod
    def display_html(cls, markup: str) -> str:
        """Rebuild editor or model HTML from its text so only <p> and <br> reach a page."""
        return cls.plain_text_to_html(cls.html_to_plain_text(markup))

    @classmethod
    def is_blank(cls, markup: str) -> bool:
        return not cls.html_to_plain_text(markup).strip()


# Backward-compatible module-level functions
def plain_text_to_html(text: str) -> str:
    return TextUtils.plain_text_to_html(text)


def html_to_plain_text(markup: str) -> str:
    return TextUtils.html_to_plain_text(markup)


def is_blank(markup: str) -> bool:
    return TextUtils.is_blank(markup)


def display_html(markup: str) -> str:
    return TextUtils.display_html(markup)
