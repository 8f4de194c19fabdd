"""
Approximate page-count estimation for the document preview.

The preview shows one fixed title/parties page followed by flowing content pages.
The number of content pages is estimated from the measured height of the narrative
text against a fixed page height; it is not real pagination and can disagree with
the exported PDF near page boundaries. Callers depend only on PageEstimator so a
true layout measurement can replace HeightRatioEstimator.
"""
import math
from abc import ABC, abstractmethod

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics

from complaint.document import SECTION_KEYS, SECTION_LABELS, DraftDocument
from complaint.utils import html_to_plain_text
from rendering.fonts import register_fonts

PAGE_MARGIN = 20 * mm
PAGE_CONTENT_HEIGHT = A4[1] - 2 * PAGE_MARGIN
PAGE_CONTENT_WIDTH = A4[0] - 2 * PAGE_MARGIN
BODY_FONT_SIZE = 11
BODY_LEADING = 18
HEADING_HEIGHT = 36
SECTION_GAP = 18
TITLE_PAGES = 1


class PageEstimator(ABC):
    """Estimates how many content pages the narrative sections will occupy."""

    @abstractmethod
    def content_pages(self, document: DraftDocument) -> int:
        ...

    def total_pages(self, document: DraftDocument) -> int:
        return TITLE_PAGES + self.content_pages(document)


class HeightRatioEstimator(PageEstimator):
    """ceil(measured content height / page height), at least one page."""

    def __init__(
        self,
        page_height: float = PAGE_CONTENT_HEIGHT,
        content_width: float = PAGE_CONTENT_WIDTH,
        font_size: float = BODY_FONT_SIZE,
        leading: float = BODY_LEADING,
    ):
        self.page_height = page_height
        self.content_width = content_width
        self.font_size = font_size
        self.leading = leading
        self.font_name, _ = register_fonts()

    def line_count(self, text: str) -> int:
        lines = 0
        for raw_line in text.split("\n"):
            width = pdfmetrics.stringWidth(raw_line, self.font_name, self.font_size)
            lines += max(1, math.ceil(width / self.content_width))
        return lines

    def measure(self, document: DraftDocument) -> float:
        height = 0.0
        for key in SECTION_KEYS:
            text = html_to_plain_text(document.get_section(key))
            height += HEADING_HEIGHT + self.line_count(text) * self.leading + SECTION_GAP
        return height

    def content_pages(self, document: DraftDocument) -> int:
        return max(1, math.ceil(self.measure(document) / self.page_height))


def preview_page_count(document: DraftDocument, estimator: PageEstimator | None = None) -> int:
    return (estimator or HeightRatioEstimator()).total_pages(document)


def section_heading(index: int, key: str) -> str:
    return f"{index}. {SECTION_LABELS[key]}"
