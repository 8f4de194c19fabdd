"""
PDF export: one fixed title/parties page, then flowing content pages for the three
narrative sections, A4 portrait.

The PDF is assembled entirely in memory; if any step fails an ExportError is raised and
no bytes (and no file) are produced.
"""
import html
import logging
import os
import tempfile
from dataclasses import dataclass
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from complaint.document import SECTION_KEYS, DraftDocument
from complaint.errors import ExportError
from complaint.utils import html_to_plain_text
from rendering.fonts import register_fonts
from rendering.pagination import BODY_FONT_SIZE, BODY_LEADING, PAGE_CONTENT_WIDTH, PAGE_MARGIN, section_heading

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "고소장.pdf"
LABEL_COLUMN_WIDTH = 32 * mm


@dataclass
class ExportResult:
    data: bytes
    page_count: int
    filename: str
    mime_type: str = "application/pdf"


def _paragraph_markup(text: str) -> str:
    return html.escape(text, quote=False).replace("\n", "<br/>")


class PdfExporter:
    """Renders a DraftDocument to PDF bytes with reportlab platypus."""

    def __init__(self, filename: str = DEFAULT_FILENAME):
        self.filename = filename
        body_font, heading_font = register_fonts()
        self.styles = {
            "title": ParagraphStyle(
                "title", fontName=heading_font, fontSize=26, leading=34, alignment=TA_CENTER, spaceAfter=28
            ),
            "party": ParagraphStyle("party", fontName=heading_font, fontSize=13, leading=18, spaceBefore=14, spaceAfter=6),
            "cell": ParagraphStyle("cell", fontName=body_font, fontSize=10, leading=14, wordWrap="CJK"),
            "heading": ParagraphStyle(
                "heading", fontName=heading_font, fontSize=14, leading=20, spaceBefore=12, spaceAfter=8
            ),
            "body": ParagraphStyle(
                "body", fontName=body_font, fontSize=BODY_FONT_SIZE, leading=BODY_LEADING, wordWrap="CJK", spaceAfter=6
            ),
            "date": ParagraphStyle("date", fontName=body_font, fontSize=12, leading=18, alignment=TA_CENTER, spaceBefore=36),
            "office": ParagraphStyle(
                "office", fontName=heading_font, fontSize=16, leading=22, alignment=TA_RIGHT, spaceBefore=24
            ),
        }

    # ---- page builders --------------------------------------------------

    def _party_table(self, fields) -> Table:
        cell = self.styles["cell"]
        rows = [
            [Paragraph(_paragraph_markup(f.label), cell), Paragraph(_paragraph_markup(f.value), cell)]
            for f in fields
        ] or [[Paragraph("", cell), Paragraph("", cell)]]
        table = Table(rows, colWidths=[LABEL_COLUMN_WIDTH, PAGE_CONTENT_WIDTH - LABEL_COLUMN_WIDTH])
        table.setStyle(
            TableStyle(
                [
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("BACKGROUND", (0, 0), (0, -1), colors.whitesmoke),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        return table

    def _title_page(self, document: DraftDocument) -> list:
        return [
            Paragraph("고 소 장", self.styles["title"]),
            Paragraph("고소인", self.styles["party"]),
            self._party_table(document.personal_info),
            Paragraph("피고소인", self.styles["party"]),
            self._party_table(document.accused_info),
            PageBreak(),
        ]

    def _content_pages(self, document: DraftDocument) -> list:
        story = []
        for index, key in enumerate(SECTION_KEYS, start=1):
            story.append(Paragraph(_paragraph_markup(section_heading(index, key)), self.styles["heading"]))
            text = html_to_plain_text(document.get_section(key))
            for block in text.split("\n\n") if text else [""]:
                story.append(Paragraph(_paragraph_markup(block.strip()), self.styles["body"]))
            story.append(Spacer(1, 12))
        story.append(Paragraph(_paragraph_markup(document.date), self.styles["date"]))
        signer = next((f.value for f in document.personal_info if f.value), "")
        story.append(Paragraph(_paragraph_markup(f"고소인  {signer}  (인)"), self.styles["date"]))
        story.append(Paragraph(_paragraph_markup(document.filing_office), self.styles["office"]))
        return story

    @staticmethod
    def _draw_page_number(canvas, doc) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 9)
        canvas.drawCentredString(A4[0] / 2, PAGE_MARGIN / 2, f"- {doc.page} -")
        canvas.restoreState()

    # ---- public API ---------------------------------------------------

    def export(self, document: DraftDocument) -> ExportResult:
        """Build the whole PDF in memory. Raises ExportError on any failure."""
        buf = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buf,
                pagesize=A4,
                leftMargin=PAGE_MARGIN,
                rightMargin=PAGE_MARGIN,
                topMargin=PAGE_MARGIN,
                bottomMargin=PAGE_MARGIN,
                title="고소장",
            )
            story = self._title_page(document) + self._content_pages(document)
            doc.build(story, onFirstPage=self._draw_page_number, onLaterPages=self._draw_page_number)
            page_count = doc.page
        except Exception as e:
            logger.exception("PDF export failed")
            raise ExportError(f"PDF 생성에 실패했습니다: {e}") from e
        data = buf.getvalue()
        logger.info("Exported PDF (%d pages, %d bytes)", page_count, len(data))
        return ExportResult(data=data, page_count=page_count, filename=self.filename)

    def write(self, document: DraftDocument, path: str) -> ExportResult:
        """Export to ``path``; the target is only replaced once the complete PDF exists."""
        result = self.export(document)
        directory = os.path.dirname(os.path.abspath(path))
        fd, tmp_path = tempfile.mkstemp(suffix=".pdf", dir=directory)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(result.data)
            os.replace(tmp_path, path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise ExportError(f"PDF 파일을 저장할 수 없습니다: {e}") from e
        return result
