"""
Word export of the draft (python-docx): title, party tables, the three narrative
sections, date and filing office. Same structure as the PDF export.
"""
import logging
from io import BytesIO

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from complaint.document import SECTION_KEYS, DraftDocument
from complaint.errors import ExportError
from complaint.utils import html_to_plain_text
from rendering.pagination import section_heading

logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DEFAULT_DOCX_FILENAME = "고소장.docx"


class DocxExporter:
    """Builds a .docx in memory from a DraftDocument."""

    @staticmethod
    def _add_party_table(doc, heading: str, fields) -> None:
        doc.add_heading(heading, level=2)
        table = doc.add_table(rows=0, cols=2)
        table.style = "Table Grid"
        for f in fields:
            cells = table.add_row().cells
            cells[0].text = f.label
            cells[1].text = f.value

    def export(self, document: DraftDocument) -> bytes:
        try:
            doc = Document()
            title = doc.add_heading("고 소 장", level=0)
            title.alignment = WD_ALIGN_PARAGRAPH.CENTER
            self._add_party_table(doc, "고소인", document.personal_info)
            self._add_party_table(doc, "피고소인", document.accused_info)
            doc.add_page_break()
            for index, key in enumerate(SECTION_KEYS, start=1):
                doc.add_heading(section_heading(index, key), level=1)
                text = html_to_plain_text(document.get_section(key))
                for block in (text or "").split("\n\n"):
                    para = doc.add_paragraph(block.strip())
                    for run in para.runs:
                        run.font.size = Pt(11)
            closing = doc.add_paragraph(document.date)
            closing.alignment = WD_ALIGN_PARAGRAPH.CENTER
            office = doc.add_paragraph(document.filing_office)
            office.alignment = WD_ALIGN_PARAGRAPH.RIGHT
            buf = BytesIO()
            doc.save(buf)
        except Exception as e:
            logger.exception("DOCX export failed")
            raise ExportError(f"DOCX 생성에 실패했습니다: {e}") from e
        return buf.getvalue()
