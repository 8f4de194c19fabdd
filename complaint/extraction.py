"""
Attachment text extraction for the create request.

Only PDFs are read (pdfplumber). Other accepted types are referenced by name only.
A file that cannot be read degrades to a placeholder note; it never aborts the request.
"""
import base64
import binascii
import io
import logging

import pdfplumber

from complaint.errors import ExtractionError
from complaint.schemas import FilePayload

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_NOTE = "(내용 추출 실패)"
UNSUPPORTED_NOTE = "(미지원 파일 형식)"
UNSUPPORTED_PROMPT_NOTE = "(미지원 파일 형식, 이름만 참조)"


def is_pdf(file: FilePayload) -> bool:
    return file.type == "application/pdf" or file.name.lower().endswith(".pdf")


def extract_pdf_text(data: bytes) -> str:
    """Return the text of every page joined by blank lines. Raises ExtractionError on unreadable input."""
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        raise ExtractionError(f"PDF parsing failed: {e}") from e
    return "\n\n".join(p for p in pages if p).strip()


class AttachmentExtractor:
    """
    Turns uploaded file payloads into (combined prompt text, per-file extracted text).
    """

    def extract(self, files: list[FilePayload]) -> tuple[str, list[dict]]:
        combined = []
        extracted = []
        for file in files:
            if not file.data:
                continue
            if is_pdf(file):
                text, note = self._extract_one(file)
                if note:
                    combined.append(f"\n[파일명: {file.name}] {note}\n")
                    extracted.append({"name": file.name, "content": note})
                else:
                    combined.append(f"\n[파일명: {file.name}]\n{text}\n")
                    extracted.append({"name": file.name, "content": text})
            else:
                logger.info("Skipping text extraction for unsupported file type: %s", file.name)
                combined.append(f"\n[파일명: {file.name}] {UNSUPPORTED_PROMPT_NOTE}\n")
                extracted.append({"name": file.name, "content": UNSUPPORTED_NOTE})
        return "".join(combined), extracted

    @staticmethod
    def _extract_one(file: FilePayload) -> tuple[str, str | None]:
        logger.info("Extracting PDF text: %s", file.name)
        try:
            data = base64.b64decode(file.data, validate=False)
            text = extract_pdf_text(data)
        except (binascii.Error, ValueError, ExtractionError) as e:
            logger.error("PDF extraction failed (%s): %s", file.name, e)
            return "", EXTRACTION_FAILED_NOTE
        logger.info("Extracted %s (%d chars)", file.name, len(text))
        return text, None
