"""
Flask Blueprint for document export.
Mount at /export (e.g. /export/api/pdf and /export/api/docx).
Both routes accept the serialized DraftDocument JSON produced by DraftDocument.to_dict().
"""
from urllib.parse import quote

from flask import Blueprint, request, jsonify, Response

from complaint.document import DraftDocument
from complaint.errors import ExportError
from rendering.docx_export import DEFAULT_DOCX_FILENAME, DOCX_MIME_TYPE, DocxExporter
from rendering.pdf_export import PdfExporter


export_bp = Blueprint("export", __name__, url_prefix="/export")


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}


def _read_document():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        return None
    return DraftDocument.from_dict(data.get("document") if isinstance(data.get("document"), dict) else data)


@export_bp.route("/api/pdf", methods=["POST"])
def export_pdf():
    """Accept JSON DraftDocument and return the PDF. No partial file on failure."""
    document = _read_document()
    if document is None:
        return jsonify({"success": False, "error": "Invalid JSON body"}), 400
    try:
        result = PdfExporter().export(document)
    except ExportError as e:
        return jsonify({"success": False, "error": str(e)}), 422
    headers = _attachment(result.filename)
    headers["X-Page-Count"] = str(result.page_count)
    return Response(result.data, mimetype=result.mime_type, headers=headers)


@export_bp.route("/api/docx", methods=["POST"])
def export_docx():
    """Accept JSON DraftDocument and return a DOCX file."""
    document = _read_document()
    if document is None:
        return jsonify({"success": False, "error": "Invalid JSON body"}), 400
    try:
        docx_bytes = DocxExporter().export(document)
    except ExportError as e:
        return jsonify({"success": False, "error": str(e)}), 422
    return Response(docx_bytes, mimetype=DOCX_MIME_TYPE, headers=_attachment(DEFAULT_DOCX_FILENAME))
