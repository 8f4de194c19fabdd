"""
Flask backend for the complaint drafting tool: POST /api/analyze (create / regenerate / chat)
and the /export blueprint for PDF and DOCX downloads.
Run: python run_flask.py  then start the Streamlit front end (streamlit run complaint/app.py).
"""
import logging

from flask import Flask, request, jsonify
from pydantic import ValidationError

from complaint.config import Config
from complaint.draft_service import DraftService
from complaint.errors import DraftServiceError, LLMError
from complaint.logging_config import setup_logging
from complaint.schemas import AnalyzeRequest, AnalyzeResponse
from export_bp import export_bp

logger = logging.getLogger(__name__)


def _failure(message: str, status: int):
    return jsonify(AnalyzeResponse(success=False, error=message).to_json()), status


def create_app(config: Config | None = None, service: DraftService | None = None) -> Flask:
    cfg = config or Config()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = cfg.MAX_CONTENT_LENGTH
    app.extensions["draft_service"] = service or DraftService(config=cfg)
    app.register_blueprint(export_bp)

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "POST, GET, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return jsonify({"error": "Method Not Allowed"}), 405

    @app.errorhandler(413)
    def too_large(_e):
        return _failure("첨부파일 용량이 너무 큽니다.", 413)

    @app.route("/api/analyze", methods=["POST", "OPTIONS"])
    def analyze():
        if request.method == "OPTIONS":
            return "", 200
        body = request.get_json(force=True, silent=True)
        if not isinstance(body, dict):
            return _failure("Invalid JSON body", 400)
        try:
            analyze_request = AnalyzeRequest.model_validate(body)
        except ValidationError as e:
            logger.info("Rejected analyze request: %s", e.errors()[0].get("msg", "invalid"))
            return _failure(e.errors()[0].get("msg", "Invalid request"), 400)

        service: DraftService = app.extensions["draft_service"]
        try:
            result = service.handle(analyze_request)
        except DraftServiceError as e:
            logger.error("Analyze (%s) failed: %s", analyze_request.type, e)
            return _failure(e.user_message, 500)
        except LLMError as e:
            logger.error("Upstream LLM error (%s): %s", analyze_request.type, e)
            return _failure(str(e), 500)
        except Exception as e:
            logger.exception("Unexpected error handling analyze (%s)", analyze_request.type)
            return _failure(str(e) or type(e).__name__, 500)
        return jsonify(result.to_json())

    return app


if __name__ == "__main__":
    _config = Config()
    setup_logging(_config.LOG_LEVEL)
    create_app(_config).run(debug=True, port=5000, use_reloader=False)
