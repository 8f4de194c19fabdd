"""
Run the Flask backend (POST /api/analyze + /export).
Activate your venv first, then: python run_flask.py
"""
from app import create_app
from complaint.config import Config
from complaint.logging_config import setup_logging

if __name__ == "__main__":
    config = Config()
    setup_logging(config.LOG_LEVEL)
    create_app(config).run(debug=True, port=5000, use_reloader=False)
