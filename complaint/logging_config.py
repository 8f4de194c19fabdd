"""
Console logging setup shared by the Flask backend and the Streamlit front end.

Modules log through ``logging.getLogger(__name__)``; call ``setup_logging`` once at
process start to attach a single timestamped console handler.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "complaint-console"


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure the root logger. Calling it again only updates the level."""
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    if not any(getattr(h, "name", None) == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root.addHandler(handler)
    # Third-party HTTP clients are noisy at INFO
    for noisy in ("httpx", "urllib3", "pdfminer"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))
    return root
