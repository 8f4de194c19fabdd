"""
Load env from the project root .env file. Used by the backend, the Streamlit front end and the client.
Encapsulates configuration in a Config class (OOP).
"""
import os
from pathlib import Path


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Config:
    """
    Holds OpenAI/Azure, HTTP client and logging configuration loaded from .env.
    Single responsibility: load and expose environment-based settings.
    """

    _project_env = Path(__file__).resolve().parent.parent / ".env"

    def __init__(self, load_env: bool = True):
        if load_env:
            self._load_env()
        self._openai_api_key = os.getenv("OPENAI_API_KEY", "").strip()
        self._openai_model = os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini"
        self._azure_endpoint = os.getenv("AZURE_OPENAI_ENDPOINT", "").strip()
        self._azure_api_key = os.getenv("AZURE_OPENAI_API_KEY", "").strip()
        self._azure_api_version = os.getenv("AZURE_OPENAI_API_VERSION", "2024-12-01-preview").strip()
        self._azure_deployment = os.getenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o-mini").strip()
        self._use_azure_openai = bool(self._azure_endpoint and self._azure_api_key)
        self._llm_timeout = _env_float("LLM_TIMEOUT_SECONDS", 90.0)
        self._draft_api_url = os.getenv("DRAFT_API_URL", "http://127.0.0.1:5000/api/analyze").strip()
        self._client_timeout = _env_float("CLIENT_TIMEOUT_SECONDS", 120.0)
        self._max_upload_mb = _env_float("MAX_UPLOAD_MB", 32.0)
        self._log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    def _load_env(self) -> None:
        if self._project_env.exists():
            from dotenv import load_dotenv
            load_dotenv(self._project_env)

    @property
    def OPENAI_API_KEY(self) -> str:
        return self._openai_api_key

    @property
    def OPENAI_MODEL(self) -> str:
        return self._openai_model

    @property
    def AZURE_OPENAI_ENDPOINT(self) -> str:
        return self._azure_endpoint

    @property
    def AZURE_OPENAI_API_KEY(self) -> str:
        return self._azure_api_key

    @property
    def AZURE_OPENAI_API_VERSION(self) -> str:
        return self._azure_api_version

    @property
    def AZURE_OPENAI_DEPLOYMENT(self) -> str:
        return self._azure_deployment

    @property
    def USE_AZURE_OPENAI(self) -> bool:
        return self._use_azure_openai

    @property
    def HAS_LLM_CREDENTIALS(self) -> bool:
        """True when either OpenAI or Azure OpenAI can be called; otherwise the backend serves placeholders."""
        return self._use_azure_openai or bool(self._openai_api_key)

    @property
    def LLM_TIMEOUT_SECONDS(self) -> float:
        return self._llm_timeout

    @property
    def DRAFT_API_URL(self) -> str:
        return self._draft_api_url

    @property
    def CLIENT_TIMEOUT_SECONDS(self) -> float:
        return self._client_timeout

    @property
    def MAX_CONTENT_LENGTH(self) -> int:
        return int(self._max_upload_mb * 1024 * 1024)

    @property
    def LOG_LEVEL(self) -> str:
        return self._log_level
