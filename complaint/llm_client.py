"""
LLM client for OpenAI/Azure. Uses Config and encapsulates client/model in the class (OOP).
"""
import logging
import time

from complaint.config import Config
from complaint.errors import LLMError

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Encapsulates OpenAI or Azure OpenAI client and model.
    Client and model are set in __init__ from Config (dependency injection / single source of truth).
    """

    def __init__(self, config: Config | None = None):
        cfg = config or Config()
        if cfg.USE_AZURE_OPENAI:
            from openai import AzureOpenAI
            self._client = AzureOpenAI(
                azure_endpoint=cfg.AZURE_OPENAI_ENDPOINT,
                api_key=cfg.AZURE_OPENAI_API_KEY,
                api_version=cfg.AZURE_OPENAI_API_VERSION,
                timeout=cfg.LLM_TIMEOUT_SECONDS,
            )
            self._model = cfg.AZURE_OPENAI_DEPLOYMENT
        else:
            from openai import OpenAI
            self._client = OpenAI(api_key=cfg.OPENAI_API_KEY, timeout=cfg.LLM_TIMEOUT_SECONDS)
            self._model = cfg.OPENAI_MODEL

    def chat(
        self,
        messages: list[dict],
        json_mode: bool = False,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Send a full message list (system, history, user) and return the assistant text."""
        kwargs = {"model": self._model, "messages": messages}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if temperature is not None:
            kwargs["temperature"] = temperature
        started = time.monotonic()
        try:
            response = self._client.chat.completions.create(**kwargs)
        except Exception as e:
            from openai import APIConnectionError, APIError, APIStatusError
            if isinstance(e, (APIConnectionError, APIError, APIStatusError)):
                msg = str(e).strip() or type(e).__name__
                if "connection" in msg.lower() or "getaddrinfo" in msg.lower():
                    msg += " Check AZURE_OPENAI_ENDPOINT (or OPENAI_API_KEY) and network/VPN/DNS."
                raise LLMError(f"Cannot reach OpenAI/Azure: {msg}") from e
            raise
        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info("LLM response received (model=%s, json=%s, %d ms)", self._model, json_mode, elapsed_ms)
        return response.choices[0].message.content or ""
