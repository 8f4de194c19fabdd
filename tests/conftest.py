"""Shared fixtures: placeholder-mode backend, fake LLM, and an in-process HTTP session."""
from urllib.parse import urlparse

import pytest

from app import create_app
from complaint.client import DraftServiceClient
from complaint.config import Config
from complaint.document import DraftDocument
from complaint.draft_service import DraftService

API_URL = "http://testserver/api/analyze"


class FakeLLM:
    """Stands in for LLMClient: returns queued replies and records every message list."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def chat(self, messages, json_mode=False, **kwargs):
        self.calls.append({"messages": messages, "json_mode": json_mode})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class _FlaskResponse:
    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code

    def json(self):
        data = self._response.get_json(silent=True)
        if data is None:
            raise ValueError("not JSON")
        return data


class FlaskSession:
    """requests.Session look-alike that routes POSTs into a Flask test client."""

    def __init__(self, flask_app):
        self._client = flask_app.test_client()
        self.requests = []

    def post(self, url, json=None, timeout=None):
        self.requests.append(json)
        return _FlaskResponse(self._client.post(urlparse(url).path, json=json))


@pytest.fixture
def config(monkeypatch):
    for name in ("OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return Config(load_env=False)


@pytest.fixture
def placeholder_service(config):
    return DraftService(config=config)


@pytest.fixture
def flask_app(config, placeholder_service):
    app = create_app(config, placeholder_service)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def http(flask_app):
    return flask_app.test_client()


@pytest.fixture
def session(flask_app):
    return FlaskSession(flask_app)


@pytest.fixture
def client(session, config):
    return DraftServiceClient(api_url=API_URL, session=session, config=config)


@pytest.fixture
def document():
    return DraftDocument.from_payload(
        {
            "name": "김철수",
            "accusedName": "박영희",
            "purpose": "A",
            "facts": "B",
            "reasons": "C",
        }
    )
