from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from minutes.config import Settings
from minutes.errors import DeliveryError, ProviderError
from minutes.main import create_app


class FakeCompletionClient:
    def __init__(self, output: str = "Mocked summary output.", error: Optional[Exception] = None) -> None:
        self.output = output
        self.error = error
        self.calls: List[dict] = []

    def complete(self, model: str, prompt: str, max_tokens: int) -> str:
        self.calls.append({"model": model, "prompt": prompt, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return self.output


class FakeMailClient:
    def __init__(self, message_id: str = "test-123", error: Optional[Exception] = None) -> None:
        self.message_id = message_id
        self.error = error
        self.sent: List[Tuple[List[str], str, str]] = []

    def send(self, recipients: Sequence[str], subject: str, body: str) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append((list(recipients), subject, body))
        return self.message_id


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=tmp_path,
        groq_api_key="test-key",
        groq_model="test-model",
        mail_from="minutes@example.com",
        _env_file=None,
    )


@pytest.fixture
def completion() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def mailer() -> FakeMailClient:
    return FakeMailClient()


@pytest.fixture
def app(settings, completion, mailer):
    return create_app(settings, completion_client=completion, mail_client=mailer)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app, client):
    # depends on client so the schema exists
    with Session(app.state.engine) as session:
        yield session


@pytest.fixture
def transcript_id(client) -> str:
    res = client.post("/api/uploadTranscript", json={"text": "Meeting started at 10am. Discussed Q3 targets."})
    assert res.status_code == 201
    return res.json()["transcriptId"]


@pytest.fixture
def provider_failure() -> ProviderError:
    return ProviderError("Groq API error: 503 upstream unavailable", upstream_status=503, body="upstream unavailable")


@pytest.fixture
def delivery_failure() -> DeliveryError:
    return DeliveryError("Mail delivery failed: (535, b'Authentication failed')")


@pytest.fixture
def db_factory():
    def _open(app) -> Session:
        return Session(app.state.engine)

    return _open
