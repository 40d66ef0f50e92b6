from __future__ import annotations

import asyncio

import pytest
from sqlmodel import select

from minutes.errors import ValidationError
from minutes.models.prompt import Prompt
from minutes.models.transcript import Transcript
from minutes.services.transcript_intake import read_upload


def test_text_upload_round_trips_content(client):
    text = "  Line one.\nLine two with ünïcödé – dash.\n\n"
    res = client.post("/api/uploadTranscript", json={"text": text})
    assert res.status_code == 201
    body = res.json()
    assert body["length"] == len(text)

    res = client.get(f"/api/transcript/{body['transcriptId']}")
    assert res.status_code == 200
    row = res.json()
    assert row["content"] == text
    assert row["filename"] is None
    assert set(row) == {"id", "filename", "content", "created_at"}


def test_file_upload_records_filename(client):
    files = {"file": ("notes.MD", b"# Standup\n- shipped it\n", "text/markdown")}
    res = client.post("/api/uploadTranscript", files=files)
    assert res.status_code == 201
    transcript_id = res.json()["transcriptId"]

    row = client.get(f"/api/transcript/{transcript_id}").json()
    assert row["filename"] == "notes.MD"
    assert row["content"] == "# Standup\n- shipped it\n"


def test_multipart_text_field_is_accepted(client):
    res = client.post("/api/uploadTranscript", data={"text": "From a form field"})
    assert res.status_code == 201
    assert res.json()["length"] == len("From a form field")


def test_file_with_disallowed_extension_rejected(client):
    files = {"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")}
    res = client.post("/api/uploadTranscript", files=files)
    assert res.status_code == 400
    assert "error" in res.json()


def test_file_over_size_limit_rejected(client, settings):
    files = {"file": ("big.txt", b"a" * (settings.max_upload_bytes + 1), "text/plain")}
    res = client.post("/api/uploadTranscript", files=files)
    assert res.status_code == 400


def test_upload_without_input_rejected(client):
    for payload in ({}, {"text": ""}, {"text": "   \n\t"}, {"text": 42}):
        res = client.post("/api/uploadTranscript", json=payload)
        assert res.status_code == 400, payload
        assert res.json()["error"].startswith("Provide a .txt/.md file")


def test_upload_with_empty_body_rejected(client):
    res = client.post("/api/uploadTranscript")
    assert res.status_code == 400


def test_upload_with_malformed_json_rejected(client):
    res = client.post(
        "/api/uploadTranscript",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 400


def test_set_prompt_requires_fields(client, transcript_id):
    res = client.post("/api/setPrompt", json={"transcriptId": transcript_id})
    assert res.status_code == 400
    assert res.json() == {"error": "transcriptId and prompt are required"}

    res = client.post("/api/setPrompt", json={"prompt": "Summarize"})
    assert res.status_code == 400


def test_set_prompt_unknown_transcript_creates_nothing(client, db):
    res = client.post("/api/setPrompt", json={"transcriptId": "missing", "prompt": "Summarize"})
    assert res.status_code == 404
    assert res.json() == {"error": "Transcript not found"}
    assert db.exec(select(Prompt)).all() == []


def test_get_missing_transcript(client):
    res = client.get("/api/transcript/does-not-exist")
    assert res.status_code == 404
    assert res.json() == {"error": "Not found"}


def test_empty_file_rejected(client, db):
    for data in (b"", b"  \n\t\n"):
        res = client.post("/api/uploadTranscript", files={"file": ("empty.txt", data, "text/plain")})
        assert res.status_code == 400, data
        assert res.json()["error"].startswith("Provide a .txt/.md file")
    assert db.exec(select(Transcript)).all() == []


class _RecordingUpload:
    def __init__(self, data: bytes, size=None) -> None:
        self.data = data
        self.size = size
        self.requested = []

    async def read(self, size: int = -1) -> bytes:
        self.requested.append(size)
        return self.data if size < 0 else self.data[:size]


def test_read_upload_is_bounded():
    upload = _RecordingUpload(b"a" * 100)
    with pytest.raises(ValidationError):
        asyncio.run(read_upload(upload, max_bytes=10))
    assert upload.requested == [11]


def test_read_upload_rejects_declared_size_without_reading():
    upload = _RecordingUpload(b"a" * 100, size=100)
    with pytest.raises(ValidationError):
        asyncio.run(read_upload(upload, max_bytes=10))
    assert upload.requested == []


def test_read_upload_returns_small_file():
    upload = _RecordingUpload(b"hello", size=5)
    assert asyncio.run(read_upload(upload, max_bytes=10)) == b"hello"
