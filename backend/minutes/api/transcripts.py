from __future__ import annotations

from typing import Any, Dict, Optional
import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from sqlmodel import Session
from starlette.datastructures import UploadFile

from minutes.config import Settings
from minutes.deps import get_session, get_settings
from minutes.errors import NotFoundError, ValidationError
from minutes.repositories.prompts import PromptsRepository
from minutes.repositories.transcripts import TranscriptsRepository
from minutes.services import transcript_intake

logger = logging.getLogger("minutes.api")


router = APIRouter(prefix="/api", tags=["transcripts"])


class SetPromptRequest(BaseModel):
    transcript_id: Optional[str] = Field(default=None, alias="transcriptId")
    prompt: Optional[str] = None


async def _read_json_object(request: Request) -> Dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ValidationError(f"Malformed JSON body: {exc}") from exc
    return data if isinstance(data, dict) else {}


@router.post("/uploadTranscript", status_code=201)
async def upload_transcript(
    request: Request,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        upload = form.get("file")
        if isinstance(upload, UploadFile) and upload.filename:
            transcript_intake.check_extension(upload.filename)
            data = await transcript_intake.read_upload(upload, settings.max_upload_bytes)
            intake = transcript_intake.from_file(upload.filename, data, settings.max_upload_bytes)
        else:
            intake = transcript_intake.from_text(form.get("text"))
    else:
        body = await _read_json_object(request)
        intake = transcript_intake.from_text(body.get("text"))

    transcript = TranscriptsRepository(session).create(intake.content, filename=intake.filename)
    logger.info(
        "Stored transcript %s (%s, %d chars)",
        transcript.id,
        intake.filename or "raw text",
        len(intake.content),
    )
    return {"transcriptId": transcript.id, "length": len(transcript.content)}


@router.post("/setPrompt", status_code=201)
def set_prompt(body: SetPromptRequest | None = None, session: Session = Depends(get_session)) -> Dict[str, str]:
    if body is None or not body.transcript_id or not body.prompt:
        raise ValidationError("transcriptId and prompt are required")
    if not TranscriptsRepository(session).exists(body.transcript_id):
        raise NotFoundError("Transcript not found")
    prompt = PromptsRepository(session).create(body.transcript_id, body.prompt)
    logger.info("Stored prompt %s for transcript %s", prompt.id, body.transcript_id)
    return {"promptId": prompt.id}


@router.get("/transcript/{transcript_id}")
def get_transcript(transcript_id: str, session: Session = Depends(get_session)) -> Dict[str, Any]:
    transcript = TranscriptsRepository(session).get(transcript_id)
    if transcript is None:
        raise NotFoundError("Not found")
    return {
        "id": transcript.id,
        "filename": transcript.filename,
        "content": transcript.content,
        "created_at": transcript.created_at,
    }
