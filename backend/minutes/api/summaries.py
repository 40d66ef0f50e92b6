from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlmodel import Session

from minutes.config import Settings
from minutes.deps import get_completion_client, get_mail_client, get_session, get_settings
from minutes.errors import NotFoundError, ValidationError
from minutes.repositories.summaries import SummariesRepository
from minutes.services.completion_client import CompletionClient
from minutes.services.mail_client import MailClient
from minutes.services.summary_service import generate_summary, share_summary

logger = logging.getLogger("minutes.api")


router = APIRouter(prefix="/api", tags=["summaries"])


class GenerateSummaryRequest(BaseModel):
    transcript_id: Optional[str] = Field(default=None, alias="transcriptId")
    prompt_id: Optional[str] = Field(default=None, alias="promptId")


class EditSummaryRequest(BaseModel):
    edited: Optional[str] = None


class ShareSummaryRequest(BaseModel):
    summary_id: Optional[str] = Field(default=None, alias="summaryId")
    recipients: Optional[List[str]] = None


@router.post("/generateSummary", status_code=201)
def generate_summary_endpoint(
    body: GenerateSummaryRequest | None = None,
    session: Session = Depends(get_session),
    client: CompletionClient = Depends(get_completion_client),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    if body is None or not body.transcript_id:
        raise ValidationError("transcriptId is required")
    summary = generate_summary(session, client, settings, body.transcript_id, body.prompt_id)
    return {"summaryId": summary.id, "raw": summary.raw_output}


@router.put("/summary/{summary_id}")
def edit_summary(
    summary_id: str,
    body: EditSummaryRequest | None = None,
    session: Session = Depends(get_session),
) -> Dict[str, bool]:
    if body is None or not body.edited:
        raise ValidationError("edited is required")
    SummariesRepository(session).update_edited_output(summary_id, body.edited)
    logger.info("Summary %s edited (%d chars)", summary_id, len(body.edited))
    return {"ok": True}


@router.get("/summary/{summary_id}")
def get_summary(summary_id: str, session: Session = Depends(get_session)) -> Dict[str, Any]:
    summary = SummariesRepository(session).get(summary_id)
    if summary is None:
        raise NotFoundError("Not found")
    return {
        "id": summary.id,
        "transcript_id": summary.transcript_id,
        "raw_output": summary.raw_output,
        "edited_output": summary.edited_output,
        "created_at": summary.created_at,
        "updated_at": summary.updated_at,
    }


@router.post("/shareSummary")
def share_summary_endpoint(
    body: ShareSummaryRequest | None = None,
    session: Session = Depends(get_session),
    mailer: MailClient = Depends(get_mail_client),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    if body is None or not body.summary_id or not body.recipients:
        raise ValidationError("summaryId and recipients[] required")
    _, message_id = share_summary(session, mailer, settings, body.summary_id, body.recipients)
    return {"ok": True, "messageId": message_id}
