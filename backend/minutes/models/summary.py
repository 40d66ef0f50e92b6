from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from minutes.models.base import utcnow


class Summary(SQLModel, table=True):
    __tablename__ = "summaries"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    transcript_id: str = Field(index=True, foreign_key="transcripts.id")
    prompt_id: Optional[str] = Field(default=None, foreign_key="prompts.id")
    raw_output: str  # model output as returned, never edited
    edited_output: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
