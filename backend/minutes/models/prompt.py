from __future__ import annotations

import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field

from minutes.models.base import utcnow


class Prompt(SQLModel, table=True):
    __tablename__ = "prompts"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    transcript_id: str = Field(index=True, foreign_key="transcripts.id")
    prompt: str
    created_at: datetime = Field(default_factory=utcnow, index=True)
