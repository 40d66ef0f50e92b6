from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from minutes.models.base import utcnow


class Transcript(SQLModel, table=True):
    __tablename__ = "transcripts"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    filename: Optional[str] = None  # only set for file uploads
    content: str
    created_at: datetime = Field(default_factory=utcnow)
