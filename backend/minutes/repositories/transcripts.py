from __future__ import annotations

from typing import Optional
from sqlmodel import Session

from minutes.models.transcript import Transcript
from minutes.repositories.base import commit_row


class TranscriptsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, content: str, filename: Optional[str] = None) -> Transcript:
        return commit_row(self.session, Transcript(filename=filename, content=content))

    def get(self, transcript_id: str) -> Optional[Transcript]:
        return self.session.get(Transcript, transcript_id)

    def exists(self, transcript_id: str) -> bool:
        return self.get(transcript_id) is not None
