from __future__ import annotations

from typing import Optional
from sqlmodel import Session, select

from minutes.models.prompt import Prompt
from minutes.repositories.base import commit_row


class PromptsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, transcript_id: str, prompt: str) -> Prompt:
        return commit_row(self.session, Prompt(transcript_id=transcript_id, prompt=prompt))

    def get_for_transcript(self, prompt_id: str, transcript_id: str) -> Optional[Prompt]:
        statement = select(Prompt).where(Prompt.id == prompt_id, Prompt.transcript_id == transcript_id)
        return self.session.exec(statement).first()

    def latest_for_transcript(self, transcript_id: str) -> Optional[Prompt]:
        statement = (
            select(Prompt)
            .where(Prompt.transcript_id == transcript_id)
            .order_by(Prompt.created_at.desc())
            .limit(1)
        )
        return self.session.exec(statement).first()
