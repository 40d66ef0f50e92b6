from __future__ import annotations

from typing import Optional
from sqlmodel import Session

from minutes.errors import NotFoundError
from minutes.models.base import utcnow
from minutes.models.summary import Summary
from minutes.repositories.base import commit_row


class SummariesRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, transcript_id: str, raw_output: str, prompt_id: Optional[str] = None) -> Summary:
        summary = Summary(
            transcript_id=transcript_id,
            prompt_id=prompt_id,
            raw_output=raw_output,
            edited_output=raw_output,
        )
        return commit_row(self.session, summary)

    def get(self, summary_id: str) -> Optional[Summary]:
        return self.session.get(Summary, summary_id)

    def update_edited_output(self, summary_id: str, edited_output: str) -> Summary:
        """Replace the editable text of a summary. ``raw_output`` is left untouched."""
        summary = self.get(summary_id)
        if summary is None:
            raise NotFoundError("Summary not found")
        summary.edited_output = edited_output
        summary.updated_at = utcnow()
        return commit_row(self.session, summary)
