from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
import logging

from sqlmodel import Session

from minutes.config import Settings
from minutes.errors import NotFoundError
from minutes.models.summary import Summary
from minutes.repositories.prompts import PromptsRepository
from minutes.repositories.summaries import SummariesRepository
from minutes.repositories.transcripts import TranscriptsRepository
from minutes.services.completion_client import CompletionClient
from minutes.services.mail_client import MailClient

logger = logging.getLogger("minutes.services.summary")

DEFAULT_PROMPT = "Summarize the following meeting notes."


@dataclass
class ResolvedPrompt:
    text: str
    prompt_id: Optional[str] = None


def resolve_prompt(session: Session, transcript_id: str, prompt_id: Optional[str] = None) -> ResolvedPrompt:
    """Pick the instruction used for a generation.

    An explicit ``prompt_id`` must belong to the transcript. Without one the most
    recent prompt stored for the transcript wins, and failing that the built-in
    default is used with no prompt recorded.
    """
    repo = PromptsRepository(session)
    if prompt_id:
        prompt = repo.get_for_transcript(prompt_id, transcript_id)
        if prompt is None:
            raise NotFoundError("Prompt not found for transcript")
        return ResolvedPrompt(text=prompt.prompt, prompt_id=prompt.id)
    latest = repo.latest_for_transcript(transcript_id)
    if latest is not None:
        return ResolvedPrompt(text=latest.prompt, prompt_id=latest.id)
    return ResolvedPrompt(text=DEFAULT_PROMPT)


def build_completion_prompt(instruction: str, transcript_content: str) -> str:
    return f"{instruction}\n\nTranscript:\n{transcript_content}"


def generate_summary(
    session: Session,
    client: CompletionClient,
    settings: Settings,
    transcript_id: str,
    prompt_id: Optional[str] = None,
) -> Summary:
    transcript = TranscriptsRepository(session).get(transcript_id)
    if transcript is None:
        raise NotFoundError("Transcript not found")
    resolved = resolve_prompt(session, transcript_id, prompt_id)

    output = client.complete(
        model=settings.groq_model,
        prompt=build_completion_prompt(resolved.text, transcript.content),
        max_tokens=settings.summary_max_tokens,
    )
    # Only stored once the provider call succeeded
    summary = SummariesRepository(session).create(transcript_id, output, prompt_id=resolved.prompt_id)
    logger.info(
        "Generated summary %s for transcript %s (prompt=%s, chars=%d)",
        summary.id,
        transcript_id,
        resolved.prompt_id or "default",
        len(output),
    )
    return summary


def share_summary(
    session: Session,
    mailer: MailClient,
    settings: Settings,
    summary_id: str,
    recipients: Sequence[str],
) -> Tuple[Summary, str]:
    summary = SummariesRepository(session).get(summary_id)
    if summary is None:
        raise NotFoundError("Summary not found")
    body = summary.edited_output or summary.raw_output
    message_id = mailer.send(list(recipients), settings.mail_subject, body)
    logger.info("Shared summary %s with %d recipient(s), message %s", summary_id, len(recipients), message_id)
    return summary, message_id
