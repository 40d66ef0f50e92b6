"""Validation of uploaded transcripts (file upload or raw text)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Optional

from starlette.datastructures import UploadFile

from minutes.errors import ValidationError

ALLOWED_EXTENSIONS = {".txt", ".md"}
MISSING_INPUT_MESSAGE = 'Provide a .txt/.md file under field "file" or raw text under field "text".'


@dataclass
class TranscriptInput:
    content: str
    filename: Optional[str] = None


def check_extension(filename: str) -> None:
    if PurePath(filename).suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ValidationError("Only .txt or .md files are allowed")


def _too_large(max_bytes: int) -> ValidationError:
    return ValidationError(f"File too large (limit {max_bytes} bytes)")


async def read_upload(upload: UploadFile, max_bytes: int) -> bytes:
    """Read at most one byte past ``max_bytes`` so oversized files are never fully loaded."""
    if upload.size is not None and upload.size > max_bytes:
        raise _too_large(max_bytes)
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise _too_large(max_bytes)
    return data


def from_file(filename: str, data: bytes, max_bytes: int) -> TranscriptInput:
    check_extension(filename)
    if len(data) > max_bytes:
        raise _too_large(max_bytes)
    content = data.decode("utf-8", errors="replace")
    if not content.strip():
        raise ValidationError(MISSING_INPUT_MESSAGE)
    return TranscriptInput(content=content, filename=filename)


def from_text(text: Any) -> TranscriptInput:
    # Stored as given; trimming only decides whether the text counts as empty
    if not isinstance(text, str) or not text.strip():
        raise ValidationError(MISSING_INPUT_MESSAGE)
    return TranscriptInput(content=text)
