"""Single-shot client for the hosted text-completion provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union
import json
import logging

import requests

from minutes.config import Settings
from minutes.errors import ConfigurationError, ProviderError

logger = logging.getLogger("minutes.services.completion")


@dataclass(frozen=True)
class ChoiceText:
    """OpenAI-style ``{"choices": [{"text": ...}]}`` payload."""

    text: str


@dataclass(frozen=True)
class OutputField:
    """Flat ``{"output": ...}`` payload."""

    output: str

    @property
    def text(self) -> str:
        return self.output


@dataclass(frozen=True)
class UnknownShape:
    """Anything else; the caller gets the payload serialized as compact JSON."""

    payload: Any

    @property
    def text(self) -> str:
        return json.dumps(self.payload, separators=(",", ":"), ensure_ascii=False)


CompletionResponse = Union[ChoiceText, OutputField, UnknownShape]


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)


def classify_response(data: Any) -> CompletionResponse:
    # Order matters: first choice text, then "output", then the raw payload
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            text = choices[0].get("text")
            if text is not None:
                return ChoiceText(text=_as_text(text))
        output = data.get("output")
        if output is not None:
            return OutputField(output=_as_text(output))
    return UnknownShape(payload=data)


class CompletionClient:
    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.api_key = settings.groq_api_key
        self.url = settings.groq_api_url
        self.http = session or requests.Session()

    def complete(self, model: str, prompt: str, max_tokens: int) -> str:
        if not self.api_key:
            raise ConfigurationError("GROQ_API_KEY is not set")

        try:
            resp = self.http.post(
                self.url,
                headers={"Content-Type": "application/json", "Authorization": f"Bearer {self.api_key}"},
                json={"model": model, "prompt": prompt, "max_tokens": max_tokens},
            )
        except requests.RequestException as exc:
            logger.error("Completion request to %s failed: %s", self.url, exc)
            raise ProviderError(f"Groq API request failed: {exc}") from exc

        if not resp.ok:
            logger.warning("Completion provider answered %s", resp.status_code)
            raise ProviderError(
                f"Groq API error: {resp.status_code} {resp.text}",
                upstream_status=resp.status_code,
                body=resp.text,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderError(
                f"Groq API returned invalid JSON: {exc}",
                upstream_status=resp.status_code,
                body=resp.text,
            ) from exc
        return classify_response(data).text
