from __future__ import annotations

from typing import Iterator

from fastapi import Request
from sqlmodel import Session

from minutes.config import Settings
from minutes.services.completion_client import CompletionClient
from minutes.services.mail_client import MailClient


def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client


def get_mail_client(request: Request) -> MailClient:
    return request.app.state.mail_client
