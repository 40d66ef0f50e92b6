"""Error taxonomy shared by the store, the outbound clients and the API layer.

Every error carries the HTTP status it maps to; ``main.create_app`` turns them
into the ``{"error": "..."}`` envelope.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing or malformed request input."""

    status_code = 400


class NotFoundError(AppError):
    """A referenced transcript, prompt or summary does not exist."""

    status_code = 404


class ConfigurationError(AppError):
    """A required setting or secret is absent."""


class StorageError(AppError):
    """A write was rejected by the database."""


class ProviderError(AppError):
    """The completion provider failed or answered with a non-success status."""

    def __init__(self, message: str, upstream_status: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body


class DeliveryError(AppError):
    """The SMTP transport refused or failed to send a message."""
