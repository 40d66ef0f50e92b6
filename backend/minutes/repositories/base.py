from __future__ import annotations

from typing import TypeVar
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel

from minutes.errors import StorageError

logger = logging.getLogger("minutes.repositories")

ModelT = TypeVar("ModelT", bound=SQLModel)


def commit_row(session: Session, row: ModelT) -> ModelT:
    """Add ``row``, commit and refresh it; database rejections become StorageError."""
    session.add(row)
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Write to %s failed: %s", type(row).__tablename__, exc)
        raise StorageError(f"Failed to store {type(row).__name__.lower()}: {exc}") from exc
    session.refresh(row)
    return row
