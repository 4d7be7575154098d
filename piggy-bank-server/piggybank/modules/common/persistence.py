"""Helpers translating persistence failures into domain errors."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .exceptions import ServiceError

logger = logging.getLogger(__name__)


@contextmanager
def persistence_errors(message: str, **context: Any) -> Iterator[None]:
    """Wrap any SQLAlchemy failure raised inside the block in :class:`ServiceError`."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("%s (%s): %s", message, context, exc)
        raise ServiceError(message, cause=exc, **context) from exc


def is_unique_violation(exc: IntegrityError) -> bool:
    """Best-effort detection of a unique constraint violation across drivers."""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == "23505"
    text = str(orig if orig is not None else exc).lower()
    return "unique" in text


__all__ = ["is_unique_violation", "persistence_errors"]
