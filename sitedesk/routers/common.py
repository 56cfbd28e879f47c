from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitedesk.errors import BadRequest, ServerError

logger = logging.getLogger(__name__)


def single_query_value(values: list[str] | None, *, message: str) -> str | None:
    """Collapse a repeatable query parameter, rejecting more than one value."""
    if not values:
        return None
    if len(values) > 1:
        raise BadRequest(message)
    return values[0]


def is_id(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


@contextmanager
def persistence_errors(session: Session, action: str, **context: Any) -> Iterator[None]:
    """Map any storage failure inside the block to a ``ServerError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Failed to %s", action, extra=context)
        raise ServerError(f"Failed to {action}") from exc
