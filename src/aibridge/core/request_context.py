"""Request-scoped correlation id shared by logging and the webhook handler."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

_REQUEST_ID: ContextVar[str | None] = ContextVar("aibridge_request_id", default=None)


def get_request_id() -> str | None:
    """Return the correlation id of the update being handled, if any."""
    return _REQUEST_ID.get()


def resolve_request_id(candidate: str | None) -> str:
    """Accept a caller-supplied id when usable, otherwise mint a new one."""
    if candidate:
        cleaned = candidate.strip()
        if cleaned and len(cleaned) <= MAX_REQUEST_ID_LENGTH and cleaned.isprintable():
            return cleaned
    return uuid4().hex


@contextmanager
def request_id_scope(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` for the duration of the block."""
    token = _REQUEST_ID.set(request_id)
    try:
        yield request_id
    finally:
        _REQUEST_ID.reset(token)
