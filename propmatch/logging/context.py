"""Scoped logging context.

Fields pushed here (``listing_id``, ``run_id``, ...) are added to every log
record emitted inside the scope by :class:`~propmatch.logging.config.ContextualFilter`.
Backed by contextvars, so nested scopes and threads do not leak into each other.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("propmatch_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return dict(_LOG_CONTEXT.get())


def push_log_context(**fields: Any) -> Token:
    """Add fields to the current context.

    Fields whose value is None are ignored. Inner values win over outer ones.

    Returns:
        Token for :func:`pop_log_context`
    """
    merged = {**_LOG_CONTEXT.get()}
    merged.update({key: value for key, value in fields.items() if value is not None})
    return _LOG_CONTEXT.set(merged)


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before the matching push."""
    _LOG_CONTEXT.reset(token)


def clear_log_context() -> None:
    """Drop every field. Intended for tests."""
    _LOG_CONTEXT.set({})


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Scope logging fields to a block.

    Example:
        >>> with log_context(listing_id="5f1c0a9e", run_id="abc123"):
        ...     logger.info("Match pass started")  # carries listing_id and run_id

    Yields:
        The fields active inside the block
    """
    token = push_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
