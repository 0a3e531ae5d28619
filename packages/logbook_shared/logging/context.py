"""Structured fields attached to every log line emitted on the current call.

``configure_logging`` seeds service-wide fields once; ``log_context`` layers
per-call fields (trace id, entry id, category) for the span of one operation.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

_LOG_CONTEXT: ContextVar[dict[str, str]] = ContextVar("logbook_log_context", default={})


def get_context() -> dict[str, str]:
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Add non-``None`` values, as strings, to the current context."""
    bound = {key: str(value) for key, value in values.items() if value is not None}
    if bound:
        _LOG_CONTEXT.set({**_LOG_CONTEXT.get(), **bound})


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind ``values`` until the block exits, then restore the outer context."""
    token = _LOG_CONTEXT.set(dict(_LOG_CONTEXT.get()))
    try:
        bind_context(**dict(values))
        yield
    finally:
        _LOG_CONTEXT.reset(token)
