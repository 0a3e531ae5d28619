"""Typed result returned by every public service method."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from packages.logbook_shared.errors import ErrorDetail

from .meta import EnvelopeMeta


T = TypeVar("T")


class Payload(BaseModel, Generic[T]):
    """Wrapper that lets ``None`` be a legitimate result value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: T


class Envelope(BaseModel, Generic[T]):
    """Caller metadata, an optional payload and any errors raised."""

    model_config = ConfigDict(frozen=True)

    metadata: EnvelopeMeta
    payload: Payload[T] | None
    errors: list[ErrorDetail] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    @property
    def error_code(self) -> str | None:
        """Return the first error code, or ``None`` for successful envelopes."""
        if not self.errors:
            return None
        return self.errors[0].code
