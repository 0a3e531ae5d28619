"""Constructors for the two envelope shapes services return."""

from __future__ import annotations

from typing import Iterable, TypeVar

from packages.logbook_shared.errors import ErrorDetail

from .envelope import Envelope, Payload
from .meta import EnvelopeMeta


T = TypeVar("T")


def success(*, meta: EnvelopeMeta, payload: T) -> Envelope[T]:
    return Envelope[T](metadata=meta, payload=Payload[T](value=payload), errors=[])


def failure(*, meta: EnvelopeMeta, errors: Iterable[ErrorDetail]) -> Envelope[T]:
    """Build a payload-less envelope carrying ``errors`` in raised order."""
    return Envelope[T](metadata=meta, payload=None, errors=list(errors))
