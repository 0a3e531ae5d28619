"""Caller metadata carried into and echoed back by every service call."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from packages.logbook_shared.ids import generate_ulid_str


class EnvelopeKind(str, Enum):
    """Whether a call mutates logbook state or only reads it."""

    UNSPECIFIED = "unspecified"
    COMMAND = "command"
    QUERY = "query"


@dataclass(frozen=True)
class EnvelopeMeta:
    """Correlation data for one call.

    ``principal`` names the authenticated session that issued the call; the
    acting user and role travel separately as an ``Actor``.
    """

    envelope_id: str
    trace_id: str
    timestamp: datetime
    kind: EnvelopeKind
    source: str
    principal: str


def new_meta(
    *,
    kind: EnvelopeKind,
    source: str,
    principal: str,
    trace_id: str | None = None,
    envelope_id: str | None = None,
    timestamp: datetime | None = None,
) -> EnvelopeMeta:
    """Build metadata, minting ULID ids and a UTC timestamp where omitted."""
    if timestamp is None:
        timestamp = datetime.now(UTC)
    elif timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    else:
        timestamp = timestamp.astimezone(UTC)
    return EnvelopeMeta(
        envelope_id=envelope_id or generate_ulid_str(),
        trace_id=trace_id or generate_ulid_str(),
        timestamp=timestamp,
        kind=kind,
        source=source,
        principal=principal,
    )
