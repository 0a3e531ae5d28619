"""Tests for envelope model, builder and metadata behavior."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from packages.logbook_shared.envelope import (
    Envelope,
    EnvelopeKind,
    EnvelopeMeta,
    failure,
    new_meta,
    success,
    validate_meta,
)
from packages.logbook_shared.errors import ErrorCategory, ErrorDetail
from packages.logbook_shared.ids import is_ulid_str


def _meta(**overrides) -> EnvelopeMeta:
    values = {
        "kind": EnvelopeKind.QUERY,
        "source": "service_review_workflow",
        "principal": "operator",
        "timestamp": datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC),
        "envelope_id": "env-1",
        "trace_id": "trace-1",
    }
    values.update(overrides)
    return new_meta(**values)


def _error(code: str = "VALIDATION_ERROR") -> ErrorDetail:
    return ErrorDetail(
        code=code,
        message="Invalid input",
        category=ErrorCategory.VALIDATION,
    )


def test_success_builder_returns_ok_envelope_with_payload() -> None:
    envelope = success(meta=_meta(), payload={"entry_id": "01ABC"})

    assert envelope.ok is True
    assert envelope.payload is not None
    assert envelope.payload is not None
    assert envelope.payload.value == {"entry_id": "01ABC"}
    assert envelope.error_code is None


def test_failure_builder_exposes_first_error_code() -> None:
    envelope = failure(
        meta=_meta(), errors=[_error("EMPTY_BULK_SELECTION"), _error("OTHER")]
    )

    assert envelope.ok is False
    assert envelope.payload is None
    assert envelope.error_code == "EMPTY_BULK_SELECTION"


def test_envelope_model_validation_rejects_invalid_error_shape() -> None:
    with pytest.raises(ValidationError):
        Envelope[dict[str, str]].model_validate(
            {
                "metadata": _meta(),
                "payload": {"value": {"entry_id": "01ABC"}},
                "errors": [{"code": "BAD"}],
            }
        )


def test_new_meta_normalizes_timestamps_to_utc() -> None:
    naive = datetime(2026, 1, 1, 12, 0, 0)
    aware = datetime(2026, 1, 1, 7, 0, 0, tzinfo=timezone(timedelta(hours=-5)))

    assert _meta(timestamp=naive).timestamp == naive.replace(tzinfo=UTC)
    assert _meta(timestamp=aware).timestamp == datetime(2026, 1, 1, 12, tzinfo=UTC)


def test_new_meta_generates_ids() -> None:
    meta = new_meta(kind=EnvelopeKind.COMMAND, source="test", principal="operator")

    assert is_ulid_str(meta.envelope_id)
    assert is_ulid_str(meta.trace_id)
    assert meta.envelope_id != meta.trace_id


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"kind": EnvelopeKind.UNSPECIFIED}, "metadata.kind must be specified"),
        ({"source": ""}, "metadata.source is required"),
        ({"principal": ""}, "metadata.principal is required"),
    ],
)
def test_validate_meta_reports_first_invalid_field(overrides, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        validate_meta(_meta(**overrides))
