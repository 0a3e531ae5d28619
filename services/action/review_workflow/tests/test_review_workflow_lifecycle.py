"""Tests for the lifecycle transition table."""

from __future__ import annotations

import pytest

from services.action.review_workflow.domain import EntryStatus
from services.action.review_workflow.errors import InvalidStateTransitionError
from services.action.review_workflow.lifecycle import (
    ALLOWED_EDGES,
    TRANSITIONS,
    WorkflowOperation,
    is_allowed_edge,
    require_source,
    transition_for,
)

DRAFT = EntryStatus.DRAFT
SUBMITTED = EntryStatus.SUBMITTED
NEEDS_REVISION = EntryStatus.NEEDS_REVISION
SIGNED = EntryStatus.SIGNED


def test_allowed_edges_match_documented_state_machine() -> None:
    assert ALLOWED_EDGES == {
        (DRAFT, DRAFT),
        (NEEDS_REVISION, DRAFT),
        (DRAFT, SUBMITTED),
        (NEEDS_REVISION, SUBMITTED),
        (DRAFT, SIGNED),
        (NEEDS_REVISION, SIGNED),
        (SUBMITTED, SIGNED),
        (SUBMITTED, NEEDS_REVISION),
    }


@pytest.mark.parametrize("target", list(EntryStatus))
def test_signed_is_terminal(target: EntryStatus) -> None:
    assert not is_allowed_edge(SIGNED, target)


def test_draft_never_jumps_to_needs_revision() -> None:
    assert not is_allowed_edge(DRAFT, NEEDS_REVISION)


def test_only_signing_operations_write_signatures() -> None:
    writers = {op for op, transition in TRANSITIONS.items() if transition.writes_signature}

    assert writers == {
        WorkflowOperation.SUBMIT_AUTO_REVIEW,
        WorkflowOperation.SIGN,
        WorkflowOperation.BULK_SIGN,
    }
    assert all(TRANSITIONS[op].target == SIGNED for op in writers)


def test_delete_variant_widens_sources_only_when_enabled() -> None:
    canonical = transition_for(WorkflowOperation.DELETE)
    lenient = transition_for(WorkflowOperation.DELETE, allow_delete_needs_revision=True)

    assert canonical.sources == {DRAFT}
    assert lenient.sources == {DRAFT, NEEDS_REVISION}
    assert lenient.target is None


@pytest.mark.parametrize(
    ("operation", "status"),
    [
        (WorkflowOperation.SIGN, DRAFT),
        (WorkflowOperation.REJECT, NEEDS_REVISION),
        (WorkflowOperation.EDIT, SUBMITTED),
        (WorkflowOperation.SUBMIT, SIGNED),
    ],
)
def test_require_source_rejects_invalid_status(
    operation: WorkflowOperation, status: EntryStatus
) -> None:
    with pytest.raises(InvalidStateTransitionError, match=status.value):
        require_source(operation, transition_for(operation), status)
