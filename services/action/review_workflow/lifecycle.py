"""Entry lifecycle: the only legal status edges and the operations that walk them.

::

    create            -> DRAFT
    edit              DRAFT | NEEDS_REVISION -> DRAFT
    delete            DRAFT (| NEEDS_REVISION when configured) -> removed
    submit            DRAFT | NEEDS_REVISION -> SUBMITTED
    submit (auto)     DRAFT | NEEDS_REVISION -> SIGNED, one signature
    sign              SUBMITTED -> SIGNED, one signature
    reject            SUBMITTED -> NEEDS_REVISION
    bulk sign         SUBMITTED -> SIGNED, one signature per entry

SIGNED is terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from services.action.review_workflow.domain import EntryStatus
from services.action.review_workflow.errors import InvalidStateTransitionError


class WorkflowOperation(str, Enum):
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    SUBMIT = "submit"
    SUBMIT_AUTO_REVIEW = "submit_auto_review"
    SIGN = "sign"
    REJECT = "reject"
    BULK_SIGN = "bulk_sign"


@dataclass(frozen=True)
class Transition:
    """Valid source states, target state and signature side effect of one operation."""

    sources: frozenset[EntryStatus]
    target: EntryStatus | None
    writes_signature: bool = False


_OWNER_EDITABLE = frozenset({EntryStatus.DRAFT, EntryStatus.NEEDS_REVISION})
_AWAITING_REVIEW = frozenset({EntryStatus.SUBMITTED})

TRANSITIONS: dict[WorkflowOperation, Transition] = {
    WorkflowOperation.CREATE: Transition(sources=frozenset(), target=EntryStatus.DRAFT),
    WorkflowOperation.EDIT: Transition(sources=_OWNER_EDITABLE, target=EntryStatus.DRAFT),
    WorkflowOperation.DELETE: Transition(
        sources=frozenset({EntryStatus.DRAFT}), target=None
    ),
    WorkflowOperation.SUBMIT: Transition(
        sources=_OWNER_EDITABLE, target=EntryStatus.SUBMITTED
    ),
    WorkflowOperation.SUBMIT_AUTO_REVIEW: Transition(
        sources=_OWNER_EDITABLE, target=EntryStatus.SIGNED, writes_signature=True
    ),
    WorkflowOperation.SIGN: Transition(
        sources=_AWAITING_REVIEW, target=EntryStatus.SIGNED, writes_signature=True
    ),
    WorkflowOperation.REJECT: Transition(
        sources=_AWAITING_REVIEW, target=EntryStatus.NEEDS_REVISION
    ),
    WorkflowOperation.BULK_SIGN: Transition(
        sources=_AWAITING_REVIEW, target=EntryStatus.SIGNED, writes_signature=True
    ),
}

# Every persisted (from, to) pair; edit of a DRAFT entry keeps it DRAFT.
ALLOWED_EDGES: frozenset[tuple[EntryStatus, EntryStatus]] = frozenset(
    (source, transition.target)
    for transition in TRANSITIONS.values()
    if transition.target is not None
    for source in transition.sources
)


def transition_for(
    operation: WorkflowOperation, *, allow_delete_needs_revision: bool = False
) -> Transition:
    """Return the transition for ``operation``, applying the delete variant."""
    transition = TRANSITIONS[operation]
    if operation is WorkflowOperation.DELETE and allow_delete_needs_revision:
        return Transition(sources=_OWNER_EDITABLE, target=None)
    return transition


def require_source(
    operation: WorkflowOperation, transition: Transition, status: EntryStatus
) -> None:
    """Raise ``InvalidStateTransitionError`` unless ``status`` may start ``operation``."""
    if status not in transition.sources:
        raise InvalidStateTransitionError(
            f"cannot {operation.value.replace('_', ' ')} an entry in status {status.value}"
        )


def is_allowed_edge(source: EntryStatus, target: EntryStatus) -> bool:
    return (source, target) in ALLOWED_EDGES
