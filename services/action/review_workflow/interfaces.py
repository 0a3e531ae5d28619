"""Transport-neutral protocol interfaces used by Review Workflow Service."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from packages.logbook_shared.envelope import EnvelopeMeta
from services.action.review_workflow.domain import (
    DigitalSignature,
    Entry,
    EntryChanges,
    EntryQuery,
    EntryStatus,
    SignatureDraft,
)

SignatureFactory = Callable[[Entry], SignatureDraft]


class EntryRepository(Protocol):
    """Entry store plus the signature audit trail it writes atomically.

    Status changes are compare-and-set: a row only moves when its current
    status is in ``expected``, and any signature for that row is appended in
    the same transaction.
    """

    def create_entry(
        self, *, owner_id: str, category: str, payload: dict[str, Any]
    ) -> Entry:
        """Insert one DRAFT entry with the next sequence number for (owner, category)."""

    def get_entry(self, *, entry_id: str) -> Entry | None:
        """Read one entry by id."""

    def list_entries(self, *, query: EntryQuery) -> list[Entry]:
        """Read entries matching ``query``."""

    def transition_entry(
        self,
        *,
        entry_id: str,
        expected: frozenset[EntryStatus],
        target: EntryStatus,
        changes: EntryChanges | None = None,
        signature: SignatureFactory | None = None,
    ) -> Entry | None:
        """Move one entry to ``target``; return ``None`` when the status did not match."""

    def transition_entries(
        self,
        *,
        entry_ids: Sequence[str],
        expected: frozenset[EntryStatus],
        target: EntryStatus,
        owner_ids: frozenset[str] | None,
        category: str | None,
        signature: SignatureFactory | None = None,
    ) -> list[Entry]:
        """Move every matching entry in one statement and return the moved rows."""

    def delete_entry(
        self, *, entry_id: str, owner_id: str, deletable: frozenset[EntryStatus]
    ) -> bool:
        """Delete one owned entry whose status is in ``deletable``."""

    def list_signatures(self, *, entry_id: str) -> list[DigitalSignature]:
        """Read the audit trail for one entry, oldest first."""

    def count_entries(self) -> int:
        """Return the number of stored entries."""

    def count_signatures(self) -> int:
        """Return the number of stored signatures."""


class AssignmentRepository(Protocol):
    """Read access to faculty, batch and student reference data."""

    def faculty_batch_ids(self, *, faculty_id: str) -> frozenset[str]:
        """Return batches assigned to one faculty member."""

    def batch_student_ids(self, *, batch_ids: frozenset[str]) -> frozenset[str]:
        """Return students whose current batch is in ``batch_ids``."""

    def faculty_student_ids(self, *, faculty_id: str) -> frozenset[str]:
        """Return students directly assigned to one faculty member."""


class AutoReviewPolicy(Protocol):
    """Per-category auto-review lookup used on submit."""

    def is_enabled(self, *, meta: EnvelopeMeta, category: str) -> bool:
        """Return whether submissions in ``category`` are signed automatically."""


class PayloadValidator(Protocol):
    """Per-category payload schema check; raises ``ValueError`` when malformed."""

    def validate(self, *, category: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Return the normalized payload."""
