"""Authoritative in-process Python API for Review Workflow Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.envelope import Envelope, EnvelopeMeta
from packages.logbook_shared.identity import Actor
from packages.logbook_shared.invalidation import ViewInvalidationSink
from services.action.auto_review.service import AutoReviewService
from services.action.review_workflow.domain import (
    DigitalSignature,
    Entry,
    HealthStatus,
    OwnerEntrySummary,
    PendingReviewCounts,
    WorkflowResult,
)


class ReviewWorkflowService(ABC):
    """Public API for the logbook entry lifecycle and its review queues.

    Mutations return ``Envelope[WorkflowResult]``; ``ok`` is the success
    flag and ``errors[0].code`` carries the ``ErrorKind`` on failure.
    """

    @abstractmethod
    def create_entry(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        category: str,
        payload: dict[str, Any] | None = None,
    ) -> Envelope[WorkflowResult]:
        """Create one DRAFT entry with the next sequence number (owner)."""

    @abstractmethod
    def edit_entry(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        entry_id: str,
        payload: dict[str, Any],
    ) -> Envelope[WorkflowResult]:
        """Replace the payload of a DRAFT or NEEDS_REVISION entry (owner)."""

    @abstractmethod
    def delete_entry(
        self, *, meta: EnvelopeMeta, actor: Actor, entry_id: str
    ) -> Envelope[WorkflowResult]:
        """Delete one deletable entry (owner)."""

    @abstractmethod
    def submit_entry(
        self, *, meta: EnvelopeMeta, actor: Actor, entry_id: str
    ) -> Envelope[WorkflowResult]:
        """Submit one entry for review, or sign it when auto-review is on (owner)."""

    @abstractmethod
    def sign_entry(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        entry_id: str,
        remark: str | None = None,
    ) -> Envelope[WorkflowResult]:
        """Sign one SUBMITTED entry in the caller's scope (reviewer)."""

    @abstractmethod
    def reject_entry(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        entry_id: str,
        remark: str,
    ) -> Envelope[WorkflowResult]:
        """Return one SUBMITTED entry for revision with a remark (reviewer)."""

    @abstractmethod
    def bulk_sign(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        entry_ids: Sequence[str],
        category: str | None = None,
    ) -> Envelope[WorkflowResult]:
        """Sign every SUBMITTED, in-scope entry among ``entry_ids`` (reviewer)."""

    @abstractmethod
    def list_my_entries(
        self, *, meta: EnvelopeMeta, actor: Actor, category: str
    ) -> Envelope[list[Entry]]:
        """List the caller's entries in one category by sequence number (owner)."""

    @abstractmethod
    def summarize_my_entries(
        self, *, meta: EnvelopeMeta, actor: Actor
    ) -> Envelope[OwnerEntrySummary]:
        """Count the caller's entries per category and status group (owner)."""

    @abstractmethod
    def list_review_queue(
        self, *, meta: EnvelopeMeta, actor: Actor, category: str | None = None
    ) -> Envelope[list[Entry]]:
        """List non-DRAFT entries in the caller's scope, newest first (reviewer)."""

    @abstractmethod
    def list_bulk_sign_candidates(
        self, *, meta: EnvelopeMeta, actor: Actor, category: str | None = None
    ) -> Envelope[list[Entry]]:
        """List SUBMITTED entries in the caller's scope, newest first (reviewer)."""

    @abstractmethod
    def list_student_entries(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        student_id: str,
        category: str | None = None,
    ) -> Envelope[list[Entry]]:
        """List one in-scope student's non-DRAFT entries (reviewer)."""

    @abstractmethod
    def count_pending_reviews(
        self, *, meta: EnvelopeMeta, actor: Actor
    ) -> Envelope[PendingReviewCounts]:
        """Count SUBMITTED entries in the caller's scope per category (reviewer)."""

    @abstractmethod
    def list_entry_signatures(
        self, *, meta: EnvelopeMeta, actor: Actor, entry_id: str
    ) -> Envelope[list[DigitalSignature]]:
        """Read one entry's audit trail (owner or in-scope reviewer)."""

    @abstractmethod
    def health(self, *, meta: EnvelopeMeta) -> Envelope[HealthStatus]:
        """Return service and owned dependency readiness status."""


def build_review_workflow_service(
    *,
    settings: LogbookSettings,
    auto_review: AutoReviewService,
    invalidation_sink: ViewInvalidationSink | None = None,
) -> ReviewWorkflowService:
    """Build default Postgres-backed Review Workflow implementation."""
    from services.action.review_workflow.implementation import (
        DefaultReviewWorkflowService,
    )

    return DefaultReviewWorkflowService.from_settings(
        settings,
        auto_review=auto_review,
        invalidation_sink=invalidation_sink,
    )
