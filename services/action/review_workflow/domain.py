"""Domain contracts for Review Workflow Service payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

AUTO_REVIEW_SIGNER_ID = "auto-review"
AUTO_REVIEW_REMARK = "Auto-reviewed by system"


class EntryStatus(str, Enum):
    """Lifecycle states of one logbook entry."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    NEEDS_REVISION = "NEEDS_REVISION"
    SIGNED = "SIGNED"


class ErrorKind(str, Enum):
    """Error codes reported by workflow operations."""

    NOT_FOUND_OR_UNAUTHORIZED = "NOT_FOUND_OR_UNAUTHORIZED"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EMPTY_BULK_SELECTION = "EMPTY_BULK_SELECTION"
    FORBIDDEN = "FORBIDDEN"


class Entry(BaseModel):
    """One unit of trainee-submitted evidence in any category."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    owner_id: str
    category: str
    sequence_no: int
    status: EntryStatus
    reviewer_remark: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class DigitalSignature(BaseModel):
    """Append-only record of one transition into SIGNED."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    signer_id: str
    entity_type: str
    entity_id: str
    remark: str | None = None
    created_at: datetime


class SignatureDraft(BaseModel):
    """Signature fields supplied by the engine; the store adds id and timestamps."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    signer_id: str
    entity_type: str
    remark: str | None = None


class EntryChanges(BaseModel):
    """Column updates applied together with a status change.

    Only fields passed explicitly are written; ``reviewer_remark=None`` clears
    the remark while an omitted field keeps the stored value.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    payload: dict[str, Any] | None = None
    reviewer_remark: str | None = None

    def updates(self) -> dict[str, Any]:
        """Return the explicitly passed fields keyed by column name."""
        return self.model_dump(exclude_unset=True)


EntryOrder = Literal["sequence", "newest", "category_sequence"]


class EntryQuery(BaseModel):
    """Filter for entry listings.

    ``owner_ids`` of ``None`` means any owner; an empty set matches nothing.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    owner_ids: frozenset[str] | None = None
    category: str | None = None
    statuses: frozenset[EntryStatus] | None = None
    exclude_statuses: frozenset[EntryStatus] = frozenset()
    order: EntryOrder = "newest"


class ReviewScope(BaseModel):
    """Students whose entries a reviewer may see and act on."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    unrestricted: bool = False
    student_ids: frozenset[str] = frozenset()

    def contains(self, student_id: str) -> bool:
        return self.unrestricted or student_id in self.student_ids

    @property
    def is_empty(self) -> bool:
        return not self.unrestricted and len(self.student_ids) == 0

    def owner_filter(self) -> frozenset[str] | None:
        """Return the ``EntryQuery.owner_ids`` value for this scope."""
        return None if self.unrestricted else self.student_ids


class WorkflowResult(BaseModel):
    """Result of one mutating workflow operation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entry: Entry | None = None
    signed_count: int | None = None
    signed_entry_ids: tuple[str, ...] = ()


class PendingReviewCounts(BaseModel):
    """SUBMITTED entries awaiting the caller, per category."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    by_category: dict[str, int]
    total: int


class OwnerEntrySummary(BaseModel):
    """Per-category entry counts for one student."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_by_category: dict[str, int]
    submitted_by_category: dict[str, int]
    signed_by_category: dict[str, int]
    needs_revision_by_category: dict[str, int]


class HealthStatus(BaseModel):
    """Review workflow and owned dependency readiness status payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    detail: str
    entry_count: int = 0
    signature_count: int = 0
