"""Review Workflow Service: logbook entry lifecycle and faculty sign-off."""

from services.action.review_workflow.component import MANIFEST, SERVICE_COMPONENT_ID
from services.action.review_workflow.domain import (
    DigitalSignature,
    Entry,
    EntryStatus,
    HealthStatus,
    OwnerEntrySummary,
    PendingReviewCounts,
    WorkflowResult,
)
from services.action.review_workflow.service import (
    ReviewWorkflowService,
    build_review_workflow_service,
)

__all__ = [
    "MANIFEST",
    "SERVICE_COMPONENT_ID",
    "DigitalSignature",
    "Entry",
    "EntryStatus",
    "HealthStatus",
    "OwnerEntrySummary",
    "PendingReviewCounts",
    "ReviewWorkflowService",
    "WorkflowResult",
    "build_review_workflow_service",
]
