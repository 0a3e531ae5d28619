"""Review workflow persistence: tables, repositories and Postgres runtime."""

from services.action.review_workflow.data.repository import (
    InMemoryAssignmentRepository,
    InMemoryReviewWorkflowRepository,
    PostgresAssignmentRepository,
    PostgresReviewWorkflowRepository,
)
from services.action.review_workflow.data.runtime import (
    ReviewWorkflowPostgresRuntime,
    review_workflow_postgres_schema,
)

__all__ = [
    "InMemoryAssignmentRepository",
    "InMemoryReviewWorkflowRepository",
    "PostgresAssignmentRepository",
    "PostgresReviewWorkflowRepository",
    "ReviewWorkflowPostgresRuntime",
    "review_workflow_postgres_schema",
]
