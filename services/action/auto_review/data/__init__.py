"""Auto-review persistence: tables, repositories and Postgres runtime."""

from services.action.auto_review.data.repository import (
    InMemoryAutoReviewRepository,
    PostgresAutoReviewRepository,
)
from services.action.auto_review.data.runtime import (
    AutoReviewPostgresRuntime,
    auto_review_postgres_schema,
)

__all__ = [
    "AutoReviewPostgresRuntime",
    "InMemoryAutoReviewRepository",
    "PostgresAutoReviewRepository",
    "auto_review_postgres_schema",
]
