"""Auto-Review Policy Service: per-category bypass of manual sign-off."""

from services.action.auto_review.component import MANIFEST, SERVICE_COMPONENT_ID
from services.action.auto_review.domain import AutoReviewSetting, HealthStatus
from services.action.auto_review.service import (
    AutoReviewService,
    build_auto_review_service,
)

__all__ = [
    "MANIFEST",
    "SERVICE_COMPONENT_ID",
    "AutoReviewService",
    "AutoReviewSetting",
    "HealthStatus",
    "build_auto_review_service",
]
