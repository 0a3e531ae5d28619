"""Pydantic settings for Auto-Review Policy Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from packages.logbook_shared.config import LogbookSettings, resolve_component_settings
from services.action.auto_review.component import SERVICE_COMPONENT_ID

DEFAULT_AUTO_REVIEW_CATEGORIES: tuple[str, ...] = (
    "rotationPostings",
    "thesis",
    "trainingMentoring",
    "casePresentations",
    "seminarDiscussions",
    "journalClubs",
    "clinicalSkills",
    "caseManagement",
    "procedureLogs",
    "imagingLogs",
    "transportLogs",
    "consentLogs",
    "badNewsLogs",
    "lifeSupportCourses",
    "conferences",
    "researchActivities",
    "logbookReviews",
    "disasterDrills",
    "qualityImprovement",
)

DEFAULT_TOGGLE_VIEWS: tuple[str, ...] = (
    "/dashboard/hod/rotation-postings",
    "/dashboard/hod/case-presentations",
    "/dashboard/faculty/case-presentations",
    "/dashboard/faculty/reviews",
    "/dashboard/faculty/clinical-skills",
    "/dashboard/hod/clinical-skills",
    "/dashboard/faculty/case-management",
    "/dashboard/hod/case-management",
    "/dashboard/faculty/procedures",
    "/dashboard/hod/procedures",
    "/dashboard/faculty/imaging",
    "/dashboard/hod/imaging",
    "/dashboard/faculty/transport",
    "/dashboard/hod/transport",
    "/dashboard/faculty/consent-bad-news",
    "/dashboard/hod/consent-bad-news",
    "/dashboard/faculty/life-support-courses",
    "/dashboard/hod/life-support-courses",
    "/dashboard/faculty/conferences",
    "/dashboard/hod/conferences",
    "/dashboard/faculty/research-activities",
    "/dashboard/hod/research-activities",
    "/dashboard/faculty/logbook-reviews",
    "/dashboard/hod/logbook-reviews",
    "/dashboard/faculty/disaster-drills",
    "/dashboard/hod/disaster-drills",
    "/dashboard/faculty/quality-improvement",
    "/dashboard/hod/quality-improvement",
)


class AutoReviewSettings(BaseModel):
    """Auto-review eligible categories and views refreshed after a toggle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    categories: tuple[str, ...] = DEFAULT_AUTO_REVIEW_CATEGORIES
    views: tuple[str, ...] = DEFAULT_TOGGLE_VIEWS

    @field_validator("categories")
    @classmethod
    def _validate_categories(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Require non-empty, unique category keys."""
        normalized = tuple(item.strip() for item in value)
        if any(item == "" for item in normalized):
            raise ValueError("categories must not contain empty keys")
        if len(set(normalized)) != len(normalized):
            raise ValueError("categories must be unique")
        return normalized


def resolve_auto_review_settings(settings: LogbookSettings) -> AutoReviewSettings:
    """Resolve settings from ``components.service.auto_review``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(SERVICE_COMPONENT_ID),
        model=AutoReviewSettings,
    )
