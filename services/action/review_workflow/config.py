"""Pydantic settings for Review Workflow Service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from packages.logbook_shared.config import LogbookSettings, resolve_component_settings
from services.action.review_workflow.component import SERVICE_COMPONENT_ID

_REVIEW_QUEUE_VIEW = "/dashboard/faculty/reviews"


class CategorySettings(BaseModel):
    """One logbook section handled by the workflow engine."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str = Field(min_length=1)
    entity_type: str = Field(min_length=1)
    views: tuple[str, ...] = ()


def _category(key: str, entity_type: str, slug: str) -> CategorySettings:
    return CategorySettings(
        key=key,
        entity_type=entity_type,
        views=(
            f"/dashboard/student/{slug}",
            f"/dashboard/faculty/{slug}",
            f"/dashboard/hod/{slug}",
            _REVIEW_QUEUE_VIEW,
        ),
    )


DEFAULT_CATEGORIES: tuple[CategorySettings, ...] = (
    _category("rotationPostings", "RotationPosting", "rotation-postings"),
    _category("thesis", "Thesis", "thesis"),
    _category("trainingMentoring", "TrainingMentoringRecord", "training-mentoring"),
    _category("casePresentations", "CasePresentation", "case-presentations"),
    _category("seminarDiscussions", "Seminar", "case-presentations"),
    _category("journalClubs", "JournalClub", "case-presentations"),
    _category("clinicalSkills", "ClinicalSkill", "clinical-skills"),
    _category("caseManagement", "CaseManagementLog", "case-management"),
    _category("procedureLogs", "ProcedureLog", "procedures"),
    _category("imagingLogs", "ImagingLog", "imaging"),
    _category("transportLogs", "TransportLog", "transport"),
    _category("consentLogs", "ConsentLog", "consent-bad-news"),
    _category("badNewsLogs", "BadNewsLog", "consent-bad-news"),
    _category("lifeSupportCourses", "CourseAttended", "life-support-courses"),
    _category("conferences", "ConferenceParticipation", "conferences"),
    _category("researchActivities", "ResearchActivity", "research-activities"),
    _category("logbookReviews", "LogbookFacultyReview", "logbook-reviews"),
    _category("disasterDrills", "DisasterDrill", "disaster-drills"),
    _category("qualityImprovement", "QualityImprovement", "quality-improvement"),
    _category("attendance", "AttendanceSheet", "attendance"),
)


class ReviewWorkflowSettings(BaseModel):
    """Review workflow runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    categories: tuple[CategorySettings, ...] = DEFAULT_CATEGORIES
    allow_delete_needs_revision: bool = False
    include_direct_student_assignments: bool = False
    max_bulk_sign_ids: int = Field(default=500, gt=0)

    @field_validator("categories")
    @classmethod
    def _require_categories(
        cls, value: tuple[CategorySettings, ...]
    ) -> tuple[CategorySettings, ...]:
        if len(value) == 0:
            raise ValueError("categories must not be empty")
        return value

    @model_validator(mode="after")
    def _require_unique_keys(self) -> "ReviewWorkflowSettings":
        keys = [category.key for category in self.categories]
        if len(set(keys)) != len(keys):
            raise ValueError("categories must have unique keys")
        return self

    def category(self, key: str) -> CategorySettings | None:
        """Return the configured category for ``key``, if any."""
        for category in self.categories:
            if category.key == key:
                return category
        return None


def resolve_review_workflow_settings(
    settings: LogbookSettings,
) -> ReviewWorkflowSettings:
    """Resolve settings from ``components.service.review_workflow``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(SERVICE_COMPONENT_ID),
        model=ReviewWorkflowSettings,
    )
