"""Authoritative in-process Python API for Auto-Review Policy Service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.envelope import Envelope, EnvelopeMeta
from packages.logbook_shared.identity import Actor
from packages.logbook_shared.invalidation import ViewInvalidationSink
from services.action.auto_review.domain import AutoReviewSetting, HealthStatus


class AutoReviewService(ABC):
    """Public API for per-category auto-review flags."""

    @abstractmethod
    def get_all(self, *, meta: EnvelopeMeta, actor: Actor) -> Envelope[dict[str, bool]]:
        """Return every eligible category mapped to its flag (FACULTY or HOD)."""

    @abstractmethod
    def set_enabled(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        category: str,
        enabled: bool,
    ) -> Envelope[AutoReviewSetting]:
        """Upsert one category flag (HOD only)."""

    @abstractmethod
    def is_enabled(self, *, meta: EnvelopeMeta, category: str) -> Envelope[bool]:
        """Return whether new submissions in ``category`` are signed automatically."""

    @abstractmethod
    def health(self, *, meta: EnvelopeMeta) -> Envelope[HealthStatus]:
        """Return service and owned dependency readiness status."""


def build_auto_review_service(
    *,
    settings: LogbookSettings,
    invalidation_sink: ViewInvalidationSink | None = None,
) -> AutoReviewService:
    """Build default Postgres-backed Auto-Review implementation."""
    from services.action.auto_review.implementation import DefaultAutoReviewService

    return DefaultAutoReviewService.from_settings(
        settings, invalidation_sink=invalidation_sink
    )
