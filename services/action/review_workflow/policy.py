"""Adapter exposing the Auto-Review Policy Service as an ``AutoReviewPolicy``."""

from __future__ import annotations

from packages.logbook_shared.envelope import EnvelopeMeta
from packages.logbook_shared.logging import get_logger
from services.action.auto_review.service import AutoReviewService

_LOGGER = get_logger(__name__)


class AutoReviewServicePolicy:
    """Read auto-review flags through the service API, failing closed."""

    def __init__(self, service: AutoReviewService) -> None:
        self._service = service

    def is_enabled(self, *, meta: EnvelopeMeta, category: str) -> bool:
        result = self._service.is_enabled(meta=meta, category=category)
        if not result.ok or result.payload is None:
            _LOGGER.warning(
                "Auto-review lookup failed for category %s; treating as disabled: %s",
                category,
                result.error_code,
            )
            return False
        return bool(result.payload.value)
