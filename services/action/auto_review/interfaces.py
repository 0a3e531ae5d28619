"""Persistence protocol used by Auto-Review Policy Service."""

from __future__ import annotations

from typing import Protocol

from services.action.auto_review.domain import AutoReviewSetting


class AutoReviewRepository(Protocol):
    """Keyed store of per-category auto-review flags."""

    def get_setting(self, *, category: str) -> AutoReviewSetting | None:
        """Read one category flag, or ``None`` when never set."""

    def list_settings(self) -> list[AutoReviewSetting]:
        """Read every stored category flag."""

    def upsert_setting(
        self, *, category: str, enabled: bool, updated_by: str
    ) -> AutoReviewSetting:
        """Create or overwrite one category flag (last writer wins)."""
