"""Schema shape tests for auto-review tables."""

from __future__ import annotations

from services.action.auto_review.data.schema import auto_review_settings


def test_auto_review_settings_columns() -> None:
    assert set(auto_review_settings.c.keys()) == {
        "id",
        "category",
        "enabled",
        "updated_by",
        "updated_at",
    }


def test_category_is_unique() -> None:
    names = {constraint.name for constraint in auto_review_settings.constraints}
    assert "uq_auto_review_settings_category" in names
