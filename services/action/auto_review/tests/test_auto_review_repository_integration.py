"""Real-Postgres integration tests for the auto-review repository."""

from __future__ import annotations

import pytest

from services.action.auto_review.data import (
    AutoReviewPostgresRuntime,
    PostgresAutoReviewRepository,
)
from tests.integration.helpers import real_provider_tests_enabled

pytest_plugins = ("tests.integration.fixtures",)

pytestmark = pytest.mark.skipif(
    not real_provider_tests_enabled(),
    reason="set LOGBOOK_RUN_INTEGRATION_REAL=1 to run real-provider integration tests",
)


def test_upsert_overwrites_existing_category(migrated_settings) -> None:
    runtime = AutoReviewPostgresRuntime.from_settings(migrated_settings)
    repository = PostgresAutoReviewRepository(runtime.schema_sessions)

    repository.upsert_setting(category="journalClubs", enabled=True, updated_by="hod-a")
    updated = repository.upsert_setting(
        category="journalClubs", enabled=False, updated_by="hod-b"
    )

    assert updated.enabled is False
    assert updated.updated_by == "hod-b"
    stored = repository.get_setting(category="journalClubs")
    assert stored is not None and stored.enabled is False
