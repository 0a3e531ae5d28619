"""Session fixtures for tests that run against a real Postgres."""

from __future__ import annotations

import pytest

from packages.logbook_core.migrations import run_startup_migrations
from packages.logbook_shared.config import LogbookSettings, load_settings
from resources.substrates.postgres import create_postgres_engine, ping
from resources.substrates.postgres.config import resolve_postgres_settings
from tests.integration.helpers import real_provider_tests_enabled


@pytest.fixture(scope="session")
def migrated_settings() -> LogbookSettings:
    """Return loaded settings after migrating every service schema to head."""
    if not real_provider_tests_enabled():
        pytest.skip("real-provider integration tests disabled")
    settings = load_settings()
    postgres_settings = resolve_postgres_settings(settings)
    engine = create_postgres_engine(postgres_settings)
    try:
        if not ping(engine, timeout_seconds=postgres_settings.health_timeout_seconds):
            pytest.skip("postgres unavailable for integration tests")
    finally:
        engine.dispose()
    run_startup_migrations(settings=settings)
    return settings
