"""Tests for Postgres substrate settings and engine wiring."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from packages.logbook_shared.config import LogbookSettings
from resources.substrates.postgres.config import (
    PostgresSettings,
    resolve_postgres_settings,
)
from resources.substrates.postgres.engine import create_postgres_engine


def test_dsn_is_assembled_from_split_parts_when_url_unset() -> None:
    """Split host/user settings should produce a psycopg SQLAlchemy URL."""
    config = PostgresSettings(host="db", user="res ident", password="p@ss")
    assert config.dsn == "postgresql+psycopg://res+ident:p%40ss@db:5432/logbook"


def test_explicit_url_wins_over_split_parts() -> None:
    config = PostgresSettings(
        url=" postgresql+psycopg://a:b@h:5432/x ", host="ignored"
    )
    assert config.dsn == "postgresql+psycopg://a:b@h:5432/x"


def test_pool_pre_ping_accepts_boolean_like_false() -> None:
    config = PostgresSettings(pool_pre_ping="false")
    assert config.pool_pre_ping is False


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ValidationError):
        PostgresSettings(pool="big")


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"pool_size": 0}, "postgres.pool_size must be > 0"),
        ({"max_overflow": -1}, "postgres.max_overflow must be >= 0"),
        ({"sslmode": "sometimes"}, "postgres.sslmode must be one of"),
        ({"health_timeout_seconds": 0}, "postgres.health_timeout_seconds"),
    ],
)
def test_validate_rejects_unusable_values(
    overrides: dict[str, object], message: str
) -> None:
    with pytest.raises(ValueError, match=message):
        PostgresSettings(**overrides).validate()


def test_resolve_reads_grouped_substrate_settings() -> None:
    settings = LogbookSettings(
        components={"substrate": {"postgres": {"host": "pg", "pool_size": 2}}}
    )
    resolved = resolve_postgres_settings(settings)
    assert resolved.host == "pg"
    assert resolved.pool_size == 2


def test_engine_uses_configured_pool_settings(monkeypatch) -> None:
    """Engine builder should pass pool settings through from PostgresSettings."""
    captured: dict[str, object] = {}

    def fake_create_engine(url: str, **kwargs: object) -> object:
        captured["url"] = url
        captured.update(kwargs)
        return object()

    import resources.substrates.postgres.engine as engine_module

    monkeypatch.setattr(engine_module, "create_engine", fake_create_engine)

    create_postgres_engine(
        PostgresSettings(url="postgresql+psycopg://l:l@pg:5432/l", pool_pre_ping=False)
    )

    assert captured["url"] == "postgresql+psycopg://l:l@pg:5432/l"
    assert captured["pool_pre_ping"] is False
    assert captured["connect_args"] == {"connect_timeout": 10, "sslmode": "prefer"}
