"""Tests for pydantic-settings-backed shared configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from packages.logbook_shared.config import (
    CONFIG_PATH_ENV,
    load_settings,
    resolve_component_settings,
)
from resources.substrates.postgres.config import PostgresSettings
from services.action.review_workflow.component import SERVICE_COMPONENT_ID
from services.action.review_workflow.config import (
    ReviewWorkflowSettings,
    resolve_review_workflow_settings,
)


def _write_yaml(path: Path) -> Path:
    path.write_text(
        "\n".join(
            [
                "logging:",
                "  level: WARNING",
                "  service: logbook-test",
                "components:",
                "  substrate:",
                "    postgres:",
                "      pool_size: 7",
                "  service:",
                "    review_workflow:",
                "      max_bulk_sign_ids: 50",
                "      allow_delete_needs_revision: true",
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_load_settings_uses_precedence_cascade(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Init params should override env, env should override YAML, then defaults."""
    config_file = _write_yaml(tmp_path / "logbook.yaml")
    monkeypatch.setenv("LOGBOOK_LOGGING__LEVEL", "ERROR")
    monkeypatch.setenv("LOGBOOK_LOGGING__ENVIRONMENT", "ci")

    settings = load_settings(config_path=config_file, logging={"level": "DEBUG"})

    assert settings.logging.level == "DEBUG"
    assert settings.logging.environment == "ci"
    assert settings.logging.service == "logbook-test"


def test_component_settings_resolve_from_grouped_yaml(tmp_path: Path) -> None:
    settings = load_settings(config_path=_write_yaml(tmp_path / "logbook.yaml"))

    postgres = resolve_component_settings(
        settings=settings, component_id="substrate_postgres", model=PostgresSettings
    )
    workflow = resolve_review_workflow_settings(settings)

    assert postgres.pool_size == 7
    assert workflow.max_bulk_sign_ids == 50
    assert workflow.allow_delete_needs_revision is True
    assert workflow.category("procedureLogs") is not None


def test_config_path_can_come_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv(CONFIG_PATH_ENV, str(_write_yaml(tmp_path / "alt.yaml")))

    settings = load_settings()

    assert settings.logging.level == "WARNING"


def test_missing_sources_fall_back_to_model_defaults(tmp_path: Path) -> None:
    settings = load_settings(config_path=tmp_path / "absent.yaml")
    workflow = resolve_component_settings(
        settings=settings,
        component_id=str(SERVICE_COMPONENT_ID),
        model=ReviewWorkflowSettings,
    )

    assert settings.logging.level == "INFO"
    assert settings.logging.service == "logbook"
    assert workflow.max_bulk_sign_ids == 500
    assert workflow.include_direct_student_assignments is False


def test_flat_component_keys_are_rejected(tmp_path: Path) -> None:
    config_file = tmp_path / "logbook.yaml"
    config_file.write_text(
        "components:\n  service_review_workflow:\n    max_bulk_sign_ids: 1\n",
        encoding="utf-8",
    )

    with pytest.raises(ValidationError, match="components.service.review_workflow"):
        load_settings(config_path=config_file)


def test_unknown_component_kind_is_rejected() -> None:
    with pytest.raises(ValueError, match="unsupported component id"):
        resolve_component_settings(
            settings=load_settings(),
            component_id="adapter_signal",
            model=PostgresSettings,
        )
