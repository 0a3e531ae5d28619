"""Tests for building the component graph from registered manifests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from packages.logbook_core.startup import build_components, build_runtime
from packages.logbook_shared.config import LogbookSettings, LoggingSettings
from packages.logbook_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ResourceManifest,
    ServiceManifest,
)

_RESOURCE = ResourceManifest(
    id=ComponentId("substrate_postgres"),
    module_roots=frozenset({ModuleRoot("resources.substrates.postgres")}),
)
_POLICY = ServiceManifest(
    id=ComponentId("service_auto_review"),
    module_roots=frozenset({ModuleRoot("services.action.auto_review")}),
    public_api_roots=frozenset({ModuleRoot("services.action.auto_review.service")}),
)
_WORKFLOW = ServiceManifest(
    id=ComponentId("service_review_workflow"),
    module_roots=frozenset({ModuleRoot("services.action.review_workflow")}),
    public_api_roots=frozenset({ModuleRoot("services.action.review_workflow.service")}),
    depends_on=frozenset({ComponentId("service_auto_review")}),
)


def _patch_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "packages.logbook_core.startup.import_registered_component_modules",
        lambda repo_root=None: (),
    )
    monkeypatch.setattr(
        "packages.logbook_core.startup.get_registry",
        lambda: SimpleNamespace(
            list_resources=lambda: (_RESOURCE,),
            list_services=lambda: (_POLICY, _WORKFLOW),
        ),
    )


def test_components_build_in_dependency_order_with_provided_seed(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _patch_registry(monkeypatch)
    seen: list[tuple[str, tuple[str, ...]]] = []

    def _resolve(manifest):
        def build(*, settings, components):
            seen.append((str(manifest.id), tuple(sorted(components))))
            return f"built:{manifest.id}"

        return build

    sink = object()
    built = build_components(
        settings=LogbookSettings(),
        provided={"view_invalidation": sink},
        resolve_builder=_resolve,
    )

    assert [component_id for component_id, _ in seen] == [
        "substrate_postgres",
        "service_auto_review",
        "service_review_workflow",
    ]
    assert "service_auto_review" in seen[2][1]
    assert built["view_invalidation"] is sink
    assert built["service_review_workflow"] == "built:service_review_workflow"


def test_missing_dependency_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_registry(monkeypatch)

    def _resolve(manifest):
        def build(*, settings, components):
            return components["nope"]

        return build

    with pytest.raises(RuntimeError, match="requires unbuilt component"):
        build_components(settings=LogbookSettings(), resolve_builder=_resolve)


def test_build_runtime_configures_logging_before_building(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    calls: list[tuple[str, object]] = []
    monkeypatch.setattr(
        "packages.logbook_core.startup.configure_logging",
        lambda **kwargs: calls.append(("logging", kwargs)),
    )
    monkeypatch.setattr(
        "packages.logbook_core.startup.build_components",
        lambda *, settings, provided: calls.append(("build", provided)) or {"x": 1},
    )
    settings = LogbookSettings(
        logging=LoggingSettings(level="DEBUG", json_output=False, service="ward-7")
    )

    built = build_runtime(settings, provided={"view_invalidation": None})

    assert built == {"x": 1}
    assert [name for name, _ in calls] == ["logging", "build"]
    assert calls[0][1] == {
        "level": "DEBUG",
        "json_output": False,
        "service": "ward-7",
        "environment": "dev",
    }
    assert calls[1][1] == {"view_invalidation": None}
