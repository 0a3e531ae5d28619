"""Build the in-process component graph from registered manifests."""

from __future__ import annotations

import importlib
from collections.abc import Callable, Mapping
from pathlib import Path

from packages.logbook_core.component_loader import import_registered_component_modules
from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.logging import configure_logging, get_logger
from packages.logbook_shared.manifest import ComponentManifest, get_registry

_LOGGER = get_logger(__name__)

ComponentBuilder = Callable[..., object]


def resolve_component_builder(manifest: ComponentManifest) -> ComponentBuilder:
    """Return ``build_component`` from the manifest's ``component`` module."""
    for module_root in sorted(manifest.module_roots):
        module = importlib.import_module(f"{module_root}.component")
        builder = getattr(module, "build_component", None)
        if callable(builder):
            return builder
    raise RuntimeError(
        f"component '{manifest.id}' does not expose build_component(...)"
    )


def build_components(
    *,
    settings: LogbookSettings,
    provided: Mapping[str, object] | None = None,
    repo_root: Path | None = None,
    resolve_builder: Callable[[ComponentManifest], ComponentBuilder] = (
        resolve_component_builder
    ),
) -> dict[str, object]:
    """Instantiate resources, then services in dependency order.

    ``provided`` seeds the graph with collaborators that are not components,
    such as a ``view_invalidation`` sink.
    """
    import_registered_component_modules(repo_root=repo_root)
    registry = get_registry()
    built: dict[str, object] = dict(provided or {})
    for manifest in (*registry.list_resources(), *registry.list_services()):
        builder = resolve_builder(manifest)
        try:
            built[str(manifest.id)] = builder(settings=settings, components=built)
        except KeyError as exc:
            raise RuntimeError(
                f"component '{manifest.id}' requires unbuilt component {exc}"
            ) from exc
        _LOGGER.info("Component instantiated: %s", manifest.id)
    return built


def build_runtime(
    settings: LogbookSettings,
    *,
    provided: Mapping[str, object] | None = None,
) -> dict[str, object]:
    """Configure logging from settings and build every registered component."""
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    return build_components(settings=settings, provided=provided)
