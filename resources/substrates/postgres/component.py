"""Component declaration for the shared Postgres substrate."""

from __future__ import annotations

from collections.abc import Mapping

from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ResourceManifest,
    register_component,
)

RESOURCE_COMPONENT_ID = ComponentId("substrate_postgres")

MANIFEST = register_component(
    ResourceManifest(
        id=RESOURCE_COMPONENT_ID,
        kind="substrate",
        module_roots=frozenset({ModuleRoot("resources.substrates.postgres")}),
    )
)


def build_component(
    *, settings: LogbookSettings, components: Mapping[str, object]
) -> object:
    """Return validated substrate settings; services build their own engines."""
    del components
    from resources.substrates.postgres.config import resolve_postgres_settings

    return resolve_postgres_settings(settings)
