"""Component declaration for Auto-Review Policy Service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ServiceManifest,
    register_component,
)

SERVICE_COMPONENT_ID = ComponentId("service_auto_review")

MANIFEST = register_component(
    ServiceManifest(
        id=SERVICE_COMPONENT_ID,
        module_roots=frozenset({ModuleRoot("services.action.auto_review")}),
        public_api_roots=frozenset(
            {ModuleRoot("services.action.auto_review.service")}
        ),
    )
)


def build_component(
    *, settings: LogbookSettings, components: Mapping[str, object]
) -> object:
    """Build concrete runtime instance for this registered service component."""
    from services.action.auto_review.service import build_auto_review_service

    return build_auto_review_service(
        settings=settings,
        invalidation_sink=components.get("view_invalidation"),
    )
