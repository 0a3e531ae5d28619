"""Component declaration for Review Workflow Service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ServiceManifest,
    register_component,
)

SERVICE_COMPONENT_ID = ComponentId("service_review_workflow")

MANIFEST = register_component(
    ServiceManifest(
        id=SERVICE_COMPONENT_ID,
        module_roots=frozenset({ModuleRoot("services.action.review_workflow")}),
        public_api_roots=frozenset(
            {ModuleRoot("services.action.review_workflow.service")}
        ),
        depends_on=frozenset({ComponentId("service_auto_review")}),
    )
)


def build_component(
    *, settings: LogbookSettings, components: Mapping[str, object]
) -> object:
    """Build concrete runtime instance for this registered service component."""
    from services.action.review_workflow.service import build_review_workflow_service

    return build_review_workflow_service(
        settings=settings,
        auto_review=components["service_auto_review"],
        invalidation_sink=components.get("view_invalidation"),
    )
