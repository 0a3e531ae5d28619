"""Review-workflow-owned Postgres runtime wiring."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.manifest import component_id_to_schema_name
from resources.substrates.postgres import (
    ServiceSchemaSessionProvider,
    create_postgres_engine,
    create_session_factory,
    resolve_postgres_settings,
)
from services.action.review_workflow.component import SERVICE_COMPONENT_ID


@dataclass(frozen=True)
class ReviewWorkflowPostgresRuntime:
    """Concrete handle for schema-scoped access to workflow tables."""

    engine: Engine
    session_factory: sessionmaker[Session]
    schema_sessions: ServiceSchemaSessionProvider

    @classmethod
    def from_settings(cls, settings: LogbookSettings) -> "ReviewWorkflowPostgresRuntime":
        """Build DB runtime from typed application settings."""
        postgres_settings = resolve_postgres_settings(settings)
        engine = create_postgres_engine(postgres_settings)
        session_factory = create_session_factory(engine)
        return cls(
            engine=engine,
            session_factory=session_factory,
            schema_sessions=ServiceSchemaSessionProvider(
                session_factory=session_factory,
                schema=review_workflow_postgres_schema(),
            ),
        )


def review_workflow_postgres_schema() -> str:
    """Resolve canonical schema name from component identity."""
    return component_id_to_schema_name(SERVICE_COMPONENT_ID)
