"""Pre-migration bootstrap for service schemas and shared SQL primitives."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Connection, text

from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.ids.constants import ULID_DOMAIN_NAME
from packages.logbook_shared.logging import get_logger
from packages.logbook_shared.manifest import ServiceManifest
from resources.substrates.postgres.config import resolve_postgres_settings
from resources.substrates.postgres.engine import create_postgres_engine

_LOGGER = get_logger(__name__)

# Postgres has no CREATE DOMAIN IF NOT EXISTS.
ULID_DOMAIN_DEFINITION_SQL = """
DO $$
BEGIN
    IF NOT EXISTS (
        SELECT 1 FROM pg_type t
        JOIN pg_namespace n ON n.oid = t.typnamespace
        WHERE t.typname = '{domain}' AND n.nspname = '{schema}'
    ) THEN
        CREATE DOMAIN {schema}.{domain} AS bytea CHECK (octet_length(VALUE) = 16);
    END IF;
END
$$;
"""


@dataclass(frozen=True)
class BootstrapResult:
    """Summary of pre-migration bootstrap actions."""

    provisioned_schemas: tuple[str, ...]


def bootstrap_service_schemas(
    *, settings: LogbookSettings, services: tuple[ServiceManifest, ...]
) -> BootstrapResult:
    """Create every service schema and its ``ulid_bin`` domain."""
    if len(services) == 0:
        raise RuntimeError("no registered services; refusing schema bootstrap")

    engine = create_postgres_engine(resolve_postgres_settings(settings))
    try:
        provisioned: list[str] = []
        with engine.begin() as connection:
            for service in services:
                _provision_service_schema(connection=connection, service=service)
                provisioned.append(service.schema_name)
    finally:
        engine.dispose()

    _LOGGER.info("Provisioned %d service schema(s)", len(provisioned))
    return BootstrapResult(provisioned_schemas=tuple(provisioned))


def _provision_service_schema(*, connection: Connection, service: ServiceManifest) -> None:
    schema = service.schema_name
    connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema}"))
    connection.execute(
        text(ULID_DOMAIN_DEFINITION_SQL.format(schema=schema, domain=ULID_DOMAIN_NAME))
    )
