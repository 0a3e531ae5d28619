"""Startup migration orchestration for registered services."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from alembic import command
from alembic.config import Config

from packages.logbook_core.component_loader import (
    default_repo_root,
    import_registered_component_modules,
)
from packages.logbook_shared.config import LogbookSettings, load_settings
from packages.logbook_shared.logging import configure_logging, get_logger
from packages.logbook_shared.manifest import ServiceManifest, get_registry
from resources.substrates.postgres.bootstrap import (
    BootstrapResult,
    bootstrap_service_schemas,
)
from resources.substrates.postgres.config import resolve_postgres_settings

_LOGGER = get_logger(__name__)


class MigrationExecutionError(RuntimeError):
    """Raised when startup migration execution fails."""


@dataclass(frozen=True)
class MigrationRunResult:
    """Summary of one startup migration pass."""

    imported_components: tuple[str, ...]
    provisioned_schemas: tuple[str, ...]
    executed_alembic_configs: tuple[str, ...]


def discover_service_migration_configs(
    *,
    services: tuple[ServiceManifest, ...],
    repo_root: Path | None = None,
) -> tuple[Path, ...]:
    """Return one ``alembic.ini`` per service, in service dependency order."""
    root = (repo_root or default_repo_root()).resolve()
    config_paths: list[Path] = []
    for service in services:
        for module_root in sorted(service.module_roots):
            candidate = (
                root / Path(*str(module_root).split(".")) / "migrations" / "alembic.ini"
            )
            if candidate.exists():
                config_paths.append(candidate)
                break
    return tuple(config_paths)


def run_startup_migrations(
    *,
    settings: LogbookSettings,
    repo_root: Path | None = None,
    upgrade_fn: Callable[[Config, str], None] = command.upgrade,
    bootstrap_fn: Callable[..., BootstrapResult] = bootstrap_service_schemas,
) -> MigrationRunResult:
    """Bootstrap service schemas, then upgrade every service to ``head``."""
    imported = import_registered_component_modules(repo_root=repo_root)
    services = get_registry().list_services()
    bootstrap_result = bootstrap_fn(settings=settings, services=services)
    dsn = resolve_postgres_settings(settings).dsn

    executed: list[str] = []
    for config_path in discover_service_migration_configs(
        services=services, repo_root=repo_root
    ):
        config = Config(str(config_path))
        config.set_main_option("sqlalchemy.url", dsn.replace("%", "%%"))
        try:
            upgrade_fn(config, "head")
        except Exception as exc:
            raise MigrationExecutionError(
                f"startup migration failed for config '{config_path}'"
            ) from exc
        _LOGGER.info("Migrated %s", config_path.parent.parent.name)
        executed.append(str(config_path))

    return MigrationRunResult(
        imported_components=imported,
        provisioned_schemas=bootstrap_result.provisioned_schemas,
        executed_alembic_configs=tuple(executed),
    )


def main() -> None:
    """Run startup migrations using settings from the environment and YAML."""
    settings = load_settings()
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    result = run_startup_migrations(settings=settings)
    _LOGGER.info(
        "Startup migrations completed for %d schema(s)",
        len(result.provisioned_schemas),
    )


if __name__ == "__main__":
    main()
