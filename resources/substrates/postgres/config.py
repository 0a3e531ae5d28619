"""Configuration model for shared Postgres substrate access."""

from __future__ import annotations

from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, field_validator

from packages.logbook_shared.config import LogbookSettings, resolve_component_settings

_SSL_MODES = frozenset(
    {"disable", "allow", "prefer", "require", "verify-ca", "verify-full"}
)


class PostgresSettings(BaseModel):
    """Settings under ``components.substrate.postgres``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = ""
    host: str = "localhost"
    port: int = 5432
    database: str = "logbook"
    user: str = "logbook"
    password: str = "logbook"
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout_seconds: float = 30.0
    pool_pre_ping: bool = True
    connect_timeout_seconds: float = 10.0
    sslmode: str = "prefer"
    health_timeout_seconds: float = 1.0

    @field_validator("url", "host", "database", "user", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def dsn(self) -> str:
        """Return explicit ``url`` or one assembled from split parts."""
        if self.url:
            return self.url
        return (
            "postgresql+psycopg://"
            f"{quote_plus(self.user)}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{quote_plus(self.database)}"
        )

    def validate(self) -> None:
        """Validate Postgres settings required for reliable connectivity."""
        if not self.url:
            if not self.host:
                raise ValueError("postgres.host is required when postgres.url is unset")
            if not self.database:
                raise ValueError(
                    "postgres.database is required when postgres.url is unset"
                )
            if not self.user:
                raise ValueError("postgres.user is required when postgres.url is unset")
        if self.pool_size <= 0:
            raise ValueError("postgres.pool_size must be > 0")
        if self.max_overflow < 0:
            raise ValueError("postgres.max_overflow must be >= 0")
        if self.pool_timeout_seconds <= 0:
            raise ValueError("postgres.pool_timeout_seconds must be > 0")
        if self.connect_timeout_seconds <= 0:
            raise ValueError("postgres.connect_timeout_seconds must be > 0")
        if self.health_timeout_seconds <= 0:
            raise ValueError("postgres.health_timeout_seconds must be > 0")
        if self.sslmode not in _SSL_MODES:
            raise ValueError(
                "postgres.sslmode must be one of: "
                + ", ".join(sorted(_SSL_MODES))
            )


def resolve_postgres_settings(settings: LogbookSettings) -> PostgresSettings:
    """Resolve and validate ``components.substrate.postgres``."""
    resolved = resolve_component_settings(
        settings=settings,
        component_id="substrate_postgres",
        model=PostgresSettings,
    )
    resolved.validate()
    return resolved
