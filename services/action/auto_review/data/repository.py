"""Auto-review flag repositories: Postgres authority plus an in-memory twin."""

from __future__ import annotations

from datetime import UTC, datetime
from threading import RLock
from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert

from packages.logbook_shared.ids import generate_ulid_bytes
from resources.substrates.postgres.schema_session import ServiceSchemaSessionProvider
from services.action.auto_review.domain import AutoReviewSetting
from services.action.auto_review.interfaces import AutoReviewRepository

from .schema import auto_review_settings


class PostgresAutoReviewRepository(AutoReviewRepository):
    """SQL repository over the auto-review schema."""

    def __init__(self, sessions: ServiceSchemaSessionProvider) -> None:
        self._sessions = sessions

    def get_setting(self, *, category: str) -> AutoReviewSetting | None:
        with self._sessions.session() as session:
            row = (
                session.execute(
                    select(auto_review_settings).where(
                        auto_review_settings.c.category == category
                    )
                )
                .mappings()
                .one_or_none()
            )
            return None if row is None else _to_setting(row)

    def list_settings(self) -> list[AutoReviewSetting]:
        with self._sessions.session() as session:
            rows = (
                session.execute(
                    select(auto_review_settings).order_by(auto_review_settings.c.category)
                )
                .mappings()
                .all()
            )
            return [_to_setting(row) for row in rows]

    def upsert_setting(
        self, *, category: str, enabled: bool, updated_by: str
    ) -> AutoReviewSetting:
        stmt = insert(auto_review_settings).values(
            id=generate_ulid_bytes(),
            category=category,
            enabled=enabled,
            updated_by=updated_by,
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_auto_review_settings_category",
            set_={
                "enabled": stmt.excluded.enabled,
                "updated_by": stmt.excluded.updated_by,
                "updated_at": func.now(),
            },
        ).returning(auto_review_settings)
        with self._sessions.session() as session:
            row = session.execute(stmt).mappings().one()
            return _to_setting(row)


class InMemoryAutoReviewRepository(AutoReviewRepository):
    """Process-local flag store used by tests and single-process tooling."""

    def __init__(self) -> None:
        self._rows: dict[str, AutoReviewSetting] = {}
        self._lock = RLock()

    def get_setting(self, *, category: str) -> AutoReviewSetting | None:
        with self._lock:
            return self._rows.get(category)

    def list_settings(self) -> list[AutoReviewSetting]:
        with self._lock:
            return [self._rows[key] for key in sorted(self._rows)]

    def upsert_setting(
        self, *, category: str, enabled: bool, updated_by: str
    ) -> AutoReviewSetting:
        setting = AutoReviewSetting(
            category=category,
            enabled=enabled,
            updated_by=updated_by,
            updated_at=datetime.now(UTC),
        )
        with self._lock:
            self._rows[category] = setting
        return setting


def _to_setting(row: Mapping[str, Any]) -> AutoReviewSetting:
    updated_at = row["updated_at"]
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=UTC)
    return AutoReviewSetting(
        category=str(row["category"]),
        enabled=bool(row["enabled"]),
        updated_by=str(row["updated_by"]),
        updated_at=updated_at.astimezone(UTC),
    )
