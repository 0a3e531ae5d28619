"""Concrete Auto-Review Policy Service implementation."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.envelope import (
    Envelope,
    EnvelopeMeta,
    failure,
    success,
    validate_meta,
)
from packages.logbook_shared.errors import (
    ErrorDetail,
    codes,
    policy_error,
    validation_error,
)
from packages.logbook_shared.identity import Actor, ActorRole
from packages.logbook_shared.invalidation import (
    LoggingViewInvalidationSink,
    ViewInvalidationSink,
)
from packages.logbook_shared.logging import get_logger, public_api_instrumented
from services.action.auto_review.component import SERVICE_COMPONENT_ID
from services.action.auto_review.config import (
    AutoReviewSettings,
    resolve_auto_review_settings,
)
from services.action.auto_review.data import (
    AutoReviewPostgresRuntime,
    PostgresAutoReviewRepository,
)
from services.action.auto_review.domain import AutoReviewSetting, HealthStatus
from services.action.auto_review.interfaces import AutoReviewRepository
from services.action.auto_review.service import AutoReviewService

_LOGGER = get_logger(__name__)


class DefaultAutoReviewService(AutoReviewService):
    """Default implementation over an injected flag repository."""

    def __init__(
        self,
        *,
        settings: AutoReviewSettings,
        repository: AutoReviewRepository,
        invalidation_sink: ViewInvalidationSink | None = None,
    ) -> None:
        self._settings = settings
        self._repository = repository
        self._invalidation_sink = invalidation_sink or LoggingViewInvalidationSink()

    @classmethod
    def from_settings(
        cls,
        settings: LogbookSettings,
        *,
        invalidation_sink: ViewInvalidationSink | None = None,
    ) -> "DefaultAutoReviewService":
        """Build service with its schema-scoped Postgres repository."""
        runtime = AutoReviewPostgresRuntime.from_settings(settings)
        return cls(
            settings=resolve_auto_review_settings(settings),
            repository=PostgresAutoReviewRepository(runtime.schema_sessions),
            invalidation_sink=invalidation_sink,
        )

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def get_all(self, *, meta: EnvelopeMeta, actor: Actor) -> Envelope[dict[str, bool]]:
        errors = _meta_errors(meta)
        if errors:
            return failure(meta=meta, errors=errors)
        if not actor.is_reviewer:
            return failure(meta=meta, errors=[_forbidden("FACULTY or HOD")])

        flags = {category: False for category in self._settings.categories}
        for setting in self._repository.list_settings():
            if setting.category in flags:
                flags[setting.category] = setting.enabled
        return success(meta=meta, payload=flags)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("category",),
    )
    def set_enabled(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        category: str,
        enabled: bool,
    ) -> Envelope[AutoReviewSetting]:
        errors = _meta_errors(meta)
        if errors:
            return failure(meta=meta, errors=errors)
        if actor.role != ActorRole.HOD:
            return failure(meta=meta, errors=[_forbidden("HOD")])

        normalized = category.strip()
        if normalized not in self._settings.categories:
            return failure(
                meta=meta,
                errors=[
                    validation_error(
                        f"category '{normalized}' does not support auto-review",
                        code=codes.INVALID_ARGUMENT,
                    )
                ],
            )

        setting = self._repository.upsert_setting(
            category=normalized, enabled=enabled, updated_by=actor.actor_id
        )
        _LOGGER.info(
            "Auto-review %s for category %s",
            "enabled" if setting.enabled else "disabled",
            setting.category,
        )
        self._invalidate_views()
        return success(meta=meta, payload=setting)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("category",),
    )
    def is_enabled(self, *, meta: EnvelopeMeta, category: str) -> Envelope[bool]:
        errors = _meta_errors(meta)
        if errors:
            return failure(meta=meta, errors=errors)
        setting = self._repository.get_setting(category=category.strip())
        return success(meta=meta, payload=setting is not None and setting.enabled)

    @public_api_instrumented(logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID))
    def health(self, *, meta: EnvelopeMeta) -> Envelope[HealthStatus]:
        errors = _meta_errors(meta)
        if errors:
            return failure(meta=meta, errors=errors)
        try:
            self._repository.list_settings()
        except SQLAlchemyError as exc:
            return success(
                meta=meta,
                payload=HealthStatus(
                    service_ready=True,
                    substrate_ready=False,
                    detail=f"auto-review store unavailable: {type(exc).__name__}",
                ),
            )
        return success(
            meta=meta,
            payload=HealthStatus(service_ready=True, substrate_ready=True, detail="ok"),
        )

    def _invalidate_views(self) -> None:
        try:
            self._invalidation_sink.invalidate(views=self._settings.views)
        except Exception:  # noqa: BLE001
            _LOGGER.warning("View invalidation failed after auto-review toggle", exc_info=True)


def _meta_errors(meta: EnvelopeMeta) -> list[ErrorDetail]:
    try:
        validate_meta(meta)
    except ValueError as exc:
        return [validation_error(str(exc), code=codes.INVALID_ARGUMENT)]
    return []


def _forbidden(required: str) -> ErrorDetail:
    return policy_error(f"operation requires role {required}", code=codes.FORBIDDEN)
