"""Concrete Review Workflow Service implementation."""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Iterable, Sequence, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from packages.logbook_shared.config import LogbookSettings
from packages.logbook_shared.envelope import (
    Envelope,
    EnvelopeMeta,
    failure,
    success,
    validate_meta,
)
from packages.logbook_shared.errors import ErrorDetail, codes, validation_error
from packages.logbook_shared.identity import Actor, ActorRole, REVIEWER_ROLES
from packages.logbook_shared.invalidation import (
    LoggingViewInvalidationSink,
    ViewInvalidationSink,
    ordered_views,
)
from packages.logbook_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_instrumented,
)
from services.action.auto_review.service import AutoReviewService
from services.action.review_workflow.authorization import (
    OWNER_ROLES,
    require_in_scope,
    require_owned,
    require_role,
)
from services.action.review_workflow.component import SERVICE_COMPONENT_ID
from services.action.review_workflow.config import (
    CategorySettings,
    ReviewWorkflowSettings,
    resolve_review_workflow_settings,
)
from services.action.review_workflow.data import (
    PostgresAssignmentRepository,
    PostgresReviewWorkflowRepository,
    ReviewWorkflowPostgresRuntime,
)
from services.action.review_workflow.domain import (
    AUTO_REVIEW_REMARK,
    AUTO_REVIEW_SIGNER_ID,
    DigitalSignature,
    Entry,
    EntryChanges,
    EntryQuery,
    EntryStatus,
    ErrorKind,
    HealthStatus,
    OwnerEntrySummary,
    PendingReviewCounts,
    SignatureDraft,
    WorkflowResult,
)
from services.action.review_workflow.errors import (
    EmptyBulkSelectionError,
    InvalidStateTransitionError,
    NotFoundOrUnauthorizedError,
    WorkflowError,
    WorkflowValidationError,
    to_error_detail,
)
from services.action.review_workflow.interfaces import (
    AssignmentRepository,
    AutoReviewPolicy,
    EntryRepository,
    PayloadValidator,
    SignatureFactory,
)
from services.action.review_workflow.lifecycle import (
    WorkflowOperation,
    require_source,
    transition_for,
)
from services.action.review_workflow.policy import AutoReviewServicePolicy
from services.action.review_workflow.scope import ReviewScopeResolver
from services.action.review_workflow.service import ReviewWorkflowService
from services.action.review_workflow.validation import (
    BulkSignRequest,
    CategoryRequest,
    CreateEntryRequest,
    EditEntryRequest,
    EntryIdRequest,
    JsonPayloadValidator,
    OptionalCategoryRequest,
    RejectRequest,
    SignRequest,
    StudentEntriesRequest,
)

_LOGGER = get_logger(__name__)
_COMPONENT_ID = str(SERVICE_COMPONENT_ID)
_ALL_ROLES: frozenset[ActorRole] = frozenset(ActorRole)
_REVIEWED_STATUSES = frozenset(
    {EntryStatus.SUBMITTED, EntryStatus.SIGNED, EntryStatus.NEEDS_REVISION}
)

T = TypeVar("T")
R = TypeVar("R", bound=BaseModel)


class DefaultReviewWorkflowService(ReviewWorkflowService):
    """Workflow engine over injected entry, assignment and policy collaborators."""

    def __init__(
        self,
        *,
        settings: ReviewWorkflowSettings,
        entries: EntryRepository,
        assignments: AssignmentRepository,
        auto_review: AutoReviewPolicy,
        payload_validator: PayloadValidator | None = None,
        invalidation_sink: ViewInvalidationSink | None = None,
    ) -> None:
        self._settings = settings
        self._entries = entries
        self._scopes = ReviewScopeResolver(
            assignments=assignments,
            include_direct_assignments=settings.include_direct_student_assignments,
        )
        self._auto_review = auto_review
        self._payload_validator = payload_validator or JsonPayloadValidator()
        self._invalidation_sink = invalidation_sink or LoggingViewInvalidationSink()

    @classmethod
    def from_settings(
        cls,
        settings: LogbookSettings,
        *,
        auto_review: AutoReviewService,
        invalidation_sink: ViewInvalidationSink | None = None,
    ) -> "DefaultReviewWorkflowService":
        """Build the engine with schema-scoped Postgres repositories."""
        runtime = ReviewWorkflowPostgresRuntime.from_settings(settings)
        return cls(
            settings=resolve_review_workflow_settings(settings),
            entries=PostgresReviewWorkflowRepository(runtime.schema_sessions),
            assignments=PostgresAssignmentRepository(runtime.schema_sessions),
            auto_review=AutoReviewServicePolicy(auto_review),
            invalidation_sink=invalidation_sink,
        )

    # Owner operations

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("category",)
    )
    def create_entry(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        category: str,
        payload: dict[str, Any] | None = None,
    ) -> Envelope[WorkflowResult]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=OWNER_ROLES,
            model=CreateEntryRequest,
            payload={"category": category, "payload": payload or {}},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, CreateEntryRequest)

        def create() -> WorkflowResult:
            settings = self._require_category(request.category)
            entry = self._entries.create_entry(
                owner_id=actor.actor_id,
                category=settings.key,
                payload=self._validate_payload(settings.key, request.payload),
            )
            _log_transition(entry, source=None)
            self._invalidate(entry.category)
            return WorkflowResult(entry=entry)

        return self._run(meta, create)

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("entry_id",)
    )
    def edit_entry(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        entry_id: str,
        payload: dict[str, Any],
    ) -> Envelope[WorkflowResult]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=OWNER_ROLES,
            model=EditEntryRequest,
            payload={"entry_id": entry_id, "payload": payload},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, EditEntryRequest)

        def edit() -> WorkflowResult:
            entry = require_owned(actor, self._entries.get_entry(entry_id=request.entry_id))
            transition = transition_for(WorkflowOperation.EDIT)
            require_source(WorkflowOperation.EDIT, transition, entry.status)
            updated = self._entries.transition_entry(
                entry_id=entry.id,
                expected=transition.sources,
                target=EntryStatus.DRAFT,
                changes=EntryChanges(
                    payload=self._validate_payload(entry.category, request.payload)
                ),
            )
            if updated is None:
                raise _lost_race(WorkflowOperation.EDIT)
            _log_transition(updated, source=entry.status)
            self._invalidate(updated.category)
            return WorkflowResult(entry=updated)

        return self._run(meta, edit)

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("entry_id",)
    )
    def delete_entry(
        self, *, meta: EnvelopeMeta, actor: Actor, entry_id: str
    ) -> Envelope[WorkflowResult]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=OWNER_ROLES,
            model=EntryIdRequest,
            payload={"entry_id": entry_id},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, EntryIdRequest)

        def delete() -> WorkflowResult:
            entry = require_owned(actor, self._entries.get_entry(entry_id=request.entry_id))
            transition = transition_for(
                WorkflowOperation.DELETE,
                allow_delete_needs_revision=self._settings.allow_delete_needs_revision,
            )
            require_source(WorkflowOperation.DELETE, transition, entry.status)
            deleted = self._entries.delete_entry(
                entry_id=entry.id,
                owner_id=actor.actor_id,
                deletable=transition.sources,
            )
            if not deleted:
                raise _lost_race(WorkflowOperation.DELETE)
            with log_context(
                {fields.ENTRY_ID: entry.id, fields.CATEGORY: entry.category}
            ):
                _LOGGER.info("Entry deleted")
            self._invalidate(entry.category)
            return WorkflowResult(entry=entry)

        return self._run(meta, delete)

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("entry_id",)
    )
    def submit_entry(
        self, *, meta: EnvelopeMeta, actor: Actor, entry_id: str
    ) -> Envelope[WorkflowResult]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=OWNER_ROLES,
            model=EntryIdRequest,
            payload={"entry_id": entry_id},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, EntryIdRequest)

        def submit() -> WorkflowResult:
            entry = require_owned(actor, self._entries.get_entry(entry_id=request.entry_id))
            auto_review = self._auto_review.is_enabled(meta=meta, category=entry.category)
            operation = (
                WorkflowOperation.SUBMIT_AUTO_REVIEW
                if auto_review
                else WorkflowOperation.SUBMIT
            )
            transition = transition_for(operation)
            require_source(operation, transition, entry.status)
            assert transition.target is not None

            signature: SignatureFactory | None = None
            if transition.writes_signature:
                signature = self._signature_factory(
                    signer_id=AUTO_REVIEW_SIGNER_ID, remark=AUTO_REVIEW_REMARK
                )
            updated = self._entries.transition_entry(
                entry_id=entry.id,
                expected=transition.sources,
                target=transition.target,
                signature=signature,
            )
            if updated is None:
                raise _lost_race(operation)
            _log_transition(updated, source=entry.status)
            self._invalidate(updated.category)
            return WorkflowResult(entry=updated)

        return self._run(meta, submit)

    # Reviewer operations

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("entry_id",)
    )
    def sign_entry(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        entry_id: str,
        remark: str | None = None,
    ) -> Envelope[WorkflowResult]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=REVIEWER_ROLES,
            model=SignRequest,
            payload={"entry_id": entry_id, "remark": remark},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, SignRequest)

        def sign() -> WorkflowResult:
            entry = require_in_scope(
                self._scopes.resolve(actor),
                self._entries.get_entry(entry_id=request.entry_id),
            )
            transition = transition_for(WorkflowOperation.SIGN)
            require_source(WorkflowOperation.SIGN, transition, entry.status)
            updated = self._entries.transition_entry(
                entry_id=entry.id,
                expected=transition.sources,
                target=EntryStatus.SIGNED,
                changes=EntryChanges(reviewer_remark=request.remark),
                signature=self._signature_factory(
                    signer_id=actor.actor_id, remark=request.remark
                ),
            )
            if updated is None:
                raise _lost_race(WorkflowOperation.SIGN)
            _log_transition(updated, source=entry.status)
            self._invalidate(updated.category)
            return WorkflowResult(entry=updated, signed_count=1)

        return self._run(meta, sign)

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("entry_id",)
    )
    def reject_entry(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        entry_id: str,
        remark: str,
    ) -> Envelope[WorkflowResult]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=REVIEWER_ROLES,
            model=RejectRequest,
            payload={"entry_id": entry_id, "remark": remark},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, RejectRequest)

        def reject() -> WorkflowResult:
            entry = require_in_scope(
                self._scopes.resolve(actor),
                self._entries.get_entry(entry_id=request.entry_id),
            )
            transition = transition_for(WorkflowOperation.REJECT)
            require_source(WorkflowOperation.REJECT, transition, entry.status)
            updated = self._entries.transition_entry(
                entry_id=entry.id,
                expected=transition.sources,
                target=EntryStatus.NEEDS_REVISION,
                changes=EntryChanges(reviewer_remark=request.remark),
            )
            if updated is None:
                raise _lost_race(WorkflowOperation.REJECT)
            _log_transition(updated, source=entry.status)
            self._invalidate(updated.category)
            return WorkflowResult(entry=updated)

        return self._run(meta, reject)

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("category",)
    )
    def bulk_sign(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        entry_ids: Sequence[str],
        category: str | None = None,
    ) -> Envelope[WorkflowResult]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=REVIEWER_ROLES,
            model=BulkSignRequest,
            payload={"entry_ids": tuple(entry_ids), "category": category},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, BulkSignRequest)

        def sign_all() -> WorkflowResult:
            if len(request.entry_ids) > self._settings.max_bulk_sign_ids:
                raise WorkflowValidationError(
                    f"bulk sign accepts at most {self._settings.max_bulk_sign_ids} entries"
                )
            if request.category is not None:
                self._require_category(request.category)
            scope = self._scopes.resolve(actor)
            if scope.is_empty:
                raise EmptyBulkSelectionError()

            transition = transition_for(WorkflowOperation.BULK_SIGN)
            assert transition.target is not None
            signed = self._entries.transition_entries(
                entry_ids=request.entry_ids,
                expected=transition.sources,
                target=transition.target,
                owner_ids=scope.owner_filter(),
                category=request.category,
                signature=self._signature_factory(signer_id=actor.actor_id, remark=None),
            )
            if not signed:
                raise EmptyBulkSelectionError()

            with log_context(
                {fields.SIGNED_COUNT: len(signed), fields.ACTOR_ID: actor.actor_id}
            ):
                _LOGGER.info(
                    "Bulk signed %d of %d requested entries",
                    len(signed),
                    len(request.entry_ids),
                )
            self._invalidate(*sorted({entry.category for entry in signed}))
            return WorkflowResult(
                signed_count=len(signed),
                signed_entry_ids=tuple(entry.id for entry in signed),
            )

        return self._run(meta, sign_all)

    # Queries

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("category",)
    )
    def list_my_entries(
        self, *, meta: EnvelopeMeta, actor: Actor, category: str
    ) -> Envelope[list[Entry]]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=OWNER_ROLES,
            model=CategoryRequest,
            payload={"category": category},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, CategoryRequest)

        def list_mine() -> list[Entry]:
            key = self._require_category(request.category).key
            return self._entries.list_entries(
                query=EntryQuery(
                    owner_ids=frozenset({actor.actor_id}),
                    category=key,
                    order="sequence",
                )
            )

        return self._run(meta, list_mine)

    @public_api_instrumented(logger=_LOGGER, component_id=_COMPONENT_ID)
    def summarize_my_entries(
        self, *, meta: EnvelopeMeta, actor: Actor
    ) -> Envelope[OwnerEntrySummary]:
        _, errors = self._prepare(meta=meta, actor=actor, roles=OWNER_ROLES)
        if errors:
            return failure(meta=meta, errors=errors)

        def summarize() -> OwnerEntrySummary:
            entries = self._entries.list_entries(
                query=EntryQuery(owner_ids=frozenset({actor.actor_id}))
            )
            return OwnerEntrySummary(
                total_by_category=_count_by_category(entries),
                submitted_by_category=_count_by_category(
                    e for e in entries if e.status in _REVIEWED_STATUSES
                ),
                signed_by_category=_count_by_category(
                    e for e in entries if e.status == EntryStatus.SIGNED
                ),
                needs_revision_by_category=_count_by_category(
                    e for e in entries if e.status == EntryStatus.NEEDS_REVISION
                ),
            )

        return self._run(meta, summarize)

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("category",)
    )
    def list_review_queue(
        self, *, meta: EnvelopeMeta, actor: Actor, category: str | None = None
    ) -> Envelope[list[Entry]]:
        return self._list_in_scope(
            meta=meta,
            actor=actor,
            category=category,
            statuses=None,
            exclude_statuses=frozenset({EntryStatus.DRAFT}),
        )

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("category",)
    )
    def list_bulk_sign_candidates(
        self, *, meta: EnvelopeMeta, actor: Actor, category: str | None = None
    ) -> Envelope[list[Entry]]:
        return self._list_in_scope(
            meta=meta,
            actor=actor,
            category=category,
            statuses=frozenset({EntryStatus.SUBMITTED}),
            exclude_statuses=frozenset(),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=_COMPONENT_ID,
        id_fields=("student_id", "category"),
    )
    def list_student_entries(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        student_id: str,
        category: str | None = None,
    ) -> Envelope[list[Entry]]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=REVIEWER_ROLES,
            model=StudentEntriesRequest,
            payload={"student_id": student_id, "category": category},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, StudentEntriesRequest)

        def list_student() -> list[Entry]:
            if request.category is not None:
                self._require_category(request.category)
            if not self._scopes.resolve(actor).contains(request.student_id):
                raise NotFoundOrUnauthorizedError("Student not found or unauthorized")
            return self._entries.list_entries(
                query=EntryQuery(
                    owner_ids=frozenset({request.student_id}),
                    category=request.category,
                    exclude_statuses=frozenset({EntryStatus.DRAFT}),
                    order="category_sequence",
                )
            )

        return self._run(meta, list_student)

    @public_api_instrumented(logger=_LOGGER, component_id=_COMPONENT_ID)
    def count_pending_reviews(
        self, *, meta: EnvelopeMeta, actor: Actor
    ) -> Envelope[PendingReviewCounts]:
        _, errors = self._prepare(meta=meta, actor=actor, roles=REVIEWER_ROLES)
        if errors:
            return failure(meta=meta, errors=errors)

        def count() -> PendingReviewCounts:
            by_category = {category.key: 0 for category in self._settings.categories}
            scope = self._scopes.resolve(actor)
            if not scope.is_empty:
                pending = self._entries.list_entries(
                    query=EntryQuery(
                        owner_ids=scope.owner_filter(),
                        statuses=frozenset({EntryStatus.SUBMITTED}),
                    )
                )
                by_category.update(_count_by_category(pending))
            return PendingReviewCounts(
                by_category=by_category, total=sum(by_category.values())
            )

        return self._run(meta, count)

    @public_api_instrumented(
        logger=_LOGGER, component_id=_COMPONENT_ID, id_fields=("entry_id",)
    )
    def list_entry_signatures(
        self, *, meta: EnvelopeMeta, actor: Actor, entry_id: str
    ) -> Envelope[list[DigitalSignature]]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=_ALL_ROLES,
            model=EntryIdRequest,
            payload={"entry_id": entry_id},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, EntryIdRequest)

        def list_signatures() -> list[DigitalSignature]:
            entry = self._entries.get_entry(entry_id=request.entry_id)
            if actor.is_reviewer:
                entry = require_in_scope(self._scopes.resolve(actor), entry)
            else:
                entry = require_owned(actor, entry)
            return self._entries.list_signatures(entry_id=entry.id)

        return self._run(meta, list_signatures)

    @public_api_instrumented(logger=_LOGGER, component_id=_COMPONENT_ID)
    def health(self, *, meta: EnvelopeMeta) -> Envelope[HealthStatus]:
        errors = _meta_errors(meta)
        if errors:
            return failure(meta=meta, errors=errors)
        try:
            entry_count = self._entries.count_entries()
            signature_count = self._entries.count_signatures()
        except SQLAlchemyError as exc:
            return success(
                meta=meta,
                payload=HealthStatus(
                    service_ready=True,
                    substrate_ready=False,
                    detail=f"entry store unavailable: {type(exc).__name__}",
                ),
            )
        return success(
            meta=meta,
            payload=HealthStatus(
                service_ready=True,
                substrate_ready=True,
                detail="ok",
                entry_count=entry_count,
                signature_count=signature_count,
            ),
        )

    # Internals

    def _list_in_scope(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        category: str | None,
        statuses: frozenset[EntryStatus] | None,
        exclude_statuses: frozenset[EntryStatus],
    ) -> Envelope[list[Entry]]:
        request, errors = self._prepare(
            meta=meta,
            actor=actor,
            roles=REVIEWER_ROLES,
            model=OptionalCategoryRequest,
            payload={"category": category},
        )
        if errors:
            return failure(meta=meta, errors=errors)
        assert isinstance(request, OptionalCategoryRequest)

        def list_scoped() -> list[Entry]:
            if request.category is not None:
                self._require_category(request.category)
            scope = self._scopes.resolve(actor)
            if scope.is_empty:
                return []
            return self._entries.list_entries(
                query=EntryQuery(
                    owner_ids=scope.owner_filter(),
                    category=request.category,
                    statuses=statuses,
                    exclude_statuses=exclude_statuses,
                    order="newest",
                )
            )

        return self._run(meta, list_scoped)

    def _prepare(
        self,
        *,
        meta: EnvelopeMeta,
        actor: Actor,
        roles: frozenset[ActorRole],
        model: type[R] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> tuple[R | None, list[ErrorDetail]]:
        """Validate metadata, then the caller's role, then the request shape."""
        errors = _meta_errors(meta)
        if errors:
            return None, errors
        try:
            require_role(actor, roles)
        except WorkflowError as exc:
            return None, [to_error_detail(exc)]
        if model is None:
            return None, []

        try:
            request = model.model_validate(payload or {})
        except ValidationError as exc:
            return None, [
                validation_error(
                    f"request validation failed: {err['msg']}",
                    code=ErrorKind.VALIDATION_ERROR.value,
                    metadata={"field": ".".join(str(p) for p in err["loc"])},
                )
                for err in exc.errors()
            ]
        return request, []

    def _run(self, meta: EnvelopeMeta, operation: Callable[[], T]) -> Envelope[T]:
        """Execute one operation, mapping workflow failures onto the envelope."""
        try:
            result = operation()
        except WorkflowError as exc:
            _LOGGER.info("Workflow operation refused: %s (%s)", exc.message, exc.kind.value)
            return failure(meta=meta, errors=[to_error_detail(exc)])
        return success(meta=meta, payload=result)

    def _require_category(self, key: str) -> CategorySettings:
        category = self._settings.category(key)
        if category is None:
            raise WorkflowValidationError(f"unknown category '{key}'")
        return category

    def _validate_payload(self, category: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            return self._payload_validator.validate(category=category, payload=payload)
        except ValueError as exc:
            raise WorkflowValidationError(f"invalid {category} payload: {exc}") from exc

    def _signature_factory(self, *, signer_id: str, remark: str | None) -> SignatureFactory:
        def build(entry: Entry) -> SignatureDraft:
            category = self._settings.category(entry.category)
            entity_type = category.entity_type if category is not None else entry.category
            return SignatureDraft(signer_id=signer_id, entity_type=entity_type, remark=remark)

        return build

    def _invalidate(self, *categories: str) -> None:
        """Notify configured views after a committed mutation; failures only log."""
        groups = []
        for key in categories:
            category = self._settings.category(key)
            if category is not None:
                groups.append(category.views)
        views = ordered_views(groups)
        if not views:
            return
        try:
            self._invalidation_sink.invalidate(views=views)
        except Exception:  # noqa: BLE001
            _LOGGER.warning(
                "View invalidation failed for %s", ", ".join(categories), exc_info=True
            )


def _meta_errors(meta: EnvelopeMeta) -> list[ErrorDetail]:
    try:
        validate_meta(meta)
    except ValueError as exc:
        return [validation_error(str(exc), code=codes.INVALID_ARGUMENT)]
    return []


def _lost_race(operation: WorkflowOperation) -> InvalidStateTransitionError:
    return InvalidStateTransitionError(
        f"entry status changed before {operation.value.replace('_', ' ')} could apply"
    )


def _log_transition(entry: Entry, *, source: EntryStatus | None) -> None:
    with log_context(
        {
            fields.ENTRY_ID: entry.id,
            fields.CATEGORY: entry.category,
            fields.FROM_STATUS: source.value if source is not None else None,
            fields.TO_STATUS: entry.status.value,
        }
    ):
        _LOGGER.info("Entry status changed")


def _count_by_category(entries: Iterable[Entry]) -> dict[str, int]:
    return dict(Counter(entry.category for entry in entries))
