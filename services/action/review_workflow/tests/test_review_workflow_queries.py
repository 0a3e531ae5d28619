"""Tests for owner and reviewer listing operations."""

from __future__ import annotations

from packages.logbook_shared.envelope import EnvelopeKind, new_meta
from packages.logbook_shared.identity import Actor, ActorRole
from services.action.review_workflow.config import (
    CategorySettings,
    ReviewWorkflowSettings,
)
from services.action.review_workflow.data import (
    InMemoryAssignmentRepository,
    InMemoryReviewWorkflowRepository,
)
from services.action.review_workflow.domain import EntryStatus
from services.action.review_workflow.implementation import (
    DefaultReviewWorkflowService,
)

STUDENT = Actor(actor_id="stu-1", role=ActorRole.STUDENT)
OUTSIDER = Actor(actor_id="stu-9", role=ActorRole.STUDENT)
FACULTY = Actor(actor_id="fac-1", role=ActorRole.FACULTY)
HOD = Actor(actor_id="hod-1", role=ActorRole.HOD)


class _NeverAutoReview:
    def is_enabled(self, *, meta: object, category: str) -> bool:
        del meta, category
        return False


def _meta():
    return new_meta(kind=EnvelopeKind.QUERY, source="test", principal="operator")


def _service() -> DefaultReviewWorkflowService:
    assignments = InMemoryAssignmentRepository()
    assignments.assign_faculty_to_batch(faculty_id="fac-1", batch_id="b1")
    assignments.add_student_to_batch(student_id="stu-1", batch_id="b1")
    return DefaultReviewWorkflowService(
        settings=ReviewWorkflowSettings(
            categories=(
                CategorySettings(key="caseManagement", entity_type="CaseManagementLog"),
                CategorySettings(key="conferences", entity_type="ConferenceParticipation"),
                CategorySettings(key="thesis", entity_type="Thesis"),
            )
        ),
        entries=InMemoryReviewWorkflowRepository(),
        assignments=assignments,
        auto_review=_NeverAutoReview(),
    )


def _create(service, actor: Actor, category: str, *, submit: bool = False) -> str:
    result = service.create_entry(meta=_meta(), actor=actor, category=category)
    entry_id = result.payload.value.entry.id
    if submit:
        assert service.submit_entry(meta=_meta(), actor=actor, entry_id=entry_id).ok
    return entry_id


def test_review_queue_for_faculty_without_assignments_is_empty_list() -> None:
    service = _service()
    _create(service, STUDENT, "thesis", submit=True)

    result = service.list_review_queue(
        meta=_meta(), actor=Actor(actor_id="fac-2", role=ActorRole.FACULTY)
    )

    assert result.ok
    assert result.payload is not None
    assert result.payload.value == []


def test_review_queue_excludes_drafts_and_out_of_scope_owners() -> None:
    service = _service()
    _create(service, STUDENT, "thesis")
    older = _create(service, STUDENT, "thesis", submit=True)
    newer = _create(service, STUDENT, "conferences", submit=True)
    _create(service, OUTSIDER, "thesis", submit=True)

    result = service.list_review_queue(meta=_meta(), actor=FACULTY)

    assert [entry.id for entry in result.payload.value] == [newer, older]


def test_review_queue_category_filter() -> None:
    service = _service()
    _create(service, STUDENT, "thesis", submit=True)
    conference = _create(service, STUDENT, "conferences", submit=True)

    result = service.list_review_queue(
        meta=_meta(), actor=FACULTY, category="conferences"
    )

    assert [entry.id for entry in result.payload.value] == [conference]


def test_hod_review_queue_spans_all_students() -> None:
    service = _service()
    _create(service, STUDENT, "thesis", submit=True)
    _create(service, OUTSIDER, "thesis", submit=True)

    result = service.list_review_queue(meta=_meta(), actor=HOD)

    assert {entry.owner_id for entry in result.payload.value} == {"stu-1", "stu-9"}


def test_bulk_sign_candidates_only_include_submitted() -> None:
    service = _service()
    pending = _create(service, STUDENT, "thesis", submit=True)
    rejected = _create(service, STUDENT, "thesis", submit=True)
    service.reject_entry(meta=_meta(), actor=FACULTY, entry_id=rejected, remark="redo")

    result = service.list_bulk_sign_candidates(meta=_meta(), actor=FACULTY)

    assert [entry.id for entry in result.payload.value] == [pending]


def test_list_my_entries_is_ordered_by_sequence() -> None:
    service = _service()
    ids = [_create(service, STUDENT, "caseManagement") for _ in range(3)]
    _create(service, OUTSIDER, "caseManagement")

    result = service.list_my_entries(meta=_meta(), actor=STUDENT, category="caseManagement")

    assert [entry.id for entry in result.payload.value] == ids
    assert [entry.sequence_no for entry in result.payload.value] == [1, 2, 3]


def test_summarize_my_entries_counts_by_status_group() -> None:
    service = _service()
    _create(service, STUDENT, "thesis")
    signed = _create(service, STUDENT, "thesis", submit=True)
    rejected = _create(service, STUDENT, "conferences", submit=True)
    service.sign_entry(meta=_meta(), actor=FACULTY, entry_id=signed)
    service.reject_entry(meta=_meta(), actor=FACULTY, entry_id=rejected, remark="x")

    summary = service.summarize_my_entries(meta=_meta(), actor=STUDENT).payload.value

    assert summary.total_by_category == {"thesis": 2, "conferences": 1}
    assert summary.submitted_by_category == {"thesis": 1, "conferences": 1}
    assert summary.signed_by_category == {"thesis": 1}
    assert summary.needs_revision_by_category == {"conferences": 1}


def test_student_drill_down_excludes_drafts_and_orders_by_category() -> None:
    service = _service()
    thesis = _create(service, STUDENT, "thesis", submit=True)
    _create(service, STUDENT, "thesis")
    case_one = _create(service, STUDENT, "caseManagement", submit=True)
    case_two = _create(service, STUDENT, "caseManagement", submit=True)

    result = service.list_student_entries(meta=_meta(), actor=FACULTY, student_id="stu-1")

    assert [entry.id for entry in result.payload.value] == [case_one, case_two, thesis]
    assert all(entry.status != EntryStatus.DRAFT for entry in result.payload.value)


def test_student_drill_down_ignores_surrounding_whitespace_in_student_id() -> None:
    service = _service()
    thesis = _create(service, STUDENT, "thesis", submit=True)

    result = service.list_student_entries(
        meta=_meta(), actor=FACULTY, student_id="  stu-1 "
    )

    assert result.ok
    assert [entry.id for entry in result.payload.value] == [thesis]


def test_blank_student_id_is_validation_error() -> None:
    service = _service()

    result = service.list_student_entries(meta=_meta(), actor=FACULTY, student_id="   ")

    assert result.error_code == "VALIDATION_ERROR"


def test_student_drill_down_outside_scope_is_not_found() -> None:
    service = _service()
    _create(service, OUTSIDER, "thesis", submit=True)

    result = service.list_student_entries(meta=_meta(), actor=FACULTY, student_id="stu-9")

    assert result.error_code == "NOT_FOUND_OR_UNAUTHORIZED"


def test_pending_review_counts_cover_every_category() -> None:
    service = _service()
    _create(service, STUDENT, "thesis", submit=True)
    _create(service, STUDENT, "thesis", submit=True)
    _create(service, STUDENT, "conferences")
    _create(service, OUTSIDER, "conferences", submit=True)

    faculty_counts = service.count_pending_reviews(meta=_meta(), actor=FACULTY)
    hod_counts = service.count_pending_reviews(meta=_meta(), actor=HOD)

    assert faculty_counts.payload.value.by_category == {
        "caseManagement": 0,
        "conferences": 0,
        "thesis": 2,
    }
    assert faculty_counts.payload.value.total == 2
    assert hod_counts.payload.value.total == 3


def test_signature_listing_for_owner_and_reviewer() -> None:
    service = _service()
    entry_id = _create(service, STUDENT, "thesis", submit=True)
    service.sign_entry(meta=_meta(), actor=FACULTY, entry_id=entry_id, remark="ok")

    owner_view = service.list_entry_signatures(meta=_meta(), actor=STUDENT, entry_id=entry_id)
    reviewer_view = service.list_entry_signatures(
        meta=_meta(), actor=FACULTY, entry_id=entry_id
    )
    outsider_view = service.list_entry_signatures(
        meta=_meta(), actor=OUTSIDER, entry_id=entry_id
    )

    assert [sig.signer_id for sig in owner_view.payload.value] == ["fac-1"]
    assert owner_view.payload.value == reviewer_view.payload.value
    assert outsider_view.error_code == "NOT_FOUND_OR_UNAUTHORIZED"


def test_health_reports_row_counters() -> None:
    service = _service()
    entry_id = _create(service, STUDENT, "thesis", submit=True)
    service.sign_entry(meta=_meta(), actor=HOD, entry_id=entry_id)

    status = service.health(meta=_meta()).payload.value

    assert status.service_ready and status.substrate_ready
    assert (status.entry_count, status.signature_count) == (1, 1)


def test_reviewer_queries_require_reviewer_role() -> None:
    service = _service()

    result = service.count_pending_reviews(meta=_meta(), actor=STUDENT)

    assert result.error_code == "FORBIDDEN"
