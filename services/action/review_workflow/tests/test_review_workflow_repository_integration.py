"""Real-Postgres integration tests for the review workflow repositories."""

from __future__ import annotations

import pytest

from services.action.review_workflow.data import (
    PostgresAssignmentRepository,
    PostgresReviewWorkflowRepository,
    ReviewWorkflowPostgresRuntime,
)
from services.action.review_workflow.domain import (
    EntryChanges,
    EntryStatus,
    SignatureDraft,
)
from tests.integration.helpers import real_provider_tests_enabled

pytest_plugins = ("tests.integration.fixtures",)

pytestmark = pytest.mark.skipif(
    not real_provider_tests_enabled(),
    reason="set LOGBOOK_RUN_INTEGRATION_REAL=1 to run real-provider integration tests",
)

_SUBMITTED = frozenset({EntryStatus.SUBMITTED})


def _repository(settings) -> PostgresReviewWorkflowRepository:
    runtime = ReviewWorkflowPostgresRuntime.from_settings(settings)
    return PostgresReviewWorkflowRepository(runtime.schema_sessions)


def _sign(entry) -> SignatureDraft:
    del entry
    return SignatureDraft(signer_id="fac-int", entity_type="ProcedureLog")


def _submitted_entry(repository: PostgresReviewWorkflowRepository, owner_id: str):
    entry = repository.create_entry(
        owner_id=owner_id, category="procedureLogs", payload={"site": "OT"}
    )
    moved = repository.transition_entry(
        entry_id=entry.id,
        expected=frozenset({EntryStatus.DRAFT}),
        target=EntryStatus.SUBMITTED,
    )
    assert moved is not None
    return moved


def test_conditional_sign_writes_signature_once(migrated_settings) -> None:
    repository = _repository(migrated_settings)
    entry = _submitted_entry(repository, "stu-int-1")

    first = repository.transition_entry(
        entry_id=entry.id, expected=_SUBMITTED, target=EntryStatus.SIGNED, signature=_sign
    )
    second = repository.transition_entry(
        entry_id=entry.id, expected=_SUBMITTED, target=EntryStatus.SIGNED, signature=_sign
    )

    assert first is not None and first.status == EntryStatus.SIGNED
    assert second is None
    assert len(repository.list_signatures(entry_id=entry.id)) == 1


def test_bulk_transition_skips_rows_not_matching_status(migrated_settings) -> None:
    repository = _repository(migrated_settings)
    submitted = _submitted_entry(repository, "stu-int-2")
    draft = repository.create_entry(owner_id="stu-int-2", category="procedureLogs", payload={})

    moved = repository.transition_entries(
        entry_ids=[submitted.id, draft.id],
        expected=_SUBMITTED,
        target=EntryStatus.SIGNED,
        owner_ids=frozenset({"stu-int-2"}),
        category=None,
        signature=_sign,
    )

    assert [entry.id for entry in moved] == [submitted.id]
    assert repository.list_signatures(entry_id=draft.id) == []


def test_sequence_numbers_increment_per_owner_and_category(migrated_settings) -> None:
    repository = _repository(migrated_settings)

    first = repository.create_entry(owner_id="stu-int-3", category="thesis", payload={})
    second = repository.create_entry(owner_id="stu-int-3", category="thesis", payload={})

    assert second.sequence_no == first.sequence_no + 1


def test_batch_membership_replaces_previous_batch(migrated_settings) -> None:
    runtime = ReviewWorkflowPostgresRuntime.from_settings(migrated_settings)
    assignments = PostgresAssignmentRepository(runtime.schema_sessions)

    assignments.assign_faculty_to_batch(faculty_id="fac-int", batch_id="int-a")
    assignments.add_student_to_batch(student_id="stu-int-4", batch_id="int-a")
    assignments.add_student_to_batch(student_id="stu-int-4", batch_id="int-b")

    assert "int-a" in assignments.faculty_batch_ids(faculty_id="fac-int")
    assert "stu-int-4" not in assignments.batch_student_ids(batch_ids=frozenset({"int-a"}))
    assert "stu-int-4" in assignments.batch_student_ids(batch_ids=frozenset({"int-b"}))


def test_explicit_none_remark_clears_and_omitted_remark_keeps(migrated_settings) -> None:
    repository = _repository(migrated_settings)
    entry = _submitted_entry(repository, "stu-int-5")

    rejected = repository.transition_entry(
        entry_id=entry.id,
        expected=_SUBMITTED,
        target=EntryStatus.NEEDS_REVISION,
        changes=EntryChanges(reviewer_remark="missing date"),
    )
    resubmitted = repository.transition_entry(
        entry_id=entry.id,
        expected=frozenset({EntryStatus.NEEDS_REVISION}),
        target=EntryStatus.SUBMITTED,
    )
    signed = repository.transition_entry(
        entry_id=entry.id,
        expected=_SUBMITTED,
        target=EntryStatus.SIGNED,
        changes=EntryChanges(reviewer_remark=None),
        signature=_sign,
    )

    assert rejected is not None and rejected.reviewer_remark == "missing date"
    assert resubmitted is not None and resubmitted.reviewer_remark == "missing date"
    assert signed is not None and signed.reviewer_remark is None
