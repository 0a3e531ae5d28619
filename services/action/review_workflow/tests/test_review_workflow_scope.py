"""Tests for reviewer scope resolution over assignment reference data."""

from __future__ import annotations

from packages.logbook_shared.identity import Actor, ActorRole
from services.action.review_workflow.data import InMemoryAssignmentRepository
from services.action.review_workflow.scope import ReviewScopeResolver

FACULTY = Actor(actor_id="fac-1", role=ActorRole.FACULTY)


def _assignments() -> InMemoryAssignmentRepository:
    assignments = InMemoryAssignmentRepository()
    assignments.assign_faculty_to_batch(faculty_id="fac-1", batch_id="2024")
    assignments.assign_faculty_to_batch(faculty_id="fac-1", batch_id="2025")
    assignments.add_student_to_batch(student_id="stu-a", batch_id="2024")
    assignments.add_student_to_batch(student_id="stu-b", batch_id="2025")
    assignments.add_student_to_batch(student_id="stu-c", batch_id="2026")
    assignments.assign_student_to_faculty(faculty_id="fac-1", student_id="stu-d", semester=3)
    return assignments


def test_hod_scope_is_unrestricted() -> None:
    scope = ReviewScopeResolver(assignments=_assignments()).resolve(
        Actor(actor_id="hod-1", role=ActorRole.HOD)
    )

    assert scope.unrestricted
    assert scope.contains("anyone")
    assert scope.owner_filter() is None


def test_faculty_scope_is_union_of_assigned_batches() -> None:
    scope = ReviewScopeResolver(assignments=_assignments()).resolve(FACULTY)

    assert scope.student_ids == {"stu-a", "stu-b"}
    assert not scope.contains("stu-c")
    assert not scope.contains("stu-d")


def test_direct_assignments_join_scope_when_enabled() -> None:
    scope = ReviewScopeResolver(
        assignments=_assignments(), include_direct_assignments=True
    ).resolve(FACULTY)

    assert scope.student_ids == {"stu-a", "stu-b", "stu-d"}


def test_faculty_without_assignments_has_empty_scope() -> None:
    scope = ReviewScopeResolver(assignments=_assignments()).resolve(
        Actor(actor_id="fac-9", role=ActorRole.FACULTY)
    )

    assert scope.is_empty
    assert scope.owner_filter() == frozenset()


def test_student_moving_batch_leaves_previous_scope() -> None:
    assignments = _assignments()
    assignments.add_student_to_batch(student_id="stu-a", batch_id="2026")

    scope = ReviewScopeResolver(assignments=assignments).resolve(FACULTY)

    assert scope.student_ids == {"stu-b"}


def test_student_has_no_review_scope() -> None:
    scope = ReviewScopeResolver(assignments=_assignments()).resolve(
        Actor(actor_id="stu-a", role=ActorRole.STUDENT)
    )

    assert scope.is_empty
