"""Resolve which students' entries a reviewer may see and act on."""

from __future__ import annotations

from packages.logbook_shared.identity import Actor, ActorRole
from packages.logbook_shared.logging import get_logger
from services.action.review_workflow.domain import ReviewScope
from services.action.review_workflow.interfaces import AssignmentRepository

_LOGGER = get_logger(__name__)

UNRESTRICTED_SCOPE = ReviewScope(unrestricted=True)
EMPTY_SCOPE = ReviewScope()


class ReviewScopeResolver:
    """Derive a ``ReviewScope`` from assignment reference data.

    HOD sees every student. FACULTY sees the current members of each batch
    assigned to them, plus directly assigned students when
    ``include_direct_assignments`` is set. Students have no review scope.
    """

    def __init__(
        self,
        *,
        assignments: AssignmentRepository,
        include_direct_assignments: bool = False,
    ) -> None:
        self._assignments = assignments
        self._include_direct_assignments = include_direct_assignments

    def resolve(self, actor: Actor) -> ReviewScope:
        if actor.role == ActorRole.HOD:
            return UNRESTRICTED_SCOPE
        if actor.role != ActorRole.FACULTY:
            return EMPTY_SCOPE

        student_ids: frozenset[str] = frozenset()
        batch_ids = self._assignments.faculty_batch_ids(faculty_id=actor.actor_id)
        if batch_ids:
            student_ids = self._assignments.batch_student_ids(batch_ids=batch_ids)
        if self._include_direct_assignments:
            student_ids = student_ids | self._assignments.faculty_student_ids(
                faculty_id=actor.actor_id
            )

        _LOGGER.debug(
            "Resolved review scope for faculty %s: %d batch(es), %d student(s)",
            actor.actor_id,
            len(batch_ids),
            len(student_ids),
        )
        return ReviewScope(student_ids=student_ids)
