"""Workflow exceptions and their mapping onto envelope errors.

Operations raise these internally; the public API converts them into one
``ErrorDetail`` whose ``code`` is the ``ErrorKind`` value.
"""

from __future__ import annotations

from packages.logbook_shared.errors import (
    ErrorDetail,
    conflict_error,
    not_found_error,
    policy_error,
    validation_error,
)
from services.action.review_workflow.domain import ErrorKind


class WorkflowError(Exception):
    """Base class for expected workflow failures."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundOrUnauthorizedError(WorkflowError):
    """Entry is absent, or the caller may not act on it."""

    kind = ErrorKind.NOT_FOUND_OR_UNAUTHORIZED

    def __init__(self, message: str = "Entry not found or unauthorized") -> None:
        super().__init__(message)


class InvalidStateTransitionError(WorkflowError):
    kind = ErrorKind.INVALID_STATE_TRANSITION


class WorkflowValidationError(WorkflowError):
    kind = ErrorKind.VALIDATION_ERROR


class EmptyBulkSelectionError(WorkflowError):
    kind = ErrorKind.EMPTY_BULK_SELECTION

    def __init__(self, message: str = "No valid entries to sign") -> None:
        super().__init__(message)


class RoleNotPermittedError(WorkflowError):
    kind = ErrorKind.FORBIDDEN


def to_error_detail(exc: WorkflowError) -> ErrorDetail:
    """Return the envelope error for one workflow exception."""
    code = exc.kind.value
    if isinstance(exc, NotFoundOrUnauthorizedError):
        return not_found_error(exc.message, code=code)
    if isinstance(exc, InvalidStateTransitionError):
        return conflict_error(exc.message, code=code)
    if isinstance(exc, RoleNotPermittedError):
        return policy_error(exc.message, code=code)
    return validation_error(exc.message, code=code)
