"""Generic error codes shared by every logbook component.

Workflow outcomes (``NOT_FOUND_OR_UNAUTHORIZED``, ``INVALID_STATE_TRANSITION``
and friends) are ``ErrorKind`` values owned by the review workflow service;
the codes here cover argument, storage and infrastructure failures.
"""

VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"

NOT_FOUND = "NOT_FOUND"

# Integrity violations normalized by the Postgres substrate.
CONFLICT = "CONFLICT"
ALREADY_EXISTS = "ALREADY_EXISTS"

POLICY_VIOLATION = "POLICY_VIOLATION"
FORBIDDEN = "FORBIDDEN"

DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"

INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
