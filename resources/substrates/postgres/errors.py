"""Map SQLAlchemy/psycopg failures onto the shared error taxonomy.

Services let store exceptions propagate; outer layers that want a structured
error instead call ``normalize_postgres_error``.
"""

from __future__ import annotations

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
)

from packages.logbook_shared.errors import (
    ErrorDetail,
    codes,
    conflict_error,
    dependency_error,
    internal_error,
)

_UNIQUE_VIOLATION_SQLSTATE = "23505"


def normalize_postgres_error(exc: Exception) -> ErrorDetail:
    """Return the shared ``ErrorDetail`` for one database exception."""
    metadata = {"exception_type": type(exc).__name__}

    if isinstance(exc, IntegrityError):
        if _sqlstate(exc) == _UNIQUE_VIOLATION_SQLSTATE:
            return conflict_error(
                "resource already exists",
                code=codes.ALREADY_EXISTS,
                metadata=metadata,
            )
        return conflict_error("integrity constraint violated", metadata=metadata)

    if isinstance(exc, OperationalError) or isinstance(exc, TimeoutError):
        return dependency_error(
            "postgres unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            retryable=True,
            metadata=metadata,
        )

    if isinstance(exc, (InterfaceError, ProgrammingError)):
        return dependency_error(
            "postgres request failed",
            code=codes.DEPENDENCY_FAILURE,
            retryable=False,
            metadata=metadata,
        )

    return internal_error(
        "unexpected postgres failure",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )


def _sqlstate(exc: DBAPIError) -> str | None:
    return getattr(exc.orig, "sqlstate", None)
