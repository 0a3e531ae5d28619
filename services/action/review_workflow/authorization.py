"""Authorization predicates applied before lifecycle checks.

Owner operations compare the caller to the entry owner directly; reviewer
operations test the entry owner against the caller's resolved scope. Both
failures surface as the same not-found error so callers cannot probe for ids.
"""

from __future__ import annotations

from packages.logbook_shared.identity import Actor, ActorRole
from services.action.review_workflow.domain import Entry, ReviewScope
from services.action.review_workflow.errors import (
    NotFoundOrUnauthorizedError,
    RoleNotPermittedError,
)


OWNER_ROLES: frozenset[ActorRole] = frozenset({ActorRole.STUDENT})


def is_owner(actor: Actor, entry: Entry) -> bool:
    return entry.owner_id == actor.actor_id


def in_review_scope(scope: ReviewScope, entry: Entry) -> bool:
    return scope.contains(entry.owner_id)


def require_role(actor: Actor, allowed: frozenset[ActorRole]) -> None:
    if actor.role not in allowed:
        names = " or ".join(sorted(role.value for role in allowed))
        raise RoleNotPermittedError(f"operation requires role {names}")


def require_owned(actor: Actor, entry: Entry | None) -> Entry:
    """Return ``entry`` when ``actor`` owns it."""
    if entry is None or not is_owner(actor, entry):
        raise NotFoundOrUnauthorizedError()
    return entry


def require_in_scope(scope: ReviewScope, entry: Entry | None) -> Entry:
    """Return ``entry`` when its owner lies inside ``scope``."""
    if entry is None or not in_review_scope(scope, entry):
        raise NotFoundOrUnauthorizedError()
    return entry
