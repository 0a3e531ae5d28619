"""Caller identity as seen by logbook services.

Authentication and banning happen at the outer boundary; services receive an
already-resolved ``Actor`` and only apply role gates plus their own ownership
or scope checks.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ActorRole(str, Enum):
    """Roles recognised by the review workflow."""

    STUDENT = "STUDENT"
    FACULTY = "FACULTY"
    HOD = "HOD"


REVIEWER_ROLES: frozenset[ActorRole] = frozenset({ActorRole.FACULTY, ActorRole.HOD})


class Actor(BaseModel):
    """Authenticated caller: user id plus resolved role."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    actor_id: str = Field(min_length=1)
    role: ActorRole

    @property
    def is_reviewer(self) -> bool:
        return self.role in REVIEWER_ROLES
