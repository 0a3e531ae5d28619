"""Domain contracts for Auto-Review Policy Service payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AutoReviewSetting(BaseModel):
    """Stored flag for one category; a missing row means disabled."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: str
    enabled: bool
    updated_by: str
    updated_at: datetime


class HealthStatus(BaseModel):
    """Auto-review service and owned dependency readiness status payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    detail: str
