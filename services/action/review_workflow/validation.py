"""Pydantic request-validation models for Review Workflow Service API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator

from packages.logbook_shared.ids import is_ulid_str


class _ValidationModel(BaseModel):
    """Base request model with strict shape semantics."""

    model_config = ConfigDict(frozen=True, extra="forbid")


def _normalize_entry_id(value: str) -> str:
    normalized = value.strip().upper()
    if not is_ulid_str(normalized):
        raise ValueError("entry_id must be a ULID")
    return normalized


class CategoryRequest(_ValidationModel):
    category: str = Field(min_length=1)

    @field_validator("category", mode="before")
    @classmethod
    def _strip_category(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class OptionalCategoryRequest(_ValidationModel):
    category: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _blank_is_none(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value


class CreateEntryRequest(CategoryRequest):
    payload: dict[str, JsonValue] = Field(default_factory=dict)


class EntryIdRequest(_ValidationModel):
    entry_id: str

    @field_validator("entry_id")
    @classmethod
    def _validate_entry_id(cls, value: str) -> str:
        return _normalize_entry_id(value)


class EditEntryRequest(EntryIdRequest):
    payload: dict[str, JsonValue]


class SignRequest(EntryIdRequest):
    """Sign request; a blank remark is treated as absent."""

    remark: str | None = None

    @field_validator("remark")
    @classmethod
    def _blank_remark_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class RejectRequest(EntryIdRequest):
    remark: str

    @field_validator("remark")
    @classmethod
    def _require_remark(cls, value: str) -> str:
        normalized = value.strip()
        if normalized == "":
            raise ValueError("remark is required when requesting revision")
        return normalized


class BulkSignRequest(OptionalCategoryRequest):
    entry_ids: tuple[str, ...] = Field(min_length=1)

    @field_validator("entry_ids")
    @classmethod
    def _normalize_entry_ids(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Validate and de-duplicate ids, keeping first-seen order."""
        seen: dict[str, None] = {}
        for item in value:
            seen.setdefault(_normalize_entry_id(item), None)
        return tuple(seen)


class StudentEntriesRequest(OptionalCategoryRequest):
    student_id: str = Field(min_length=1)

    @field_validator("student_id", mode="before")
    @classmethod
    def _strip_student_id(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class JsonPayloadValidator:
    """Accept any JSON object; per-category schemas live with the caller."""

    def validate(self, *, category: str, payload: dict[str, Any]) -> dict[str, Any]:
        del category
        return dict(payload)
