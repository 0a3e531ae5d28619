"""Entry, signature and assignment repositories.

The Postgres repositories are authoritative; the in-memory twins keep the
same compare-and-set contract behind one lock and back the unit tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from itertools import count
from threading import RLock
from typing import Any, Mapping

from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from packages.logbook_shared.ids import (
    generate_ulid_bytes,
    generate_ulid_str,
    ulid_bytes_to_str,
    ulid_str_to_bytes,
)
from resources.substrates.postgres.schema_session import ServiceSchemaSessionProvider
from services.action.review_workflow.domain import (
    DigitalSignature,
    Entry,
    EntryChanges,
    EntryQuery,
    EntryStatus,
)
from services.action.review_workflow.interfaces import (
    AssignmentRepository,
    EntryRepository,
    SignatureFactory,
)

from .schema import (
    batch_memberships,
    digital_signatures,
    entries,
    faculty_batch_assignments,
    faculty_student_assignments,
)


class PostgresReviewWorkflowRepository(EntryRepository):
    """SQL repository over the review workflow schema."""

    def __init__(self, sessions: ServiceSchemaSessionProvider) -> None:
        self._sessions = sessions

    def create_entry(
        self, *, owner_id: str, category: str, payload: dict[str, Any]
    ) -> Entry:
        with self._sessions.session() as session:
            next_sequence = session.execute(
                select(func.coalesce(func.max(entries.c.sequence_no), 0) + 1).where(
                    entries.c.owner_id == owner_id,
                    entries.c.category == category,
                )
            ).scalar_one()
            row = (
                session.execute(
                    insert(entries)
                    .values(
                        id=generate_ulid_bytes(),
                        owner_id=owner_id,
                        category=category,
                        sequence_no=int(next_sequence),
                        status=EntryStatus.DRAFT.value,
                        payload=payload,
                    )
                    .returning(entries)
                )
                .mappings()
                .one()
            )
            return _to_entry(row)

    def get_entry(self, *, entry_id: str) -> Entry | None:
        with self._sessions.session() as session:
            row = (
                session.execute(
                    select(entries).where(entries.c.id == ulid_str_to_bytes(entry_id))
                )
                .mappings()
                .one_or_none()
            )
            return None if row is None else _to_entry(row)

    def list_entries(self, *, query: EntryQuery) -> list[Entry]:
        if query.owner_ids is not None and len(query.owner_ids) == 0:
            return []
        with self._sessions.session() as session:
            rows = session.execute(_entry_select(query)).mappings().all()
            return [_to_entry(row) for row in rows]

    def transition_entry(
        self,
        *,
        entry_id: str,
        expected: frozenset[EntryStatus],
        target: EntryStatus,
        changes: EntryChanges | None = None,
        signature: SignatureFactory | None = None,
    ) -> Entry | None:
        stmt = (
            update(entries)
            .where(
                entries.c.id == ulid_str_to_bytes(entry_id),
                entries.c.status.in_(_status_values(expected)),
            )
            .values(_update_values(target, changes))
            .returning(entries)
        )
        with self._sessions.session() as session:
            row = session.execute(stmt).mappings().one_or_none()
            if row is None:
                return None
            entry = _to_entry(row)
            if signature is not None:
                _insert_signatures(session, [entry], signature)
            return entry

    def transition_entries(
        self,
        *,
        entry_ids: Sequence[str],
        expected: frozenset[EntryStatus],
        target: EntryStatus,
        owner_ids: frozenset[str] | None,
        category: str | None,
        signature: SignatureFactory | None = None,
    ) -> list[Entry]:
        if len(entry_ids) == 0 or (owner_ids is not None and len(owner_ids) == 0):
            return []
        stmt = update(entries).where(
            entries.c.id.in_([ulid_str_to_bytes(entry_id) for entry_id in entry_ids]),
            entries.c.status.in_(_status_values(expected)),
        )
        if owner_ids is not None:
            stmt = stmt.where(entries.c.owner_id.in_(sorted(owner_ids)))
        if category is not None:
            stmt = stmt.where(entries.c.category == category)
        stmt = stmt.values(_update_values(target, None)).returning(entries)

        with self._sessions.session() as session:
            moved = [_to_entry(row) for row in session.execute(stmt).mappings().all()]
            position = {entry_id: index for index, entry_id in enumerate(entry_ids)}
            moved.sort(key=lambda entry: position[entry.id])
            if signature is not None and moved:
                _insert_signatures(session, moved, signature)
            return moved

    def delete_entry(
        self, *, entry_id: str, owner_id: str, deletable: frozenset[EntryStatus]
    ) -> bool:
        with self._sessions.session() as session:
            result = session.execute(
                delete(entries).where(
                    entries.c.id == ulid_str_to_bytes(entry_id),
                    entries.c.owner_id == owner_id,
                    entries.c.status.in_(_status_values(deletable)),
                )
            )
            return int(result.rowcount or 0) > 0

    def list_signatures(self, *, entry_id: str) -> list[DigitalSignature]:
        with self._sessions.session() as session:
            rows = (
                session.execute(
                    select(digital_signatures)
                    .where(digital_signatures.c.entity_id == ulid_str_to_bytes(entry_id))
                    .order_by(digital_signatures.c.created_at, digital_signatures.c.id)
                )
                .mappings()
                .all()
            )
            return [_to_signature(row) for row in rows]

    def count_entries(self) -> int:
        with self._sessions.session() as session:
            return int(
                session.execute(select(func.count()).select_from(entries)).scalar_one()
            )

    def count_signatures(self) -> int:
        with self._sessions.session() as session:
            return int(
                session.execute(
                    select(func.count()).select_from(digital_signatures)
                ).scalar_one()
            )


class PostgresAssignmentRepository(AssignmentRepository):
    """SQL repository over faculty, batch and student reference tables."""

    def __init__(self, sessions: ServiceSchemaSessionProvider) -> None:
        self._sessions = sessions

    def faculty_batch_ids(self, *, faculty_id: str) -> frozenset[str]:
        with self._sessions.session() as session:
            rows = session.execute(
                select(faculty_batch_assignments.c.batch_id).where(
                    faculty_batch_assignments.c.faculty_id == faculty_id
                )
            ).scalars()
            return frozenset(str(batch_id) for batch_id in rows)

    def batch_student_ids(self, *, batch_ids: frozenset[str]) -> frozenset[str]:
        if not batch_ids:
            return frozenset()
        with self._sessions.session() as session:
            rows = session.execute(
                select(batch_memberships.c.student_id).where(
                    batch_memberships.c.batch_id.in_(sorted(batch_ids))
                )
            ).scalars()
            return frozenset(str(student_id) for student_id in rows)

    def faculty_student_ids(self, *, faculty_id: str) -> frozenset[str]:
        with self._sessions.session() as session:
            rows = session.execute(
                select(faculty_student_assignments.c.student_id).where(
                    faculty_student_assignments.c.faculty_id == faculty_id
                )
            ).scalars()
            return frozenset(str(student_id) for student_id in rows)

    def assign_faculty_to_batch(self, *, faculty_id: str, batch_id: str) -> None:
        with self._sessions.session() as session:
            session.execute(
                insert(faculty_batch_assignments)
                .values(faculty_id=faculty_id, batch_id=batch_id)
                .on_conflict_do_nothing()
            )

    def add_student_to_batch(self, *, student_id: str, batch_id: str) -> None:
        """Set the student's current batch, replacing any previous one."""
        stmt = insert(batch_memberships).values(student_id=student_id, batch_id=batch_id)
        with self._sessions.session() as session:
            session.execute(
                stmt.on_conflict_do_update(
                    index_elements=[batch_memberships.c.student_id],
                    set_={"batch_id": stmt.excluded.batch_id},
                )
            )

    def assign_student_to_faculty(
        self, *, faculty_id: str, student_id: str, semester: int | None = None
    ) -> None:
        stmt = insert(faculty_student_assignments).values(
            faculty_id=faculty_id, student_id=student_id, semester=semester
        )
        with self._sessions.session() as session:
            session.execute(
                stmt.on_conflict_do_update(
                    constraint="pk_faculty_student_assignments",
                    set_={"semester": stmt.excluded.semester},
                )
            )


class InMemoryReviewWorkflowRepository(EntryRepository):
    """Process-local entry store with the same atomicity as the SQL repository."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._entries: dict[str, Entry] = {}
        self._signatures: list[DigitalSignature] = []
        self._insert_order: dict[str, int] = {}
        self._counter = count()

    def create_entry(
        self, *, owner_id: str, category: str, payload: dict[str, Any]
    ) -> Entry:
        with self._lock:
            sequence_no = 1 + max(
                (
                    entry.sequence_no
                    for entry in self._entries.values()
                    if entry.owner_id == owner_id and entry.category == category
                ),
                default=0,
            )
            now = _utc_now()
            entry = Entry(
                id=generate_ulid_str(),
                owner_id=owner_id,
                category=category,
                sequence_no=sequence_no,
                status=EntryStatus.DRAFT,
                payload=dict(payload),
                created_at=now,
                updated_at=now,
            )
            self._entries[entry.id] = entry
            self._insert_order[entry.id] = next(self._counter)
            return entry

    def get_entry(self, *, entry_id: str) -> Entry | None:
        with self._lock:
            return self._entries.get(entry_id)

    def list_entries(self, *, query: EntryQuery) -> list[Entry]:
        with self._lock:
            matched = [
                entry for entry in self._entries.values() if _matches(entry, query)
            ]
            if query.order == "sequence":
                matched.sort(key=lambda entry: entry.sequence_no)
            elif query.order == "category_sequence":
                matched.sort(key=lambda entry: (entry.category, entry.sequence_no))
            else:
                matched.sort(key=lambda entry: self._insert_order[entry.id], reverse=True)
            return matched

    def transition_entry(
        self,
        *,
        entry_id: str,
        expected: frozenset[EntryStatus],
        target: EntryStatus,
        changes: EntryChanges | None = None,
        signature: SignatureFactory | None = None,
    ) -> Entry | None:
        with self._lock:
            current = self._entries.get(entry_id)
            if current is None or current.status not in expected:
                return None
            moved = self._apply(current, target, changes)
            if signature is not None:
                self._append_signatures([moved], signature)
            return moved

    def transition_entries(
        self,
        *,
        entry_ids: Sequence[str],
        expected: frozenset[EntryStatus],
        target: EntryStatus,
        owner_ids: frozenset[str] | None,
        category: str | None,
        signature: SignatureFactory | None = None,
    ) -> list[Entry]:
        with self._lock:
            moved: list[Entry] = []
            for entry_id in entry_ids:
                current = self._entries.get(entry_id)
                if current is None or current.status not in expected:
                    continue
                if owner_ids is not None and current.owner_id not in owner_ids:
                    continue
                if category is not None and current.category != category:
                    continue
                moved.append(self._apply(current, target, None))
            if signature is not None and moved:
                self._append_signatures(moved, signature)
            return moved

    def delete_entry(
        self, *, entry_id: str, owner_id: str, deletable: frozenset[EntryStatus]
    ) -> bool:
        with self._lock:
            current = self._entries.get(entry_id)
            if current is None or current.owner_id != owner_id:
                return False
            if current.status not in deletable:
                return False
            del self._entries[entry_id]
            return True

    def list_signatures(self, *, entry_id: str) -> list[DigitalSignature]:
        with self._lock:
            return [sig for sig in self._signatures if sig.entity_id == entry_id]

    def count_entries(self) -> int:
        with self._lock:
            return len(self._entries)

    def count_signatures(self) -> int:
        with self._lock:
            return len(self._signatures)

    def _apply(
        self, current: Entry, target: EntryStatus, changes: EntryChanges | None
    ) -> Entry:
        update_fields: dict[str, Any] = {"status": target, "updated_at": _utc_now()}
        if changes is not None:
            update_fields.update(changes.updates())
        moved = current.model_copy(update=update_fields)
        self._entries[moved.id] = moved
        return moved

    def _append_signatures(
        self, moved: list[Entry], signature: SignatureFactory
    ) -> None:
        now = _utc_now()
        for entry in moved:
            draft = signature(entry)
            self._signatures.append(
                DigitalSignature(
                    id=generate_ulid_str(),
                    signer_id=draft.signer_id,
                    entity_type=draft.entity_type,
                    entity_id=entry.id,
                    remark=draft.remark,
                    created_at=now,
                )
            )


class InMemoryAssignmentRepository(AssignmentRepository):
    """Process-local assignment reference data."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._faculty_batches: dict[str, set[str]] = {}
        self._student_batch: dict[str, str] = {}
        self._faculty_students: dict[str, dict[str, int | None]] = {}

    def faculty_batch_ids(self, *, faculty_id: str) -> frozenset[str]:
        with self._lock:
            return frozenset(self._faculty_batches.get(faculty_id, ()))

    def batch_student_ids(self, *, batch_ids: frozenset[str]) -> frozenset[str]:
        with self._lock:
            return frozenset(
                student_id
                for student_id, batch_id in self._student_batch.items()
                if batch_id in batch_ids
            )

    def faculty_student_ids(self, *, faculty_id: str) -> frozenset[str]:
        with self._lock:
            return frozenset(self._faculty_students.get(faculty_id, {}))

    def assign_faculty_to_batch(self, *, faculty_id: str, batch_id: str) -> None:
        with self._lock:
            self._faculty_batches.setdefault(faculty_id, set()).add(batch_id)

    def add_student_to_batch(self, *, student_id: str, batch_id: str) -> None:
        """Set the student's current batch, replacing any previous one."""
        with self._lock:
            self._student_batch[student_id] = batch_id

    def assign_student_to_faculty(
        self, *, faculty_id: str, student_id: str, semester: int | None = None
    ) -> None:
        with self._lock:
            self._faculty_students.setdefault(faculty_id, {})[student_id] = semester


def _entry_select(query: EntryQuery) -> Select[Any]:
    stmt = select(entries)
    if query.owner_ids is not None:
        stmt = stmt.where(entries.c.owner_id.in_(sorted(query.owner_ids)))
    if query.category is not None:
        stmt = stmt.where(entries.c.category == query.category)
    if query.statuses is not None:
        stmt = stmt.where(entries.c.status.in_(_status_values(query.statuses)))
    if query.exclude_statuses:
        stmt = stmt.where(entries.c.status.not_in(_status_values(query.exclude_statuses)))
    if query.order == "sequence":
        return stmt.order_by(entries.c.sequence_no)
    if query.order == "category_sequence":
        return stmt.order_by(entries.c.category, entries.c.sequence_no)
    return stmt.order_by(entries.c.created_at.desc(), entries.c.id.desc())


def _matches(entry: Entry, query: EntryQuery) -> bool:
    if query.owner_ids is not None and entry.owner_id not in query.owner_ids:
        return False
    if query.category is not None and entry.category != query.category:
        return False
    if query.statuses is not None and entry.status not in query.statuses:
        return False
    return entry.status not in query.exclude_statuses


def _update_values(target: EntryStatus, changes: EntryChanges | None) -> dict[str, Any]:
    values: dict[str, Any] = {"status": target.value, "updated_at": func.now()}
    if changes is not None:
        values.update(changes.updates())
    return values


def _insert_signatures(
    session: Session, moved: list[Entry], signature: SignatureFactory
) -> None:
    rows = []
    for entry in moved:
        draft = signature(entry)
        rows.append(
            {
                "id": generate_ulid_bytes(),
                "signer_id": draft.signer_id,
                "entity_type": draft.entity_type,
                "entity_id": ulid_str_to_bytes(entry.id),
                "remark": draft.remark,
            }
        )
    session.execute(insert(digital_signatures), rows)


def _status_values(statuses: frozenset[EntryStatus]) -> list[str]:
    return sorted(status.value for status in statuses)


def _to_entry(row: Mapping[str, Any]) -> Entry:
    return Entry(
        id=ulid_bytes_to_str(bytes(row["id"])),
        owner_id=str(row["owner_id"]),
        category=str(row["category"]),
        sequence_no=int(row["sequence_no"]),
        status=EntryStatus(row["status"]),
        reviewer_remark=row["reviewer_remark"],
        payload=dict(row["payload"] or {}),
        created_at=_row_dt(row, "created_at"),
        updated_at=_row_dt(row, "updated_at"),
    )


def _to_signature(row: Mapping[str, Any]) -> DigitalSignature:
    return DigitalSignature(
        id=ulid_bytes_to_str(bytes(row["id"])),
        signer_id=str(row["signer_id"]),
        entity_type=str(row["entity_type"]),
        entity_id=ulid_bytes_to_str(bytes(row["entity_id"])),
        remark=row["remark"],
        created_at=_row_dt(row, "created_at"),
    )


def _row_dt(row: Mapping[str, Any], column: str) -> datetime:
    """Read and normalize one timezone-aware datetime field from SQL row."""
    value = row.get(column)
    if not isinstance(value, datetime):
        raise ValueError(f"expected datetime column for {column}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _utc_now() -> datetime:
    return datetime.now(UTC)
