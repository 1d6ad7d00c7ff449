"""Internship use cases (list, create, merge-update, delete, clear)."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from interncoach.core.utils import utc_now_iso
from interncoach.domain.internships import (
    IMMUTABLE_FIELDS,
    STATUSES,
    ValidationError,
    is_valid_status,
    validate_internship,
)
from interncoach.repositories.json_storage import JsonInternshipStore

logger = logging.getLogger(__name__)


class NotFound(Exception):
    """Raised when no internship carries the requested id."""

    def __init__(self, internship_id: str):
        super().__init__(f"Internship {internship_id} not found")
        self.internship_id = internship_id


def _new_id() -> str:
    return uuid.uuid4().hex


def _writable_fields(fields: Mapping[str, Any]) -> dict:
    return {k: v for k, v in fields.items() if k not in IMMUTABLE_FIELDS}


class InternshipService:
    """
    CRUD over the internship collection.

    strict_validation switches on the same field checks the client runs before
    submitting; by default payloads are stored as given.
    """

    def __init__(
        self,
        store: JsonInternshipStore,
        *,
        strict_validation: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.store = store
        self.strict_validation = strict_validation
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._id_factory = id_factory or _new_id

    def list(self) -> list[dict]:
        return self.store.load()

    def get(self, internship_id: str) -> dict:
        for record in self.store.load():
            if record.get("id") == internship_id:
                return record
        raise NotFound(internship_id)

    def create(self, fields: Mapping[str, Any]) -> dict:
        payload = _writable_fields(fields)
        if self.strict_validation:
            self._check(payload, partial=False)
        with self.store.transaction() as records:
            existing = {r.get("id") for r in records}
            new_id = self._id_factory()
            while new_id in existing:
                new_id = self._id_factory()
            record = {"id": new_id}
            record.update(payload)
            record["createdAt"] = utc_now_iso(self._clock())
            records.append(record)
        logger.info("Created internship %s", record["id"])
        return record

    def update(self, internship_id: str, fields: Mapping[str, Any]) -> dict:
        payload = _writable_fields(fields)
        if self.strict_validation:
            self._check(payload, partial=True)
        with self.store.transaction() as records:
            for index, record in enumerate(records):
                if record.get("id") == internship_id:
                    merged = dict(record)
                    merged.update(payload)
                    records[index] = merged
                    break
            else:
                raise NotFound(internship_id)
        logger.info("Updated internship %s (%s)", internship_id, ", ".join(sorted(payload)) or "no fields")
        return merged

    def delete(self, internship_id: str) -> None:
        with self.store.transaction() as records:
            before = len(records)
            records[:] = [r for r in records if r.get("id") != internship_id]
            removed = before - len(records)
        if removed:
            logger.info("Deleted internship %s", internship_id)
        else:
            logger.debug("Delete of unknown internship %s ignored", internship_id)

    def clear(self) -> None:
        self.store.clear()
        logger.info("Cleared all internships")

    def _check(self, payload: Mapping[str, Any], *, partial: bool) -> None:
        today = self._clock().astimezone().date()
        errors = validate_internship(payload, today, partial=partial)
        if "status" in payload or not partial:
            if not is_valid_status(payload.get("status")):
                errors.append(f"Status must be one of: {', '.join(STATUSES)}")
        if errors:
            raise ValidationError(errors)
