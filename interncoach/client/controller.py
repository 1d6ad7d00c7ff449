"""
Dashboard view-controller.

One DashboardController is built per session and owns all client state: the
last fetched collection, the derived statistics and the preferences. Every
mutation goes through the HTTP client and is followed by a full refresh, so
the snapshot always mirrors the server.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from interncoach.client import transfer
from interncoach.client.api_client import InternshipClient
from interncoach.client.formatting import filter_internships
from interncoach.client.preferences import ClientPreferences
from interncoach.client.stats import InternshipStats, compute_stats
from interncoach.core.utils import parse_timestamp
from interncoach.domain.internships import DEFAULT_STATUS, ensure_valid

logger = logging.getLogger(__name__)

FORM_FIELDS = ("company", "role", "platform", "location", "status", "deadline", "notes")
TRIMMED_FIELDS = ("company", "role", "location", "notes")
RECENT_LIMIT = 5


@dataclass
class DashboardSnapshot:
    internships: list[dict]
    stats: InternshipStats
    backup_due: bool

    @property
    def recent(self) -> list[dict]:
        """Newest first, by createdAt (the deadline when createdAt is missing)."""
        ordered = sorted(self.internships, key=_created_moment, reverse=True)
        return ordered[:RECENT_LIMIT]


class DashboardController:
    def __init__(
        self,
        client: InternshipClient,
        preferences: ClientPreferences,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.client = client
        self.preferences = preferences
        self._clock = clock or datetime.now
        self._snapshot: Optional[DashboardSnapshot] = None

    @property
    def snapshot(self) -> DashboardSnapshot:
        if self._snapshot is None:
            return self.refresh()
        return self._snapshot

    def refresh(self) -> DashboardSnapshot:
        now = self._clock()
        internships = self.client.list()
        self._snapshot = DashboardSnapshot(
            internships=internships,
            stats=compute_stats(internships, weekly_goal=self.preferences.weekly_goal, now=now),
            backup_due=self.preferences.backup_due(len(internships), now),
        )
        return self._snapshot

    # -------------------------- mutations --------------------------
    def submit(self, fields: Mapping[str, Any]) -> dict:
        """Validate a form submission, create it and refresh. Raises ValidationError."""
        payload = _clean_form(fields)
        ensure_valid(payload, self._today())
        created = self.client.create(payload)
        self.refresh()
        return created

    def change_status(self, internship_id: str, status: str) -> dict:
        updated = self.client.update_status(internship_id, status)
        self.refresh()
        return updated

    def remove(self, internship_id: str) -> None:
        self.client.delete(internship_id)
        self.refresh()

    def clear_all(self) -> None:
        self.client.clear()
        self.refresh()

    def set_weekly_goal(self, goal) -> int:
        value = self.preferences.set_weekly_goal(goal)
        self.refresh()
        return value

    # -------------------------- import/export --------------------------
    def export_csv(self, path: Optional[Path | str] = None) -> Path:
        records = self.client.list()
        target = transfer.write_text(path or transfer.export_filename("csv", self._today()), transfer.to_csv(records))
        self.preferences.mark_backup(self._clock())
        logger.info("Exported %d internships to %s", len(records), target)
        return target

    def export_json(self, path: Optional[Path | str] = None) -> Path:
        records = self.client.list()
        target = transfer.write_text(path or transfer.export_filename("json", self._today()), transfer.to_json(records))
        self.preferences.mark_backup(self._clock())
        logger.info("Exported %d internships to %s", len(records), target)
        return target

    def import_json(self, path: Path | str) -> list[dict]:
        records = transfer.parse_import(Path(path).read_text(encoding="utf-8"))
        created = transfer.import_records(self.client, records)
        self.refresh()
        return created

    def search(self, term: str) -> list[dict]:
        return filter_internships(self.snapshot.internships, term)

    def _today(self) -> date:
        return self._clock().date()


def _clean_form(fields: Mapping[str, Any]) -> dict:
    payload = {}
    for key in FORM_FIELDS:
        value = fields.get(key)
        if isinstance(value, str) and key in TRIMMED_FIELDS:
            value = value.strip()
        payload[key] = value if value is not None else ""
    if not payload["status"]:
        payload["status"] = DEFAULT_STATUS
    return payload


def _created_moment(record: Mapping) -> datetime:
    return parse_timestamp(record.get("createdAt") or record.get("deadline")) or datetime.min
