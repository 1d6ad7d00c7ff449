"""
Client-side preferences (weekly goal, last backup time).

Stored as a small JSON object next to the user's home directory, the same
load/save shape as the store file but never sent to the server.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
import json
import logging

from interncoach.client.stats import DEFAULT_WEEKLY_GOAL, normalize_goal
from interncoach.core.utils import parse_timestamp, utc_now_iso

logger = logging.getLogger(__name__)

BACKUP_REMINDER_DAYS = 7


class ClientPreferences:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._data = self._load()

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable preferences file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")

    @property
    def weekly_goal(self) -> int:
        return normalize_goal(self._data.get("weeklyGoal", DEFAULT_WEEKLY_GOAL))

    def set_weekly_goal(self, goal) -> int:
        value = normalize_goal(goal)
        self._data["weeklyGoal"] = value
        self.save()
        return value

    @property
    def last_backup(self) -> Optional[datetime]:
        return parse_timestamp(self._data.get("lastBackup"))

    def mark_backup(self, now: Optional[datetime] = None) -> None:
        self._data["lastBackup"] = utc_now_iso(now)
        self.save()

    def backup_due(self, record_count: int, now: Optional[datetime] = None) -> bool:
        """True when there is data and no export in the last BACKUP_REMINDER_DAYS days."""
        if record_count <= 0:
            return False
        last = self.last_backup
        if last is None:
            return True
        current = parse_timestamp(now) if now else datetime.now()
        return current - last >= timedelta(days=BACKUP_REMINDER_DAYS)
