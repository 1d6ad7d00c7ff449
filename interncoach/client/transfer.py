"""CSV/JSON export and JSON import of the whole collection."""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from interncoach.core.utils import utc_now_iso

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    ("Company", "company"),
    ("Role", "role"),
    ("Platform", "platform"),
    ("Location", "location"),
    ("Status", "status"),
    ("Deadline", "deadline"),
    ("Notes", "notes"),
    ("CreatedAt", "createdAt"),
)


class ImportFormatError(ValueError):
    """Raised when an import file is not a JSON array of objects."""


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def to_csv(records: Iterable[Mapping]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([header for header, _ in CSV_COLUMNS])
    for record in records:
        row = [_cell(record.get(key)) for _, key in CSV_COLUMNS]
        if not row[-1]:
            # Records imported from elsewhere may lack a creation time.
            row[-1] = utc_now_iso()
        writer.writerow(row)
    return buffer.getvalue()


def to_json(records: Iterable[Mapping]) -> str:
    return json.dumps(list(records), ensure_ascii=False, indent=2)


def parse_import(text: str) -> list[dict]:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ImportFormatError("Invalid file format") from exc
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ImportFormatError("Invalid file format")
    return data


def export_filename(kind: str, today: Optional[date] = None) -> str:
    return f"internships_{(today or date.today()).isoformat()}.{kind}"


def import_records(client, records: Iterable[Mapping]) -> list[dict]:
    """
    Replace the store with records: clear first, then create each in order.

    The server assigns fresh id/createdAt values, so those keys are not sent.
    """
    items = list(records)
    client.clear()
    created = []
    for record in items:
        payload = {k: v for k, v in record.items() if k not in ("id", "createdAt")}
        created.append(client.create(payload))
    logger.info("Imported %d internships", len(created))
    return created


def write_text(path: Path | str, content: str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target
