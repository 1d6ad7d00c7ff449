"""Domain rules for internship applications (statuses, platforms, validation)."""
from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping, Optional

from interncoach.core.utils import parse_timestamp

STATUSES = ("Applied", "Interview", "Offer", "Rejected")
DEFAULT_STATUS = "Applied"
PLATFORMS = ("LinkedIn", "Handshake", "Indeed", "Company Site", "Email", "Other")
FALLBACK_PLATFORM = "Other"

MIN_TEXT_LENGTH = 2
MAX_NOTES_LENGTH = 500

# Server-owned keys; never taken from a request body.
IMMUTABLE_FIELDS = frozenset({"id", "createdAt"})

_TEXT_FIELDS = (
    ("company", "Company name"),
    ("role", "Role title"),
    ("location", "Location"),
)


class ValidationError(Exception):
    """Raised when an internship fails the field-length/date checks."""

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def is_valid_status(value: Any) -> bool:
    return value in STATUSES


def platform_of(record: Mapping[str, Any]) -> str:
    """Platform label used for display; missing or blank counts as Other."""
    platform = record.get("platform")
    if isinstance(platform, str) and platform.strip():
        return platform
    return FALLBACK_PLATFORM


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_internship(
    fields: Mapping[str, Any],
    today: Optional[date] = None,
    *,
    partial: bool = False,
) -> list[str]:
    """
    Return the list of problems with an internship payload (empty when valid).

    With partial=True only the keys present in fields are checked, which is
    what an update body needs.
    """
    errors: list[str] = []
    current = today or date.today()

    for key, label in _TEXT_FIELDS:
        if partial and key not in fields:
            continue
        if len(_text(fields.get(key))) < MIN_TEXT_LENGTH:
            errors.append(f"{label} must be at least {MIN_TEXT_LENGTH} characters long")

    if not partial or "deadline" in fields:
        deadline = fields.get("deadline")
        if not deadline:
            errors.append("Application date is required")
        else:
            parsed = parse_timestamp(deadline)
            if parsed is None:
                errors.append("Application date is invalid")
            elif parsed.date() > current:
                errors.append("Application date cannot be in the future")

    notes = fields.get("notes")
    if notes and len(_text(notes)) > MAX_NOTES_LENGTH:
        errors.append(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")

    return errors


def ensure_valid(fields: Mapping[str, Any], today: Optional[date] = None, *, partial: bool = False) -> None:
    """Raise ValidationError when validate_internship reports anything."""
    errors = validate_internship(fields, today, partial=partial)
    if errors:
        raise ValidationError(errors)
