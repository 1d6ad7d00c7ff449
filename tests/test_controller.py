"""
End-to-end tests of the client side: DashboardController -> InternshipClient
-> FastAPI app on a temporary JSON file.
"""
from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the interncoach package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from interncoach.app import create_app  # noqa: E402
from interncoach.client import (  # noqa: E402
    ClientPreferences,
    DashboardController,
    DashboardSnapshot,
    InternshipClient,
    NotFoundError,
)
from interncoach.client.stats import compute_stats  # noqa: E402
from interncoach.client.transfer import ImportFormatError  # noqa: E402
from interncoach.core import config as core_config  # noqa: E402
from interncoach.domain.internships import ValidationError  # noqa: E402
from interncoach.services.internship_service import InternshipService  # noqa: E402

NOW = datetime(2026, 10, 21, 15, 30)

FORM = {
    "company": "  Acme ",
    "role": "Data Intern",
    "platform": "LinkedIn",
    "location": "Remote",
    "status": "Applied",
    "deadline": "2026-10-20",
    "notes": " first contact ",
}


@pytest.fixture()
def api(tmp_path, monkeypatch):
    monkeypatch.setenv("INTERNCOACH_DATA_FILE", str(tmp_path / "internships.json"))
    monkeypatch.delenv("INTERNCOACH_STRICT_VALIDATION", raising=False)
    core_config.get_settings.cache_clear()
    app = create_app()
    # pin the server clock so createdAt falls inside the test week
    store = app.state.internship_service.store
    app.state.internship_service = InternshipService(store, clock=lambda: NOW.astimezone())
    yield InternshipClient(http=TestClient(app))
    core_config.get_settings.cache_clear()


@pytest.fixture()
def prefs(tmp_path):
    return ClientPreferences(tmp_path / "prefs" / "preferences.json")


@pytest.fixture()
def ctl(api, prefs):
    return DashboardController(api, prefs, clock=lambda: NOW)


def test_submit_trims_fields_and_refreshes(ctl):
    created = ctl.submit(FORM)
    assert created["company"] == "Acme"
    assert created["notes"] == "first contact"
    snap = ctl.snapshot
    assert snap.internships == [created]
    assert snap.stats.total == 1
    assert snap.stats.this_week == 1
    assert snap.stats.weekly_goal.label == "1 / 5"
    assert snap.stats.weekly_goal.percent == 20


def test_submit_blocks_invalid_form_before_reaching_server(ctl, api):
    with pytest.raises(ValidationError) as excinfo:
        ctl.submit({**FORM, "role": "x", "deadline": "2026-11-01"})
    assert "Application date cannot be in the future" in excinfo.value.errors
    assert api.list() == []


def test_submit_defaults_missing_status(ctl):
    created = ctl.submit({k: v for k, v in FORM.items() if k != "status"})
    assert created["status"] == "Applied"


def test_status_change_remove_and_clear(ctl):
    first = ctl.submit(FORM)
    ctl.submit({**FORM, "company": "Globex"})

    ctl.change_status(first["id"], "Offer")
    assert ctl.snapshot.stats.by_status["Offer"] == 1
    assert ctl.snapshot.stats.offer_rate == 50.0

    ctl.remove(first["id"])
    ctl.remove(first["id"])
    assert [r["company"] for r in ctl.snapshot.internships] == ["Globex"]

    ctl.clear_all()
    assert ctl.snapshot.internships == []
    assert ctl.snapshot.stats.total == 0


def test_change_status_unknown_id(ctl):
    with pytest.raises(NotFoundError) as excinfo:
        ctl.change_status("missing", "Offer")
    assert excinfo.value.status_code == 404


def test_weekly_goal_is_persisted(ctl, prefs, tmp_path):
    assert ctl.set_weekly_goal(0) == 1
    assert ctl.set_weekly_goal("8") == 8
    assert ClientPreferences(prefs.path).weekly_goal == 8
    ctl.submit(FORM)
    assert ctl.snapshot.stats.weekly_goal.label == "1 / 8"


def test_backup_reminder(ctl, prefs, tmp_path):
    assert ctl.snapshot.backup_due is False
    ctl.submit(FORM)
    assert ctl.snapshot.backup_due is True
    ctl.export_csv(tmp_path / "out.csv")
    assert ctl.refresh().backup_due is False
    assert prefs.backup_due(1, datetime(2026, 10, 29)) is True


def test_export_json_then_import_round_trip(ctl, api, tmp_path):
    ctl.submit(FORM)
    ctl.submit({**FORM, "company": "Globex", "platform": "Indeed", "status": "Interview"})
    ctl.change_status(ctl.snapshot.internships[0]["id"], "Rejected")
    before = ctl.snapshot.internships

    target = ctl.export_json(tmp_path / "backup.json")
    ctl.clear_all()
    assert api.list() == []
    ctl.import_json(target)

    def strip(records):
        return [{k: v for k, v in r.items() if k not in ("id", "createdAt")} for r in records]

    assert strip(ctl.snapshot.internships) == strip(before)


def test_import_rejects_non_array_and_keeps_data(ctl, api, tmp_path):
    ctl.submit(FORM)
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"company": "Acme"}), encoding="utf-8")
    with pytest.raises(ImportFormatError):
        ctl.import_json(bad)
    assert len(api.list()) == 1


def test_export_default_filename(ctl, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = ctl.export_csv()
    assert target.name == "internships_2026-10-21.csv"
    assert (tmp_path / target).read_text(encoding="utf-8").startswith('"Company"')


def test_search_and_recent(ctl):
    for name in ("Acme", "Globex", "Initech"):
        ctl.submit({**FORM, "company": name})
    assert [r["company"] for r in ctl.search("glob")] == ["Globex"]
    assert len(ctl.snapshot.recent) == 3


def test_recent_orders_by_moment_and_falls_back_to_deadline():
    records = [
        {"company": "Old", "createdAt": "2026-01-01T00:00:00.000Z", "deadline": "2025-12-30"},
        {"company": "NoCreated", "deadline": "2026-10-20"},
        {"company": "Undated"},
        {"company": "Newest", "createdAt": "2026-10-21T09:00:00.000Z", "deadline": "2026-10-01"},
    ]
    snapshot = DashboardSnapshot(internships=records, stats=compute_stats(records, now=NOW), backup_due=False)
    assert [r["company"] for r in snapshot.recent] == ["Newest", "NoCreated", "Old", "Undated"]


def test_backup_reminder_accepts_aware_now(ctl, prefs, tmp_path):
    ctl.submit(FORM)
    ctl.export_json(tmp_path / "out.json")
    assert prefs.backup_due(1, NOW.astimezone(timezone.utc)) is False
    assert prefs.backup_due(1, datetime(2026, 10, 30, tzinfo=timezone.utc)) is True
    aware_ctl = DashboardController(ctl.client, prefs, clock=lambda: NOW.astimezone(timezone.utc))
    assert aware_ctl.refresh().backup_due is False
