"""
HTTP contract of /api/internships, exercised through FastAPI's TestClient.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the interncoach package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from interncoach.app import create_app  # noqa: E402
from interncoach.core import config as core_config  # noqa: E402

PAYLOAD = {
    "company": "Acme",
    "role": "Backend Intern",
    "platform": "Handshake",
    "location": "Lisbon",
    "status": "Applied",
    "deadline": "2026-10-01",
    "notes": "",
}


@pytest.fixture()
def data_file(tmp_path, monkeypatch):
    path = tmp_path / "data" / "internships.json"
    monkeypatch.setenv("INTERNCOACH_DATA_FILE", str(path))
    monkeypatch.delenv("INTERNCOACH_STRICT_VALIDATION", raising=False)
    core_config.get_settings.cache_clear()
    yield path
    core_config.get_settings.cache_clear()


@pytest.fixture()
def client(data_file):
    return TestClient(create_app())


def test_startup_creates_empty_store(client, data_file):
    assert json.loads(data_file.read_text(encoding="utf-8")) == []
    resp = client.get("/api/internships")
    assert resp.status_code == 200
    assert resp.json() == []


def test_create_returns_201_with_server_fields(client):
    resp = client.post("/api/internships", json=PAYLOAD)
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"]
    assert body["createdAt"]
    assert {k: body[k] for k in PAYLOAD} == PAYLOAD

    listed = client.get("/api/internships").json()
    assert listed == [body]


def test_get_single_record(client):
    created = client.post("/api/internships", json=PAYLOAD).json()
    assert client.get(f"/api/internships/{created['id']}").json() == created
    resp = client.get("/api/internships/missing")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Internship not found"}


def test_patch_merges_fields(client):
    created = client.post("/api/internships", json=PAYLOAD).json()
    resp = client.patch(f"/api/internships/{created['id']}", json={"status": "Interview"})
    assert resp.status_code == 200
    assert resp.json() == {**created, "status": "Interview"}


def test_patch_unknown_id_is_404(client):
    client.post("/api/internships", json=PAYLOAD)
    resp = client.patch("/api/internships/unknown", json={"status": "Offer"})
    assert resp.status_code == 404
    assert [r["status"] for r in client.get("/api/internships").json()] == ["Applied"]


def test_delete_is_idempotent(client):
    created = client.post("/api/internships", json=PAYLOAD).json()
    for _ in range(2):
        resp = client.delete(f"/api/internships/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Internship deleted successfully"}
    assert client.get("/api/internships").json() == []


def test_clear_all(client):
    for name in ("Acme", "Globex", "Initech"):
        client.post("/api/internships", json={**PAYLOAD, "company": name})
    resp = client.delete("/api/internships")
    assert resp.status_code == 200
    assert resp.json() == {"message": "All internships cleared successfully"}
    assert client.get("/api/internships").json() == []


def test_corrupt_store_returns_generic_500(client, data_file):
    data_file.write_text("{oops", encoding="utf-8")
    resp = client.get("/api/internships")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to read internships"}

    resp = client.post("/api/internships", json=PAYLOAD)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to create internship"}


def test_strict_validation_returns_422(data_file, monkeypatch):
    monkeypatch.setenv("INTERNCOACH_STRICT_VALIDATION", "true")
    core_config.get_settings.cache_clear()
    client = TestClient(create_app())

    resp = client.post("/api/internships", json={**PAYLOAD, "role": "x"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "Invalid internship"
    assert "Role title must be at least 2 characters long" in body["details"]
    assert client.get("/api/internships").json() == []


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_store_with_non_object_entries_returns_generic_500(client, data_file):
    data_file.write_text("[1]", encoding="utf-8")
    resp = client.patch("/api/internships/x", json={"status": "Offer"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to update internship"}
    resp = client.get("/api/internships")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to read internships"}
