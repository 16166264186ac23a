"""Tests for the HTTP trigger surface."""

import pytest
from fastapi.testclient import TestClient

from memosync.adapters.json_state import MemoryStateStore
from memosync.api.app import create_app, generate_token
from memosync.config import load_config
from memosync.runtime import Runtime, build_service


@pytest.fixture
def runtime(vault, storage, tmp_path, monkeypatch):
    """Runtime over the fixture vault with in-memory state."""
    monkeypatch.chdir(tmp_path)
    config = load_config()
    config.vault.root = vault
    config.sync.enabled = True
    config.sync.scan_days = 0
    config.source.folder = "WuCai"
    config.target.folder = "Thino"

    return Runtime(
        storage=storage,
        state_store=MemoryStateStore(),
        service=build_service(storage, config),
        config=config,
    )


def test_health_endpoint(runtime):
    client = TestClient(create_app(runtime, token=None))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_auth_required(runtime):
    token = generate_token()
    client = TestClient(create_app(runtime, token=token))

    assert client.get("/status").status_code == 401
    assert client.post("/sync").status_code == 401

    response = client.get("/status", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_sync_then_status(runtime, vault):
    client = TestClient(create_app(runtime, token=None))

    response = client.post("/sync")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["created"] == 3
    assert len(data["created_files"]) == 3
    assert len(list((vault / "Thino").glob("*.md"))) == 3

    status = client.get("/status").json()
    assert status["total_processed"] == 3
    assert status["indexed_entries"] == 3

    again = client.post("/sync").json()
    assert again["created"] == 0
    assert again["skipped"] == 3


def test_reset_clears_index_but_keeps_files(runtime, vault):
    client = TestClient(create_app(runtime, token=None))
    client.post("/sync")

    response = client.post("/reset")

    assert response.status_code == 200
    assert response.json()["indexed_entries"] == 0
    assert response.json()["total_processed"] == 0
    assert len(list((vault / "Thino").glob("*.md"))) == 3

    again = client.post("/sync").json()
    assert again["created"] == 0
    assert again["skipped"] == 3


def test_disabled_sync_reports_error(runtime):
    runtime.service.config.enabled = False
    client = TestClient(create_app(runtime, token=None))

    data = client.post("/sync").json()

    assert data["success"] is False
    assert data["error"] == "Sync is disabled"
    assert runtime.state_store.saves == 0
