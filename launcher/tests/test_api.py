"""
Tests for the REST API.
"""

import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient

from server_creator.api import create_app
from server_creator.errors import CatalogUnavailable, DownloadFailed
from server_creator.models import ProvisioningState, ReleaseEntry, Stage
from server_creator.settings import Settings

ENTRIES = [
    ReleaseEntry(id="1.20.1", kind="release", metadata_url="https://meta.example/1.20.1.json"),
    ReleaseEntry(id="1.19.4", kind="release", metadata_url="https://meta.example/1.19.4.json"),
]


@pytest.fixture
def settings(tmp_path):
    return Settings(server_dir=tmp_path / "server")


@pytest.fixture
def prov():
    p = Mock()
    p.candidates.return_value = ENTRIES
    p.latest.return_value = ENTRIES[0]
    p.find.side_effect = lambda vid: next((e for e in ENTRIES if e.id == vid), None)
    state = ProvisioningState(version_id="1.20.1")
    state.advance(Stage.done)
    p.provision.return_value = state
    p.state = state
    return p


@pytest.fixture
def client(settings, prov):
    return TestClient(create_app(settings, provisioner_factory=lambda s: prov))


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_versions(client):
    data = client.get("/versions").json()
    assert data["latest"] == "1.20.1"
    assert [v["id"] for v in data["versions"]] == ["1.20.1", "1.19.4"]


def test_versions_catalog_down(client, prov):
    prov.candidates.side_effect = CatalogUnavailable("manifest unreachable")
    resp = client.get("/versions")
    assert resp.status_code == 502


def test_provision(client, prov):
    resp = client.post("/provision", params={"version": "1.20.1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["data"]["stage"] == "done"
    prov.provision.assert_called_once_with(ENTRIES[0])


def test_provision_unknown_version(client, prov):
    resp = client.post("/provision", params={"version": "23w13a"})
    assert resp.status_code == 404
    prov.provision.assert_not_called()


def test_provision_failure(client, prov):
    failed = ProvisioningState(version_id="1.20.1")
    failed.fail("connection refused")
    prov.state = failed
    prov.provision.side_effect = DownloadFailed("connection refused")

    resp = client.post("/provision", params={"version": "1.20.1"})

    assert resp.status_code == 500
    assert resp.json()["detail"] == "connection refused"
    status = client.get("/status").json()
    assert status["data"]["last_run"]["stage"] == "failed"


def test_status_after_run(client):
    assert client.get("/status").json()["data"] == {"busy": False, "last_run": None}
    client.post("/provision", params={"version": "1.20.1"})
    data = client.get("/status").json()["data"]
    assert data["busy"] is False
    assert data["last_run"]["version_id"] == "1.20.1"
