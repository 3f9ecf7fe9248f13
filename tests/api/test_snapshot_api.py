"""
Integration tests for the snapshot push/read endpoints and the health check.
"""

import pytest
from fastapi.testclient import TestClient

from rtexporter.app import create_app
from rtexporter.core.config import Settings
from rtexporter.services.metrics.models import FleetSnapshot
from rtexporter.services.metrics.store import SnapshotStore

from tests.conftest import build_host


def test_get_snapshot_404_before_publish(client):
    response = client.get("/api/v1/snapshot")

    assert response.status_code == 404
    assert "detail" in response.json()


def test_put_then_get_snapshot(client, example_snapshot):
    """Test that a pushed snapshot is stored and served back unchanged."""
    body = example_snapshot.model_dump(mode="json")

    response = client.put("/api/v1/snapshot", json=body)

    assert response.status_code == 200
    assert response.json() == {"hosts": 1, "generation": 1}
    assert client.app.state.store.current() == example_snapshot

    served = client.get("/api/v1/snapshot")
    assert served.status_code == 200
    assert FleetSnapshot.model_validate(served.json()) == example_snapshot


def test_put_rejects_malformed_snapshot(client):
    """Test that an invalid host record never reaches the store."""
    response = client.put("/api/v1/snapshot", json={"hosts": [{"hostname": "h1"}]})

    assert response.status_code == 422
    assert client.app.state.store.current() is None


def test_put_forbidden_when_push_disabled(test_settings, example_snapshot):
    """Test that push mode must be enabled explicitly."""
    test_settings.EXPORTER_ENABLE_PUSH = False
    app = create_app(settings=test_settings)

    with TestClient(app) as client:
        response = client.put("/api/v1/snapshot", json=example_snapshot.model_dump(mode="json"))

    assert response.status_code == 403
    assert "disabled" in response.json()["detail"].lower()


def test_health_before_and_after_snapshot(client, example_snapshot):
    """Test that /health always answers and tracks generation and host count."""
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["snapshot_present"] is False
    assert data["generation"] == 0
    assert data["host_count"] == 0
    assert data["push_enabled"] is True
    assert data["poller"] is None

    client.app.state.store.set_snapshot(FleetSnapshot(hosts=(build_host("a"), build_host("b"))))

    data = client.get("/api/v1/health").json()
    assert data["snapshot_present"] is True
    assert data["generation"] == 1
    assert data["host_count"] == 2


def test_injected_store_is_served(test_settings, example_snapshot):
    """Test that create_app serves the store it is given rather than a global one."""
    store = SnapshotStore(example_snapshot)
    other = create_app(settings=test_settings)

    with TestClient(create_app(settings=test_settings, store=store)) as client:
        assert client.get("/api/v1/snapshot").status_code == 200

    with TestClient(other) as client:
        assert client.get("/api/v1/snapshot").status_code == 404


def test_health_reports_poller(test_settings):
    """Test that a configured poller shows up in the health response."""
    test_settings.RTINFO_ENDPOINTS = ("http://127.0.0.1:1/json",)
    test_settings.RTINFO_POLL_INTERVAL = 60.0
    test_settings.RTINFO_POLL_TIMEOUT = 0.2
    app = create_app(settings=test_settings)

    with TestClient(app) as client:
        poller = client.get("/api/v1/health").json()["poller"]

    assert poller["endpoints"] == ["http://127.0.0.1:1/json"]
    assert poller["running"] is True
    assert poller["local_probe"] is False


@pytest.mark.parametrize("endpoints,local,expected", [
    ((), False, False),
    (("http://a/json",), False, True),
    ((), True, True),
])
def test_poller_enabled_setting(endpoints, local, expected):
    s = Settings()
    s.RTINFO_ENDPOINTS = endpoints
    s.EXPORTER_LOCAL_PROBE = local

    assert s.poller_enabled is expected
