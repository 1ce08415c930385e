"""Tests for the relay HTTP API."""

import logging
from dataclasses import replace
from datetime import timedelta

from fastapi.testclient import TestClient

from scan_relay.api.app import create_app
from tests.conftest import (
    InMemoryScanEventRepository,
    InMemorySessionRepository,
    make_event,
)


def test_health(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/health").json() == {"status": "ok"}


def test_create_session_returns_pairing_url(
    container, session_repository: InMemorySessionRepository
) -> None:
    client = TestClient(create_app(container))

    response = client.post("/sessions", json={"owner_id": "owner-1"})

    assert response.status_code == 201
    body = response.json()
    assert body["id"] in session_repository.sessions
    assert body["pairing_url"] == (
        f"https://stock.example.com/scan?session={body['id']}"
    )


def test_create_session_store_outage_is_503(
    container, session_repository: InMemorySessionRepository
) -> None:
    session_repository.available = False
    client = TestClient(create_app(container))

    response = client.post("/sessions", json={"owner_id": "owner-1"})

    assert response.status_code == 503


def test_pairing_qr_is_svg(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/sessions/S1/pairing.svg")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert "<svg" in response.text


def test_teardown_session(
    container, session_repository: InMemorySessionRepository
) -> None:
    client = TestClient(create_app(container))
    session_id = client.post("/sessions", json={"owner_id": "owner-1"}).json()["id"]

    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert session_repository.sessions == {}


def test_publish_scan(container, event_repository: InMemoryScanEventRepository) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/sessions/S1/scans", json={"payload": "SKU-7", "actor_id": "phone-1"}
    )

    assert response.status_code == 202
    assert response.json()["payload"] == "SKU-7"
    assert [event.payload for event in event_repository.events] == ["SKU-7"]


def test_publish_pairing_payload_is_rejected(
    container, event_repository: InMemoryScanEventRepository
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/sessions/S1/scans", json={"payload": "https://host/scan?session=S1"}
    )

    assert response.status_code == 422
    assert event_repository.events == []


def test_publish_store_outage_is_503(
    container, event_repository: InMemoryScanEventRepository
) -> None:
    event_repository.available = False
    client = TestClient(create_app(container))

    response = client.post("/sessions/S1/scans", json={"payload": "SKU-7"})

    assert response.status_code == 503


def test_event_stream_forwards_fresh_scans(
    container, event_repository: InMemoryScanEventRepository
) -> None:
    relay = container.relay
    event_repository.events.append(
        make_event("S1", "SKU-OLD", relay.clock() - timedelta(seconds=30))
    )
    client = TestClient(create_app(container))

    with client.websocket_connect("/sessions/S1/events") as websocket:
        client.post("/sessions/S1/scans", json={"payload": "SKU-7"})
        message = websocket.receive_json()

    assert message["payload"] == "SKU-7"
    assert message["session_id"] == "S1"


def test_create_app_applies_configured_log_level(container) -> None:
    settings = container.settings.model_copy(update={"log_level": "WARNING"})

    create_app(replace(container, settings=settings))

    assert logging.getLogger("scan_relay").level == logging.WARNING
    logging.getLogger("scan_relay").setLevel(logging.INFO)
