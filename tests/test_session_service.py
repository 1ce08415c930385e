"""Tests for the pairing session service."""

import asyncio
from uuid import UUID

import pytest

from scan_relay.domain.errors import StoreUnavailable
from scan_relay.services.pairing_store import InMemoryPairingStore
from scan_relay.services.payloads import classify
from scan_relay.services.sessions import SessionService, short_session_label
from tests.conftest import FakeClock, InMemorySessionRepository


def _service(
    repository: InMemorySessionRepository,
    store: InMemoryPairingStore | None = None,
) -> SessionService:
    return SessionService(
        session_repository=repository,
        base_url="https://stock.example.com/",
        local_store=store,
        clock=FakeClock(),
    )


def test_create_session_persists_record(
    session_repository: InMemorySessionRepository,
) -> None:
    service = _service(session_repository)

    session = asyncio.run(service.create_session("owner-1"))

    assert UUID(session.id).version == 4
    assert session.owner_id == "owner-1"
    assert session_repository.sessions[session.id] == session


def test_create_session_propagates_store_failure(
    session_repository: InMemorySessionRepository,
) -> None:
    session_repository.available = False
    service = _service(session_repository)

    with pytest.raises(StoreUnavailable):
        asyncio.run(service.create_session("owner-1"))


def test_pairing_url_round_trips_through_classifier(
    session_repository: InMemorySessionRepository,
) -> None:
    service = _service(session_repository)

    url = service.pairing_url("abc-123")

    assert url == "https://stock.example.com/scan?session=abc-123"
    assert classify(url).reference == "abc-123"


def test_teardown_is_idempotent_and_best_effort(
    session_repository: InMemorySessionRepository,
) -> None:
    service = _service(session_repository)
    session = asyncio.run(service.create_session("owner-1"))

    asyncio.run(service.teardown_session(session.id))
    asyncio.run(service.teardown_session(session.id))
    session_repository.available = False
    asyncio.run(service.teardown_session(session.id))

    assert session_repository.sessions == {}


def test_resume_reuses_stored_session(
    session_repository: InMemorySessionRepository,
) -> None:
    store = InMemoryPairingStore()
    first = asyncio.run(_service(session_repository, store).resume_or_create("owner"))

    resumed = asyncio.run(_service(session_repository, store).resume_or_create("owner"))

    assert resumed == first
    assert store.load() == first.id
    assert len(session_repository.sessions) == 1


def test_resume_replaces_vanished_session(
    session_repository: InMemorySessionRepository,
) -> None:
    store = InMemoryPairingStore(session_id="gone")

    session = asyncio.run(_service(session_repository, store).resume_or_create("owner"))

    assert session.id != "gone"
    assert store.load() == session.id


def test_regenerate_replaces_stored_session(
    session_repository: InMemorySessionRepository,
) -> None:
    store = InMemoryPairingStore()
    service = _service(session_repository, store)
    first = asyncio.run(service.resume_or_create("owner"))

    second = asyncio.run(service.regenerate("owner"))

    assert second.id != first.id
    assert store.load() == second.id


def test_render_pairing_qr_returns_svg(
    session_repository: InMemorySessionRepository,
) -> None:
    svg = _service(session_repository).render_pairing_qr("abc-123")

    assert "<svg" in svg
    assert "path" in svg


def test_short_session_label() -> None:
    assert short_session_label("0f8fad5b-d9cb-469f-a165-70867728950e") == "0f8fad5b..."
    assert short_session_label("S1") == "S1"
