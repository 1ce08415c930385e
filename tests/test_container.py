"""Tests for container wiring."""

import asyncio
from datetime import timedelta

from scan_relay.containers import build_container, build_host, build_mobile_scanner


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.session_service.base_url == "https://stock.example.com"
    assert container.relay.freshness_window == timedelta(seconds=5)
    assert container.relay.poll_interval == 0.01
    asyncio.run(container.close_resources())


def test_build_host_and_scanner_share_settings(settings, tmp_path) -> None:
    configured = settings.model_copy(
        update={"pairing_store_path": str(tmp_path / "pairing.json")}
    )
    container = build_container(configured)

    host = build_host(container, owner_id="owner-1")
    scanner, close = build_mobile_scanner(configured, actor_id="phone-1")

    assert host.session_service.local_store is not None
    assert scanner.debouncer.window == timedelta(milliseconds=3000)
    assert scanner.actor_id == "phone-1"
    asyncio.run(close())
