"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from scan_relay.adapters.file_pairing_store import JsonFilePairingStore
from scan_relay.adapters.relay_http_client import HttpxRelayClient
from scan_relay.adapters.supabase_product_repository import SupabaseProductRepository
from scan_relay.adapters.supabase_scan_event_repository import (
    SupabaseScanEventRepository,
)
from scan_relay.adapters.supabase_session_repository import SupabaseSessionRepository
from scan_relay.config import Settings
from scan_relay.services.debounce import ScanDebouncer
from scan_relay.services.host import ProductLookup, ScanSessionHost
from scan_relay.services.presentation import LoggingPresentation, Presentation
from scan_relay.services.relay import ScanEventRepository, ScanRelay
from scan_relay.services.scanner import MobileScanner
from scan_relay.services.sessions import SessionService

_PRIMARY_SESSION_KEY = "primary_session_id"
_PAIRED_SESSION_KEY = "paired_session_id"


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    relay: ScanRelay
    product_lookup: ProductLookup
    close_resources: Callable[[], Awaitable[None]]


def build_relay(
    settings: Settings, event_repository: ScanEventRepository
) -> ScanRelay:
    """Create a relay configured from settings."""
    return ScanRelay(
        event_repository=event_repository,
        freshness_window=timedelta(seconds=settings.freshness_window_seconds),
        replay_window=timedelta(seconds=settings.replay_window_seconds),
        poll_interval=settings.poll_interval_seconds,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_service = SessionService(
        session_repository=SupabaseSessionRepository(supabase_client),
        base_url=resolved_settings.public_base_url,
    )
    relay = build_relay(
        resolved_settings, SupabaseScanEventRepository(supabase_client)
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        relay=relay,
        product_lookup=SupabaseProductRepository(supabase_client),
        close_resources=close_resources,
    )


def build_host(
    container: AppContainer,
    owner_id: str,
    presentation: Presentation | None = None,
) -> ScanSessionHost:
    """Create a session-owner controller that remembers its session locally."""
    session_service = SessionService(
        session_repository=container.session_service.session_repository,
        base_url=container.session_service.base_url,
        local_store=JsonFilePairingStore.create(
            container.settings.pairing_store_path, key=_PRIMARY_SESSION_KEY
        ),
    )
    return ScanSessionHost(
        session_service=session_service,
        relay=container.relay,
        owner_id=owner_id,
        presentation=presentation or LoggingPresentation(),
        product_lookup=container.product_lookup,
    )


def build_mobile_scanner(
    settings: Settings,
    actor_id: str | None = None,
    presentation: Presentation | None = None,
) -> tuple[MobileScanner, Callable[[], Awaitable[None]]]:
    """Create a scanning-device controller publishing over HTTP."""
    relay_client = HttpxRelayClient.create(settings.relay_api_url)
    scanner = MobileScanner(
        publisher=relay_client,
        pairing_store=JsonFilePairingStore.create(
            settings.pairing_store_path, key=_PAIRED_SESSION_KEY
        ),
        presentation=presentation or LoggingPresentation(),
        debouncer=ScanDebouncer.from_milliseconds(settings.debounce_window_ms),
        actor_id=actor_id,
    )
    return scanner, relay_client.close
