"""Session-owner controller: pairing display and incoming scan handling."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from scan_relay.domain.devices import Product
from scan_relay.domain.errors import StoreUnavailable
from scan_relay.domain.scans import PayloadKind, ScanEvent
from scan_relay.domain.sessions import PairingSession
from scan_relay.services.payloads import classify
from scan_relay.services.presentation import NoticeKind, Presentation
from scan_relay.services.relay import ScanRelay, Subscription
from scan_relay.services.sessions import SessionService

_logger = logging.getLogger(__name__)

ScanAcceptedHandler = Callable[[str, str], Awaitable[None] | None]


class ProductLookup(Protocol):
    """Catalog lookup used to resolve scanned references."""

    def get_by_id(self, product_id: str) -> Product | None:
        """Return the product, or None when it does not exist."""


@dataclass
class ScanSessionHost:
    """Owns a pairing session and surfaces scans relayed into it."""

    session_service: SessionService
    relay: ScanRelay
    owner_id: str
    presentation: Presentation
    product_lookup: ProductLookup | None = None
    on_scan_accepted: ScanAcceptedHandler | None = None
    on_paired: Callable[[str], None] | None = None
    session: PairingSession | None = None
    paired: bool = False
    _subscription: Subscription | None = None
    _pairing_since: datetime | None = None
    _actors: set[str] = field(default_factory=set)

    async def open(self) -> PairingSession:
        """Resume or create the session and start listening to it."""
        if self._subscription is not None and self.session is not None:
            return self.session
        session = await self.session_service.resume_or_create(self.owner_id)
        self.session = session
        self._subscription = await self.relay.subscribe(session.id, self.handle_event)
        return session

    async def close(self) -> None:
        """Stop listening; safe to call more than once."""
        subscription = self._subscription
        self._subscription = None
        if subscription is not None:
            await subscription.close()

    async def new_session(self) -> PairingSession:
        """Replace the current session with a fresh one."""
        await self.close()
        session = await self.session_service.regenerate(self.owner_id)
        self.session = session
        self.paired = False
        self._actors.clear()
        self._subscription = await self.relay.subscribe(session.id, self.handle_event)
        return session

    def await_pairing(self) -> str:
        """Open a pairing window and return the payload to display.

        The first scan stamped after this call confirms the pairing.
        """
        if self.session is None:
            raise RuntimeError("Host is not open")
        self._pairing_since = self.relay.clock()
        self.paired = False
        return self.session_service.pairing_url(self.session.id)

    async def __aenter__(self) -> "ScanSessionHost":
        await self.open()
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def handle_event(self, event: ScanEvent) -> None:
        """Resolve one relayed scan and hand it to the UI layer."""
        self._track_actor(event)
        self._confirm_pairing(event)

        classified = classify(event.payload)
        if classified.kind is not PayloadKind.PRODUCT_REFERENCE:
            _logger.debug("Non-product scan ignored: event=%s", event.id)
            return
        product_id = classified.reference or event.payload

        if self.product_lookup is not None:
            try:
                product = await asyncio.to_thread(
                    self.product_lookup.get_by_id, product_id
                )
            except StoreUnavailable:
                self.presentation.notify(
                    NoticeKind.ERROR, f"Could not look up product {product_id}."
                )
                return
            if product is None:
                self.presentation.notify(
                    NoticeKind.WARNING, f"Product not found: {product_id}"
                )
                return
            self.presentation.notify(
                NoticeKind.SUCCESS, f"Mobile scan received: {product.name}"
            )
        else:
            self.presentation.notify(
                NoticeKind.SUCCESS, f"Mobile scan received: {product_id}"
            )

        if self.on_scan_accepted is not None:
            result = self.on_scan_accepted(event.payload, product_id)
            if inspect.isawaitable(result):
                await result

    def _confirm_pairing(self, event: ScanEvent) -> None:
        if self._pairing_since is None or event.timestamp <= self._pairing_since:
            return
        self._pairing_since = None
        self.paired = True
        _logger.info("Scanner paired: session=%s", event.session_id)
        self.presentation.notify(NoticeKind.SUCCESS, "Paired!")
        if self.on_paired is not None:
            self.on_paired(event.session_id)

    def _track_actor(self, event: ScanEvent) -> None:
        if event.actor_id is None or event.actor_id in self._actors:
            return
        self._actors.add(event.actor_id)
        if len(self._actors) > 1:
            _logger.warning(
                "Multiple scanners on one session: session=%s actors=%s",
                event.session_id,
                sorted(self._actors),
            )
