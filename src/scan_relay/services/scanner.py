"""Scanning-device controller: pairing state and scan publishing."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from scan_relay.domain.errors import StoreUnavailable
from scan_relay.domain.scans import PayloadKind, ScanOutcome
from scan_relay.domain.sessions import PairingState
from scan_relay.services.debounce import ScanDebouncer
from scan_relay.services.pairing_store import PairingStore
from scan_relay.services.payloads import classify
from scan_relay.services.presentation import NoticeKind, Presentation, feedback_label
from scan_relay.services.sessions import short_session_label

_logger = logging.getLogger(__name__)

SCAN_VIBRATION_MS = 100


class ScanPublisher(Protocol):
    """Anything that can put a scan on the relay."""

    async def publish(
        self, session_id: str, payload: str, actor_id: str | None = None
    ) -> object:
        """Publish one scan for a session."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MobileScanner:
    """Turns camera decodes into pairing transitions and relayed scans."""

    publisher: ScanPublisher
    pairing_store: PairingStore
    presentation: Presentation
    debouncer: ScanDebouncer = field(default_factory=ScanDebouncer)
    actor_id: str | None = None
    on_paired: Callable[[str], None] | None = None
    on_unpaired: Callable[[], None] | None = None
    clock: Callable[[], datetime] = field(default=_utcnow)
    state: PairingState = PairingState.UNPAIRED
    session_id: str | None = None
    scan_count: int = 0

    def start(self) -> PairingState:
        """Restore a pairing persisted by an earlier run."""
        stored = self.pairing_store.load()
        if stored:
            self.session_id = stored
            self.state = PairingState.PAIRED
            _logger.info("Pairing restored: session=%s", stored)
        return self.state

    async def handle_decoded(
        self, decoded: str, now: datetime | None = None
    ) -> ScanOutcome:
        """Process one decoded frame from the camera."""
        moment = now or self.clock()
        if not self.debouncer.should_accept(decoded, moment):
            return ScanOutcome.DEBOUNCED

        classified = classify(decoded)
        if classified.kind is PayloadKind.UNRECOGNIZED:
            _logger.debug("Unrecognized payload dropped")
            return ScanOutcome.DROPPED
        if classified.kind is PayloadKind.PAIRING:
            self._pair(classified.reference or "")
            return ScanOutcome.PAIRED

        if self.state is not PairingState.PAIRED or not self.session_id:
            self.presentation.notify(
                NoticeKind.WARNING, "Scan the pairing code before scanning products."
            )
            return ScanOutcome.NOT_PAIRED

        reference = classified.reference or decoded
        self.presentation.vibrate(SCAN_VIBRATION_MS)
        try:
            await self.publisher.publish(self.session_id, reference, self.actor_id)
        except StoreUnavailable:
            _logger.warning("Scan publish failed: session=%s", self.session_id)
            self.presentation.notify(
                NoticeKind.ERROR, "Scan could not be sent. Please try again."
            )
            return ScanOutcome.PUBLISH_FAILED

        self.scan_count += 1
        self.presentation.notify(
            NoticeKind.SUCCESS, f"Added: {feedback_label(reference)}"
        )
        return ScanOutcome.PUBLISHED

    def unpair(self) -> None:
        """Forget the current session on explicit user request."""
        previous = self.session_id
        self.pairing_store.clear()
        self.state = PairingState.UNPAIRED
        self.session_id = None
        self.debouncer.reset()
        _logger.info("Unpaired: session=%s", previous)
        if self.on_unpaired is not None:
            self.on_unpaired()

    def _pair(self, session_id: str) -> None:
        self.pairing_store.save(session_id)
        self.session_id = session_id
        self.state = PairingState.PAIRED
        _logger.info("Paired: session=%s", session_id)
        self.presentation.notify(
            NoticeKind.SUCCESS, f"Paired with session {short_session_label(session_id)}"
        )
        if self.on_paired is not None:
            self.on_paired(session_id)

