"""Publish/subscribe relay of scan events between paired devices."""

import asyncio
import contextlib
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from scan_relay.domain.errors import MalformedPayload, StoreUnavailable
from scan_relay.domain.scans import PayloadKind, ScanEvent
from scan_relay.services.payloads import classify

_logger = logging.getLogger(__name__)

EventCallback = Callable[[ScanEvent], Awaitable[None] | None]

DEFAULT_FRESHNESS_WINDOW = timedelta(seconds=5)
DEFAULT_REPLAY_WINDOW = timedelta(seconds=60)
DEFAULT_POLL_INTERVAL_SECONDS = 0.5
DEFAULT_PAGE_SIZE = 100


class ScanEventRepository(Protocol):
    """Persistence interface for the scan event stream."""

    def append_event(self, event: ScanEvent) -> ScanEvent:
        """Append an event to its session's stream and return it."""

    def list_events(
        self, session_id: str, since: datetime, limit: int
    ) -> list[ScanEvent]:
        """Return events with ``timestamp >= since`` in commit order."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ScanRelay:
    """Relay channel between a scanning device and a session owner."""

    event_repository: ScanEventRepository
    freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW
    replay_window: timedelta = DEFAULT_REPLAY_WINDOW
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    page_size: int = DEFAULT_PAGE_SIZE
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def publish(
        self, session_id: str, payload: str, actor_id: str | None = None
    ) -> ScanEvent:
        """Append a scan event stamped with the current time.

        At most once: a store failure raises StoreUnavailable and the event
        is lost. Pairing payloads and blank payloads raise MalformedPayload.
        """
        kind = classify(payload).kind
        if kind is not PayloadKind.PRODUCT_REFERENCE:
            raise MalformedPayload(f"Payload cannot be relayed: kind={kind.value}")
        event = ScanEvent(
            id=uuid4(),
            session_id=session_id,
            payload=payload,
            actor_id=actor_id,
            timestamp=self.clock(),
        )
        stored = await asyncio.to_thread(self.event_repository.append_event, event)
        _logger.info(
            "Scan published: session=%s event=%s actor=%s",
            session_id,
            stored.id,
            actor_id,
        )
        return stored

    async def subscribe(
        self, session_id: str, on_event: EventCallback
    ) -> "Subscription":
        """Start delivering new events for a session to ``on_event``.

        Recent history is replayed once and passed through the freshness
        filter. The caller owns the returned subscription and must close it.
        """
        subscription = Subscription(
            relay=self,
            session_id=session_id,
            on_event=on_event,
            cursor=self.clock() - self.replay_window,
        )
        await subscription.poll_once()
        subscription.start()
        _logger.info("Subscribed: session=%s", session_id)
        return subscription

    @contextlib.asynccontextmanager
    async def listening(
        self, session_id: str, on_event: EventCallback
    ) -> AsyncIterator["Subscription"]:
        """Hold a subscription for the duration of a ``with`` block."""
        subscription = await self.subscribe(session_id, on_event)
        try:
            yield subscription
        finally:
            await subscription.close()

    def is_fresh(self, event: ScanEvent, now: datetime) -> bool:
        """Return True when the event is recent enough to surface."""
        return event.timestamp >= now - self.freshness_window


@dataclass(eq=False)
class Subscription:
    """Live listener on one session's event stream."""

    relay: ScanRelay
    session_id: str
    on_event: EventCallback
    cursor: datetime
    delivered: int = 0
    _seen: dict[UUID, datetime] = field(default_factory=dict)
    _task: asyncio.Task | None = None
    _closed: bool = False

    @property
    def closed(self) -> bool:
        """Return True once the subscription has been released."""
        return self._closed

    def start(self) -> None:
        """Start the background delivery loop."""
        if self._task is None and not self._closed:
            self._task = asyncio.create_task(self._run())

    async def poll_once(self) -> int:
        """Fetch and deliver pending events; return how many surfaced."""
        events = await asyncio.to_thread(
            self.relay.event_repository.list_events,
            self.session_id,
            self.cursor,
            self.relay.page_size,
        )
        now = self.relay.clock()
        surfaced = 0
        for event in events:
            if self._closed:
                break
            if event.id in self._seen:
                continue
            self._seen[event.id] = event.timestamp
            if not self.relay.is_fresh(event, now):
                _logger.debug(
                    "Stale scan dropped: session=%s event=%s", self.session_id, event.id
                )
                continue
            await self._dispatch(event)
            surfaced += 1
        self._advance_cursor(events)
        self._seen = {
            event_id: timestamp
            for event_id, timestamp in self._seen.items()
            if timestamp >= self.cursor
        }
        self.delivered += surfaced
        return surfaced

    async def close(self) -> None:
        """Release the subscription; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        task = self._task
        self._task = None
        if task is not None:
            task.cancel()
            if task is not asyncio.current_task():
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        _logger.info("Unsubscribed: session=%s", self.session_id)

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def _run(self) -> None:
        while not self._closed:
            await asyncio.sleep(self.relay.poll_interval)
            try:
                await self.poll_once()
            except StoreUnavailable:
                _logger.warning("Scan poll failed: session=%s", self.session_id)
            except Exception:
                _logger.exception("Scan poll error: session=%s", self.session_id)

    def _advance_cursor(self, events: list[ScanEvent]) -> None:
        # Commits can land out of timestamp order, so the cursor trails the
        # newest event by the freshness window; seen ids absorb the overlap.
        if not events:
            return
        newest = max(event.timestamp for event in events)
        if len(events) >= self.relay.page_size:
            lagged = newest
        else:
            lagged = newest - self.relay.freshness_window
        if lagged > self.cursor:
            self.cursor = lagged

    async def _dispatch(self, event: ScanEvent) -> None:
        try:
            result = self.on_event(event)
            if inspect.isawaitable(result):
                await result
        except Exception:
            _logger.exception(
                "Scan handler failed: session=%s event=%s", self.session_id, event.id
            )
