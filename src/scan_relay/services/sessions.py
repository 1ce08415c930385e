"""Pairing session lifecycle on the primary device."""

import asyncio
import io
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

import qrcode
from qrcode.image.svg import SvgPathImage

from scan_relay.domain.errors import StoreUnavailable
from scan_relay.domain.sessions import PairingSession
from scan_relay.services.pairing_store import PairingStore

_logger = logging.getLogger(__name__)

_SHORT_LABEL_LENGTH = 8


class SessionRepository(Protocol):
    """Persistence interface for pairing sessions."""

    def create_session(self, session: PairingSession) -> PairingSession:
        """Persist a new session and return it."""

    def get_session(self, session_id: str) -> PairingSession | None:
        """Return a session by id, if present."""

    def delete_session(self, session_id: str) -> None:
        """Delete a session; deleting a missing session is a no-op."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionService:
    """Creates pairing sessions and exposes them as pairing payloads."""

    session_repository: SessionRepository
    base_url: str
    local_store: PairingStore | None = None
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def create_session(self, owner_id: str) -> PairingSession:
        """Mint a session id and write the session to the store.

        Raises StoreUnavailable when the store cannot be reached; no retry.
        """
        session = PairingSession(
            id=str(uuid4()), owner_id=owner_id, created_at=self.clock()
        )
        created = await asyncio.to_thread(
            self.session_repository.create_session, session
        )
        _logger.info("Session created: id=%s owner=%s", created.id, owner_id)
        return created

    async def teardown_session(self, session_id: str) -> None:
        """Best-effort removal of a session record."""
        try:
            await asyncio.to_thread(self.session_repository.delete_session, session_id)
        except StoreUnavailable:
            _logger.warning("Session teardown failed: id=%s", session_id)
            return
        _logger.info("Session torn down: id=%s", session_id)

    async def resume_or_create(self, owner_id: str) -> PairingSession:
        """Reuse the session stored on this device, or create one."""
        stored_id = self.local_store.load() if self.local_store else None
        if stored_id:
            existing = await asyncio.to_thread(
                self.session_repository.get_session, stored_id
            )
            if existing is not None:
                _logger.info("Session resumed: id=%s", existing.id)
                return existing
            _logger.info("Stored session no longer exists: id=%s", stored_id)
        return await self.regenerate(owner_id)

    async def regenerate(self, owner_id: str) -> PairingSession:
        """Create a fresh session and remember it on this device."""
        session = await self.create_session(owner_id)
        if self.local_store is not None:
            self.local_store.save(session.id)
        return session

    def pairing_url(self, session_id: str) -> str:
        """Return the payload a secondary device scans to join."""
        return f"{self.base_url.rstrip('/')}/scan?session={session_id}"

    def render_pairing_qr(self, session_id: str) -> str:
        """Render the pairing URL as an SVG QR code."""
        qr = qrcode.QRCode(
            error_correction=qrcode.constants.ERROR_CORRECT_H,
            box_size=10,
            border=4,
            image_factory=SvgPathImage,
        )
        qr.add_data(self.pairing_url(session_id))
        qr.make(fit=True)
        buffer = io.BytesIO()
        qr.make_image().save(buffer)
        return buffer.getvalue().decode("utf-8")


def short_session_label(session_id: str) -> str:
    """Abbreviate a session id for display."""
    if len(session_id) <= _SHORT_LABEL_LENGTH:
        return session_id
    return f"{session_id[:_SHORT_LABEL_LENGTH]}..."
