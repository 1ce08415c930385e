"""Request and response models for the relay API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from scan_relay.domain.scans import ScanEvent
from scan_relay.domain.sessions import PairingSession


class CreateSessionRequest(BaseModel):
    """Body for creating a pairing session."""

    owner_id: str = Field(min_length=1)


class SessionResponse(BaseModel):
    """A pairing session and the payload that joins it."""

    id: str
    owner_id: str
    created_at: datetime
    pairing_url: str

    @classmethod
    def from_session(
        cls, session: PairingSession, pairing_url: str
    ) -> "SessionResponse":
        return cls(
            id=session.id,
            owner_id=session.owner_id,
            created_at=session.created_at,
            pairing_url=pairing_url,
        )


class PublishScanRequest(BaseModel):
    """Body for publishing a scan."""

    payload: str = Field(min_length=1)
    actor_id: str | None = None


class ScanEventResponse(BaseModel):
    """A relayed scan event."""

    id: UUID
    session_id: str
    payload: str
    actor_id: str | None = None
    timestamp: datetime

    @classmethod
    def from_event(cls, event: ScanEvent) -> "ScanEventResponse":
        return cls(
            id=event.id,
            session_id=event.session_id,
            payload=event.payload,
            actor_id=event.actor_id,
            timestamp=event.timestamp,
        )
