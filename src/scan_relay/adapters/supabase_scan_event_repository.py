"""Supabase-backed scan event stream."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from scan_relay.adapters.supabase_errors import store_errors
from scan_relay.domain.errors import StoreUnavailable
from scan_relay.domain.scans import ScanEvent
from scan_relay.services.relay import ScanEventRepository

_TABLE = "scan_events"
_COLUMNS = "id, session_id, payload, actor_id, scanned_at"


@dataclass
class SupabaseScanEventRepository(ScanEventRepository):
    """Supabase implementation of the scan event stream."""

    client: Client

    def append_event(self, event: ScanEvent) -> ScanEvent:
        """Insert an event row."""
        with store_errors("append_event"):
            response = (
                self.client.table(_TABLE)
                .insert(
                    {
                        "id": str(event.id),
                        "session_id": event.session_id,
                        "payload": event.payload,
                        "actor_id": event.actor_id,
                        "scanned_at": event.timestamp.isoformat(),
                    }
                )
                .execute()
            )
        if not response.data:
            raise StoreUnavailable("Failed to append scan event")
        return _to_event(response.data[0])

    def list_events(
        self, session_id: str, since: datetime, limit: int
    ) -> list[ScanEvent]:
        """Return events for a session from ``since`` onward, oldest first."""
        with store_errors("list_events"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("session_id", session_id)
                .gte("scanned_at", since.isoformat())
                .order("scanned_at")
                .limit(limit)
                .execute()
            )
        return [_to_event(row) for row in response.data or []]


def _to_event(row: dict[str, object]) -> ScanEvent:
    actor_id = row.get("actor_id")
    return ScanEvent(
        id=UUID(str(row["id"])),
        session_id=str(row["session_id"]),
        payload=str(row["payload"]),
        actor_id=str(actor_id) if actor_id is not None else None,
        timestamp=datetime.fromisoformat(str(row["scanned_at"])),
    )
