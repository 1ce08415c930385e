"""Supabase-backed pairing session repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from scan_relay.adapters.supabase_errors import store_errors
from scan_relay.domain.errors import StoreUnavailable
from scan_relay.domain.sessions import PairingSession
from scan_relay.services.sessions import SessionRepository

_TABLE = "scan_sessions"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for pairing sessions."""

    client: Client

    def create_session(self, session: PairingSession) -> PairingSession:
        """Insert a session row and return it."""
        with store_errors("create_session"):
            response = (
                self.client.table(_TABLE)
                .insert(
                    {
                        "id": session.id,
                        "owner_id": session.owner_id,
                        "created_at": session.created_at.isoformat(),
                    }
                )
                .execute()
            )
        if not response.data:
            raise StoreUnavailable("Failed to create session")
        return _to_session(response.data[0])

    def get_session(self, session_id: str) -> PairingSession | None:
        """Return a session by id, if present."""
        with store_errors("get_session"):
            response = (
                self.client.table(_TABLE)
                .select("id, owner_id, created_at")
                .eq("id", session_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _to_session(response.data[0])

    def delete_session(self, session_id: str) -> None:
        """Delete a session row."""
        with store_errors("delete_session"):
            self.client.table(_TABLE).delete().eq("id", session_id).execute()


def _to_session(row: dict[str, object]) -> PairingSession:
    return PairingSession(
        id=str(row["id"]),
        owner_id=str(row["owner_id"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
