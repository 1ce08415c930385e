"""HTTP client for publishing scans to a remote relay."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

import httpx

from scan_relay.domain.errors import MalformedPayload, StoreUnavailable
from scan_relay.domain.scans import ScanEvent
from scan_relay.services.scanner import ScanPublisher


@dataclass
class HttpxRelayClient(ScanPublisher):
    """Publishes scans through the relay's HTTP API."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxRelayClient":
        """Create a relay client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def publish(
        self, session_id: str, payload: str, actor_id: str | None = None
    ) -> ScanEvent:
        """Post a scan to the relay and return the stored event."""
        url = f"{self.base_url}/sessions/{session_id}/scans"
        try:
            response = await self.http_client.post(
                url, json={"payload": payload, "actor_id": actor_id}, timeout=10
            )
        except httpx.HTTPError as exc:
            raise StoreUnavailable(f"Relay unreachable: {exc}") from exc
        if response.status_code == httpx.codes.UNPROCESSABLE_ENTITY:
            raise MalformedPayload(response.text)
        if response.is_server_error:
            raise StoreUnavailable(f"Relay error: status={response.status_code}")
        response.raise_for_status()
        body = response.json()
        return ScanEvent(
            id=UUID(body["id"]),
            session_id=body["session_id"],
            payload=body["payload"],
            actor_id=body.get("actor_id"),
            timestamp=datetime.fromisoformat(body["timestamp"]),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
