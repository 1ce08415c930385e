"""Device-local persistence of pairing state."""

from dataclasses import dataclass
from typing import Protocol


class PairingStore(Protocol):
    """Key-value record of the session this device last joined."""

    def save(self, session_id: str) -> None:
        """Persist the session id."""

    def load(self) -> str | None:
        """Return the persisted session id, if any."""

    def clear(self) -> None:
        """Remove the persisted session id."""


@dataclass
class InMemoryPairingStore(PairingStore):
    """Pairing store kept in process memory."""

    session_id: str | None = None

    def save(self, session_id: str) -> None:
        """Remember the session id."""
        self.session_id = session_id

    def load(self) -> str | None:
        """Return the remembered session id."""
        return self.session_id

    def clear(self) -> None:
        """Forget the session id."""
        self.session_id = None
