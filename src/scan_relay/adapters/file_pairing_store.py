"""JSON file-backed pairing store."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from scan_relay.services.pairing_store import PairingStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFilePairingStore(PairingStore):
    """Persists one key of a device-local JSON document.

    Write failures are logged and ignored: the pairing then simply does not
    survive a restart.
    """

    path: Path
    key: str = "session_id"

    @classmethod
    def create(cls, path: str, key: str = "session_id") -> "JsonFilePairingStore":
        """Create a store for a user-supplied path."""
        return cls(path=Path(path).expanduser(), key=key)

    def save(self, session_id: str) -> None:
        """Write the session id under the store key."""
        document = self._read()
        document[self.key] = session_id
        self._write(document)

    def load(self) -> str | None:
        """Read the session id back, if present."""
        value = self._read().get(self.key)
        return value if isinstance(value, str) and value else None

    def clear(self) -> None:
        """Remove the store key, keeping other keys in the document."""
        document = self._read()
        if document.pop(self.key, None) is not None:
            self._write(document)

    def _read(self) -> dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            _logger.warning("Pairing store unreadable: path=%s", self.path)
            return {}
        try:
            document = json.loads(raw)
        except ValueError:
            _logger.warning("Pairing store corrupt: path=%s", self.path)
            return {}
        return document if isinstance(document, dict) else {}

    def _write(self, document: dict[str, object]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(document), encoding="utf-8")
        except OSError:
            _logger.exception("Failed to persist pairing store: path=%s", self.path)
