"""Domain models for pairing sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class PairingState(str, Enum):
    """Pairing state of a secondary (scanning) device."""

    UNPAIRED = "UNPAIRED"
    PAIRED = "PAIRED"


@dataclass(frozen=True)
class PairingSession:
    """Represents a pairing session owned by a primary device."""

    id: str
    owner_id: str
    created_at: datetime
