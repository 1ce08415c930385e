"""Domain models for relayed scans."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


@dataclass(frozen=True)
class ScanEvent:
    """One relayed scan, stamped by the publishing device."""

    id: UUID
    session_id: str
    payload: str
    actor_id: str | None
    timestamp: datetime


class PayloadKind(str, Enum):
    """Classification of a decoded scan string."""

    PAIRING = "PAIRING"
    PRODUCT_REFERENCE = "PRODUCT_REFERENCE"
    UNRECOGNIZED = "UNRECOGNIZED"


@dataclass(frozen=True)
class ClassifiedPayload:
    """Result of classifying a decoded scan string."""

    kind: PayloadKind
    reference: str | None = None


class ScanOutcome(str, Enum):
    """What the scanning device did with one decoded frame."""

    DEBOUNCED = "DEBOUNCED"
    PAIRED = "PAIRED"
    PUBLISHED = "PUBLISHED"
    PUBLISH_FAILED = "PUBLISH_FAILED"
    NOT_PAIRED = "NOT_PAIRED"
    DROPPED = "DROPPED"
