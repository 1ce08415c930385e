"""Suppression of repeated decodes of the same code."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

DEFAULT_DEBOUNCE_WINDOW_MS = 3000


@dataclass
class ScanDebouncer:
    """Accepts a payload once per debounce window.

    A code held in front of the camera is decoded on many consecutive frames;
    only the first decode inside the window is accepted. A different payload
    is always accepted and restarts the window.
    """

    window: timedelta = field(
        default_factory=lambda: timedelta(milliseconds=DEFAULT_DEBOUNCE_WINDOW_MS)
    )
    last_payload: str | None = None
    last_payload_time: datetime | None = None

    @classmethod
    def from_milliseconds(cls, window_ms: int) -> "ScanDebouncer":
        """Create a debouncer from a window expressed in milliseconds."""
        return cls(window=timedelta(milliseconds=window_ms))

    def should_accept(self, payload: str, now: datetime) -> bool:
        """Return False if the payload repeats within the window."""
        if (
            payload == self.last_payload
            and self.last_payload_time is not None
            and now - self.last_payload_time < self.window
        ):
            return False
        self.last_payload = payload
        self.last_payload_time = now
        return True

    def reset(self) -> None:
        """Forget the last accepted payload."""
        self.last_payload = None
        self.last_payload_time = None
