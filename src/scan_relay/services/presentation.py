"""Presentation collaborator used for user feedback."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

_logger = logging.getLogger(__name__)

_FEEDBACK_LABEL_LENGTH = 25


class NoticeKind(str, Enum):
    """Severity of a user-facing notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Presentation(Protocol):
    """Interface the UI layer implements to surface feedback."""

    def notify(self, kind: NoticeKind, message: str) -> None:
        """Show a non-blocking notification."""

    def vibrate(self, duration_ms: int) -> None:
        """Trigger haptic feedback."""


@dataclass
class LoggingPresentation(Presentation):
    """Presentation that writes feedback to the application log."""

    def notify(self, kind: NoticeKind, message: str) -> None:
        """Log the notification at a level matching its kind."""
        level = {
            NoticeKind.WARNING: logging.WARNING,
            NoticeKind.ERROR: logging.ERROR,
        }.get(kind, logging.INFO)
        _logger.log(level, "%s: %s", kind.value, message)

    def vibrate(self, duration_ms: int) -> None:
        """Haptics are unavailable; record the request."""
        _logger.debug("vibrate: duration_ms=%s", duration_ms)


def feedback_label(reference: str) -> str:
    """Shorten a scanned reference for an on-screen confirmation."""
    if len(reference) <= _FEEDBACK_LABEL_LENGTH:
        return reference
    return f"{reference[:_FEEDBACK_LABEL_LENGTH]}..."
