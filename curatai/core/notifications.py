"""User-facing notifications raised by controllers.

Controllers never render anything; they queue notifications here and the UI
drains the queue on every rerun (toasts in Streamlit, stderr in the CLI).
"""

import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)

LEVELS = ("info", "success", "warning", "error")


@dataclass
class Notification:
    """A single dismissible notification."""
    message: str
    level: str = "info"


class Notifier:
    """Queue of pending notifications."""

    def __init__(self):
        self._pending: List[Notification] = []

    def notify(self, message: str, level: str = "info") -> None:
        if level not in LEVELS:
            raise ValueError(f"Unknown notification level: {level}")
        logger.debug(f"[{level}] {message}")
        self._pending.append(Notification(message=message, level=level))

    def info(self, message: str) -> None:
        self.notify(message, "info")

    def success(self, message: str) -> None:
        self.notify(message, "success")

    def warning(self, message: str) -> None:
        self.notify(message, "warning")

    def error(self, message: str) -> None:
        self.notify(message, "error")

    def pop(self) -> List[Notification]:
        """Get and clear all pending notifications."""
        pending, self._pending = self._pending, []
        return pending

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    @property
    def messages(self) -> List[str]:
        return [n.message for n in self._pending]
