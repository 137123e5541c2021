"""
User-facing confirmation messages for cart actions.
"""
import logging
from collections import deque
from typing import Deque, Optional

logger = logging.getLogger(__name__)


class Notifier:
    """Logs each confirmation and keeps the most recent ones for display"""

    def __init__(self, history: int = 20):
        self.messages: Deque[str] = deque(maxlen=history)

    def notify(self, message: str) -> None:
        logger.info(f"Notification: {message}")
        self.messages.append(message)

    @property
    def last(self) -> Optional[str]:
        return self.messages[-1] if self.messages else None
