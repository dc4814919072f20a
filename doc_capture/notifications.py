"""
Transient user notifications (snackbar queue)

Messages are shown one at a time in the order they were posted. Posting
never blocks; the screen asks for the current message on every frame.
"""

import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional


class Duration(Enum):
    """How long a notification stays on screen, in seconds"""
    SHORT = 4.0
    LONG = 10.0


@dataclass
class Notification:
    message: str
    duration: Duration
    shown_at: Optional[float] = None

    def expired(self, now: float) -> bool:
        return self.shown_at is not None and now - self.shown_at >= self.duration.value


class NotificationQueue:
    """FIFO queue of notifications with a single visible slot"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._queue: Deque[Notification] = deque()

    def notify(self, message: str, duration: Duration = Duration.SHORT):
        self._queue.append(Notification(message or "Error", duration))

    def current(self, now: Optional[float] = None) -> Optional[Notification]:
        """
        Return the notification on display, retiring expired ones

        Args:
            now: Timestamp from the queue's clock (defaults to the clock)
        """
        if now is None:
            now = self._clock()
        while self._queue:
            head = self._queue[0]
            if head.shown_at is None:
                head.shown_at = now
                return head
            if not head.expired(now):
                return head
            self._queue.popleft()
        return None

    def dismiss(self):
        """Drop the notification currently on display"""
        if self._queue:
            self._queue.popleft()

    def pending(self) -> List[Notification]:
        return list(self._queue)

    def __len__(self):
        return len(self._queue)
