from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from .errors import MercuryError


class RequestScope:
    """Deadline and cancellation flag shared by every backend call of one inbound request."""

    def __init__(self, deadline_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._deadline = clock() + deadline_seconds
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self, cap: Optional[float] = None) -> float:
        """Seconds left before the deadline, at most ``cap``.

        Raises ``MercuryError`` when the scope was cancelled or has expired.
        """

        if self._cancelled.is_set():
            raise MercuryError("cancelled", "Request was cancelled")
        left = self._deadline - self._clock()
        if left <= 0:
            raise MercuryError("timeout", "Request deadline exceeded")
        return left if cap is None else min(left, cap)
