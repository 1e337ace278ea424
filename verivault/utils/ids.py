"""
Submission ID generators
Each endpoint family keeps its own namespace:
    RPT-000001      PIN-verified PDF reports (counter)
    DL-<base36>     daily log submissions (timestamp)
    VV-<base36>     watermarked HTML reports (timestamp)
IDs are unique for the lifetime of the process only.
"""
import threading
from typing import Callable, Optional

from .timeutil import now_millis, to_base36


class CounterIdGenerator:
    """Zero-padded monotonic counter, e.g. RPT-000042"""

    def __init__(self, prefix: str, width: int = 6, start: int = 1):
        self.prefix = prefix
        self.width = width
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return f"{self.prefix}-{value:0{self.width}d}"


class TimestampIdGenerator:
    """
    Base36 millisecond timestamp, e.g. DL-LZ3K9Q2A

    Two calls inside the same millisecond would collide, so the generator
    never hands out a timestamp lower than or equal to the previous one.
    """

    def __init__(self, prefix: str, clock: Optional[Callable[[], int]] = None):
        self.prefix = prefix
        self._clock = clock or now_millis
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = self._clock()
            if value <= self._last:
                value = self._last + 1
            self._last = value
        return f"{self.prefix}-{to_base36(value)}"
