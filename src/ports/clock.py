"""Источники времени для пула (Unix seconds, int)."""

import time
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> int:
        ...


class SystemClock:
    """Системное время."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Управляемое время для тестов и симуляций."""

    def __init__(self, start_time: Optional[int] = None):
        self._now = int(time.time()) if start_time is None else start_time

    def now(self) -> int:
        return self._now

    def fast_forward(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"Cannot move clock backwards: {seconds}")
        self._now += seconds
        return self._now
