# burncore/clock.py

import time
from typing import Protocol


class HeightSource(Protocol):
    def current_height(self) -> int:
        ...


class SlotHeightSource:
    """Height is the current time slot; never goes backwards even if the wall clock does."""

    def __init__(self, slot_duration: int = 60, time_fn=time.time):
        if slot_duration <= 0:
            raise ValueError("slot_duration must be positive")
        self.slot_duration = slot_duration
        self.time_fn = time_fn
        self._last = 0

    def current_height(self) -> int:
        slot = int(self.time_fn() // self.slot_duration)
        self._last = max(self._last, slot)
        return self._last


class CounterHeightSource:
    def __init__(self, start: int = 0):
        self.height = start

    def current_height(self) -> int:
        self.height += 1
        return self.height
