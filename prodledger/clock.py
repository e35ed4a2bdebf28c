# prodledger/clock.py
"""Ledger time sources. The registry stamps records with clock.now()."""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    @abstractmethod
    def now(self) -> int:
        pass


class SystemClock(Clock):
    """Unix time in whole seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock(Clock):
    """
    A clock that only moves when told to, like a block height.

    Usage:
        clock = ManualClock()
        clock.advance()      # 1
        clock.set(100)
    """

    def __init__(self, start: int = 0):
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, by: int = 1) -> int:
        if by < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += by
        return self._now

    def set(self, value: int) -> None:
        if value < self._now:
            raise ValueError(f"Clock cannot move backwards ({value} < {self._now})")
        self._now = value
