"""Host clock sources."""

import time
from typing import Protocol

from multisig_core.models.base import PosixTime


class Clock(Protocol):
    def now(self) -> PosixTime: ...


class SystemClock:
    """Wall-clock time in whole unix seconds"""

    def now(self) -> PosixTime:
        return int(time.time())


class FixedClock:
    """Manually driven clock for simulations and tests"""

    def __init__(self, timestamp: PosixTime = 0) -> None:
        self.timestamp = timestamp

    def now(self) -> PosixTime:
        return self.timestamp

    def advance(self, seconds: int) -> PosixTime:
        self.timestamp += seconds
        return self.timestamp
