"""
Inter-packet pacing and transient-failure backoff.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

MS_IN_SEC = 1000
USEC_IN_SEC = 1000000
USEC_IN_MS = 1000


@dataclass(frozen=True)
class Delay:
    seconds: int
    nanoseconds: int

    @property
    def total(self) -> float:
        return self.seconds + self.nanoseconds / 1e9

    def sleep(self) -> None:
        time.sleep(self.total)


def pacing_delay(delay: int, nanoseconds: bool = False) -> Delay:
    """
    Split the configured delay into whole seconds and a nanosecond remainder.

    The value is divided by 1000 (or by a million with the nanoseconds flag)
    for the seconds part. The remainder is scaled by 1000 (or 1 with the flag)
    into the nanosecond part, so 1500 means 1s + 500000ns and, with the flag,
    1500000 means 1s + 500000ns as well.
    """
    units = USEC_IN_SEC if nanoseconds else MS_IN_SEC
    scale = 1 if nanoseconds else USEC_IN_MS
    return Delay(seconds=delay // units, nanoseconds=(delay % units) * scale)


class Backoff:
    """
    Doubling retry delay in milliseconds, capped at a ceiling.
    """

    def __init__(self, default: int, maximum: int) -> None:
        self.default = default
        self.maximum = maximum
        self.current = default

    def sleep(self) -> None:
        time.sleep(self.current / MS_IN_SEC)

    def grow(self) -> int:
        self.current = min(self.current << 1, self.maximum)
        return self.current

    def reset(self) -> None:
        self.current = self.default
