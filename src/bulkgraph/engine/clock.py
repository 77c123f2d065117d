# src/bulkgraph/engine/clock.py
"""Clock abstraction for submission runtime measurement.

The runtime reported in a ComputerResult is the difference of two
monotonic readings taken by the computer. Production code uses
SystemClock; tests inject MockClock and advance it from inside fake
engines to get exact runtimes.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Abstract monotonic clock."""

    def monotonic(self) -> float:
        """Return monotonic time in seconds (never goes backwards)."""
        ...


class SystemClock:
    """Production clock delegating to time.monotonic()."""

    def monotonic(self) -> float:
        return time.monotonic()


class MockClock:
    """Controllable clock for deterministic runtime assertions.

    Example:
        clock = MockClock()

        class SlowEngine:
            def run(self, job):
                clock.advance(2.5)
                return True

        result = GraphComputer(..., bsp_engine=SlowEngine(), clock=clock).program(p).submit().result()
        assert result.runtime_ms == 2500.0
    """

    def __init__(self, start: float = 0.0) -> None:
        self._current = start

    def monotonic(self) -> float:
        return self._current

    def advance(self, seconds: float) -> None:
        """Advance mock time.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance time by negative amount: {seconds}")
        self._current += seconds


DEFAULT_CLOCK: Clock = SystemClock()
