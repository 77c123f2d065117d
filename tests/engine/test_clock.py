# tests/engine/test_clock.py
"""Tests for the Clock abstraction (SystemClock, MockClock, DEFAULT_CLOCK)."""

import pytest

from bulkgraph.engine.clock import DEFAULT_CLOCK, MockClock, SystemClock


class TestSystemClock:
    def test_monotonic_never_goes_backwards(self) -> None:
        clock = SystemClock()
        first = clock.monotonic()

        assert clock.monotonic() >= first

    def test_default_clock_is_system_clock(self) -> None:
        assert isinstance(DEFAULT_CLOCK, SystemClock)


class TestMockClock:
    def test_starts_at_given_time(self) -> None:
        assert MockClock(start=42.0).monotonic() == 42.0

    def test_advance_accumulates(self) -> None:
        clock = MockClock()

        clock.advance(1.5)
        clock.advance(0.25)

        assert clock.monotonic() == pytest.approx(1.75)

    def test_advance_zero_is_allowed(self) -> None:
        clock = MockClock(start=3.0)

        clock.advance(0)

        assert clock.monotonic() == 3.0

    def test_negative_advance_rejected(self) -> None:
        clock = MockClock()

        with pytest.raises(ValueError, match="negative"):
            clock.advance(-0.1)

        assert clock.monotonic() == 0.0
