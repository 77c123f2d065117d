# tests/conftest.py
"""Shared test fixtures for bulkgraph.

Fixtures build a GraphComputer against in-memory fakes (see
tests/helpers/fakes.py). Every engine and storage call lands in one
ExecutionLog so ordering can be asserted across engines.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from bulkgraph.core.config import ComputerSettings
from bulkgraph.core.events import EventBus
from bulkgraph.engine.clock import MockClock
from bulkgraph.engine.computer import GraphComputer
from tests.helpers.fakes import INPUT, OUTPUT, ExecutionLog, InMemoryStorage, RecordingBspEngine, RecordingMapReduceEngine


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Computer fixtures
# =============================================================================


@pytest.fixture
def computer_settings() -> ComputerSettings:
    return ComputerSettings(input_location=INPUT, output_location=OUTPUT, properties={"bsp.workers": 4})


@pytest.fixture
def storage() -> InMemoryStorage:
    storage = InMemoryStorage()
    storage.create(INPUT + "/part-00000")
    return storage


@pytest.fixture
def clock() -> MockClock:
    return MockClock(start=100.0)


@pytest.fixture
def execution_log(clock: MockClock) -> ExecutionLog:
    return ExecutionLog(clock)


@pytest.fixture
def bsp_engine(execution_log: ExecutionLog, storage: InMemoryStorage) -> RecordingBspEngine:
    return RecordingBspEngine(execution_log, storage)


@pytest.fixture
def map_reduce_engine(execution_log: ExecutionLog) -> RecordingMapReduceEngine:
    return RecordingMapReduceEngine(execution_log)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def make_computer(
    computer_settings: ComputerSettings,
    storage: InMemoryStorage,
    bsp_engine: RecordingBspEngine,
    map_reduce_engine: RecordingMapReduceEngine,
    event_bus: EventBus,
    clock: MockClock,
) -> Callable[..., GraphComputer]:
    """Factory building a computer wired to the shared fakes.

    Keyword arguments override any constructor argument.
    """

    def _make(**overrides: Any) -> GraphComputer:
        kwargs: dict[str, Any] = {
            "storage": storage,
            "bsp_engine": bsp_engine,
            "map_reduce_engine": map_reduce_engine,
            "event_bus": event_bus,
            "clock": clock,
            "environ": {},
        }
        kwargs.update(overrides)
        settings_ = kwargs.pop("settings", computer_settings)
        return GraphComputer(settings_, **kwargs)

    return _make
