# tests/helpers/fakes.py
"""In-memory fakes for the engine and storage boundaries.

The fakes record everything they are asked to do into a shared
ExecutionLog so tests can assert on ordering across engines:

    log = ExecutionLog()
    bsp = RecordingBspEngine(log, storage)
    mr = RecordingMapReduceEngine(log)
    ...
    assert log.entries == ["bsp:start:...", "bsp:end:...", "mr:start:a", ...]
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bulkgraph.contracts import (
    BspJobSpec,
    Location,
    MapReduce,
    MapReduceJobResult,
    MapReduceJobSpec,
    MessageCombiner,
    Persist,
    ResultGraph,
)
from bulkgraph.engine.clock import MockClock

MEM_SCHEME = "mem"

INPUT = "mem://cluster/graphs/input"
OUTPUT = "mem://cluster/graphs/output"


class ExecutionLog:
    """Thread-safe ordered record of engine activity."""

    def __init__(self, clock: MockClock | None = None) -> None:
        self._lock = threading.Lock()
        self._entries: list[str] = []
        self.clock = clock

    def record(self, entry: str) -> None:
        with self._lock:
            self._entries.append(entry)

    def tick(self, seconds: float) -> None:
        if self.clock is not None:
            self.clock.advance(seconds)

    @property
    def entries(self) -> list[str]:
        with self._lock:
            return list(self._entries)


class InMemoryStorage:
    """DistributedStorage keeping a set of existing ``mem://`` locations.

    A location exists if it was created, or if anything below it was.
    """

    SCHEMES: tuple[str, ...] = (MEM_SCHEME,)

    def __init__(self, *, fail_copy: bool = False, fail_delete: bool = False) -> None:
        self._lock = threading.Lock()
        self._paths: set[str] = set()
        self.fail_copy = fail_copy
        self.fail_delete = fail_delete
        self.copies: list[tuple[Path, Location]] = []
        self.deleted: list[Location] = []

    def create(self, location: Location | str) -> Location:
        location = Location.parse(location)
        with self._lock:
            self._paths.add(str(location))
        return location

    def supports(self, location: Location) -> bool:
        return location.scheme in self.SCHEMES

    def exists(self, location: Location) -> bool:
        key = str(location)
        with self._lock:
            return any(path == key or path.startswith(key + "/") for path in self._paths)

    def delete(self, location: Location, recursive: bool = True) -> bool:
        if self.fail_delete:
            raise OSError(f"delete refused for {location}")
        key = str(location)
        with self._lock:
            doomed = {path for path in self._paths if path == key or path.startswith(key + "/")}
            self._paths -= doomed
        if doomed:
            self.deleted.append(location)
        return bool(doomed)

    def copy_from_local(self, local_path: Path, location: Location) -> None:
        if self.fail_copy:
            raise OSError(f"copy refused for {local_path}")
        self.copies.append((local_path, location))
        self.create(location)

    def home_directory(self) -> Location:
        return Location(scheme=MEM_SCHEME, authority="cluster", path="/user/tester")


class RecordingBspEngine:
    """BspEngine that writes its output location into storage on success."""

    def __init__(
        self,
        log: ExecutionLog,
        storage: InMemoryStorage,
        *,
        succeed: bool = True,
        error: Exception | None = None,
        duration: float = 0.0,
    ) -> None:
        self._log = log
        self._storage = storage
        self._succeed = succeed
        self._error = error
        self._duration = duration
        self.jobs: list[BspJobSpec] = []

    def run(self, job: BspJobSpec) -> bool:
        self.jobs.append(job)
        self._log.record(f"bsp:start:{job.name}")
        self._log.tick(self._duration)
        if self._error is not None:
            raise self._error
        if self._succeed and job.output_location is not None:
            self._storage.create(job.output_location)
        self._log.record(f"bsp:end:{job.name}")
        return self._succeed


class RecordingMapReduceEngine:
    """MapReduceEngine returning canned contributions per job name."""

    def __init__(
        self,
        log: ExecutionLog,
        contributions: Mapping[str, Mapping[str, Any]] | None = None,
        *,
        failing: frozenset[str] = frozenset(),
        raising: Mapping[str, Exception] | None = None,
        duration: float = 0.0,
    ) -> None:
        self._log = log
        self._contributions = dict(contributions or {})
        self._failing = failing
        self._raising = dict(raising or {})
        self._duration = duration
        self.jobs: list[MapReduceJobSpec] = []

    def run(self, job: MapReduceJobSpec) -> MapReduceJobResult:
        self.jobs.append(job)
        self._log.record(f"mr:start:{job.name}")
        self._log.tick(self._duration)
        if job.name in self._raising:
            raise self._raising[job.name]
        self._log.record(f"mr:end:{job.name}")
        if job.name in self._failing:
            return MapReduceJobResult.failure()
        return MapReduceJobResult.success(self._contributions.get(job.name, {}))


@dataclass(frozen=True)
class StubMapReduce:
    name: str
    memory_keys: frozenset[str] = frozenset()

    def store_state(self, configuration: dict[str, Any]) -> None:
        configuration["mapreduce.name"] = self.name


@dataclass(frozen=True)
class SumCombiner:
    def combine(self, message_a: Any, message_b: Any) -> Any:
        return message_a + message_b


@dataclass(frozen=True)
class StubVertexProgram:
    name: str = "stub-program"
    memory_compute_keys: frozenset[str] = frozenset({"rank"})
    message_combiner: MessageCombiner | None = None
    preferred_result_graph: ResultGraph = ResultGraph.NEW
    preferred_persist: Persist = Persist.VERTEX_PROPERTIES
    map_reducers: tuple[MapReduce, ...] = field(default=())
    required_features: frozenset[str] = frozenset()

    def store_state(self, configuration: dict[str, Any]) -> None:
        configuration["vertex_program.name"] = self.name
        configuration["vertex_program.keys"] = sorted(self.memory_compute_keys)
