# src/bulkgraph/core/memory.py
"""Computation memory shared across the phases of one submission.

Keys must be declared before they are written:
- vertex program keys when submit() accepts the computer
- map-reduce keys right before each job runs

Only the sequencer thread mutates memory while a submission runs. The
caller only ever sees a MemorySnapshot, taken after the last phase.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from bulkgraph.contracts.errors import (
    InvalidMemoryKeyError,
    MemoryKeyNotWrittenError,
    UndeclaredMemoryKeyError,
)
from bulkgraph.contracts.programs import HIDDEN_ITERATION, HIDDEN_PREFIX, MapReduce, VertexProgram
from bulkgraph.contracts.results import MemorySnapshot


def validate_memory_keys(keys: Iterable[Any], *, allow_hidden: bool = False) -> None:
    """Reject None, empty, non-string and (unless allowed) hidden keys.

    Raises:
        InvalidMemoryKeyError: On the first invalid key
    """
    for key in keys:
        if key is None:
            raise InvalidMemoryKeyError(key, "memory keys can not be None")
        if not isinstance(key, str):
            raise InvalidMemoryKeyError(key, f"memory keys must be strings, got {type(key).__name__}")
        if not key:
            raise InvalidMemoryKeyError(key, "memory keys can not be empty")
        if not allow_hidden and key.startswith(HIDDEN_PREFIX):
            raise InvalidMemoryKeyError(key, f"keys starting with '{HIDDEN_PREFIX}' are reserved")


class ComputationMemory:
    """Mutable key/value memory for the duration of a submission."""

    def __init__(self) -> None:
        self._declared: set[str] = set()
        self._values: dict[str, Any] = {}
        self._iteration = 0
        self._runtime_ms = 0.0

    def declare_vertex_program_keys(self, program: VertexProgram) -> None:
        """Declare every key the vertex program populates."""
        validate_memory_keys(program.memory_compute_keys)
        self._declared.update(program.memory_compute_keys)

    def declare_map_reduce_keys(self, job: MapReduce) -> None:
        """Declare the keys a map-reduce job contributes.

        Hidden keys are allowed here: the memory-derivation job reports the
        iteration count under HIDDEN_ITERATION.
        """
        validate_memory_keys(job.memory_keys, allow_hidden=True)
        self._declared.update(job.memory_keys)

    def set(self, key: str, value: Any) -> None:
        """Write ``value`` under a declared key, overwriting any previous value."""
        if key not in self._declared:
            raise UndeclaredMemoryKeyError(key)
        if key == HIDDEN_ITERATION:
            self._iteration = int(value)
            return
        self._values[key] = value

    def merge(self, contributions: Mapping[str, Any]) -> None:
        """Write every contribution. Fails on the first undeclared key, before writing anything."""
        for key in contributions:
            if key not in self._declared:
                raise UndeclaredMemoryKeyError(key)
        for key, value in contributions.items():
            self.set(key, value)

    def get(self, key: str) -> Any:
        """Read a written key.

        Raises:
            UndeclaredMemoryKeyError: No phase declared ``key``
            MemoryKeyNotWrittenError: Declared, but no phase has written it yet
        """
        if key not in self._declared:
            raise UndeclaredMemoryKeyError(key)
        if key not in self._values:
            raise MemoryKeyNotWrittenError(key)
        return self._values[key]

    def keys(self) -> frozenset[str]:
        """Keys that currently hold a value."""
        return frozenset(self._values)

    @property
    def declared_keys(self) -> frozenset[str]:
        return frozenset(self._declared - {HIDDEN_ITERATION})

    @property
    def iteration(self) -> int:
        return self._iteration

    @property
    def runtime_ms(self) -> float:
        return self._runtime_ms

    @runtime_ms.setter
    def runtime_ms(self, value: float) -> None:
        self._runtime_ms = value

    def as_immutable(self) -> MemorySnapshot:
        """Freeze the current values into a snapshot."""
        return MemorySnapshot(
            self._values,
            keys=self.declared_keys,
            iteration=self._iteration,
            runtime_ms=self._runtime_ms,
        )
