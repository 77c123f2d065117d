# src/bulkgraph/contracts/results.py
"""Values handed between the computer's components and back to the caller.

All types here are frozen. Once a submission resolves, nothing the
computer does can change what the caller holds.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from bulkgraph.contracts.enums import Persist, ResultGraph
from bulkgraph.contracts.locations import Location


@dataclass(frozen=True, slots=True)
class MaterializationOutcome:
    """Resolved decision of which graph view to return and what to keep.

    Build via engine.materialization.resolve_materialization(), which
    rejects ORIGINAL paired with anything but NOTHING.
    """

    result_graph: ResultGraph
    persist: Persist

    @property
    def has_edges(self) -> bool:
        """Whether the materialized graph carries edges."""
        return self.persist == Persist.EDGES

    @property
    def has_vertex_properties(self) -> bool:
        """Whether computed vertex properties are kept."""
        return self.persist != Persist.NOTHING


@dataclass(frozen=True, slots=True)
class StagedArtifact:
    """A local executable archive and where it was copied to."""

    local_path: Path
    remote_location: Location


@dataclass(frozen=True, slots=True)
class OutputGraph:
    """Handle to the graph view selected by the materialization policy.

    For ORIGINAL this is the input graph, untouched. For NEW it points at
    the vertex program's output; with Persist.NOTHING that output has
    already been deleted and the handle describes an empty graph.
    """

    location: Location
    result_graph: ResultGraph
    persist: Persist
    has_edges: bool
    properties: Mapping[str, Any] = field(default_factory=dict)


class MemorySnapshot(Mapping[str, Any]):
    """Read-only view of computation memory after a submission completes.

    Reads are repeatable: the snapshot copies values at freeze time and
    exposes them through a MappingProxyType.
    """

    __slots__ = ("_iteration", "_keys", "_runtime_ms", "_values")

    def __init__(
        self,
        values: Mapping[str, Any],
        *,
        keys: frozenset[str],
        iteration: int,
        runtime_ms: float,
    ) -> None:
        self._values: Mapping[str, Any] = MappingProxyType(dict(values))
        self._keys = keys
        self._iteration = iteration
        self._runtime_ms = runtime_ms

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    @property
    def declared_keys(self) -> frozenset[str]:
        """Every key declared by a phase, written or not."""
        return self._keys

    @property
    def iteration(self) -> int:
        """Number of supersteps reported for the vertex program (0 if unknown)."""
        return self._iteration

    @property
    def runtime_ms(self) -> float:
        """Wall-clock duration of the whole submission in milliseconds."""
        return self._runtime_ms

    def as_dict(self) -> dict[str, Any]:
        """Return a mutable copy; the snapshot itself stays unchanged."""
        return dict(self._values)

    def __repr__(self) -> str:
        return f"MemorySnapshot({dict(self._values)!r}, iteration={self._iteration}, runtime_ms={self._runtime_ms})"


@dataclass(frozen=True, slots=True)
class ComputerResult:
    """Result of a completed submission."""

    graph: OutputGraph
    memory: MemorySnapshot

    @property
    def runtime_ms(self) -> float:
        return self.memory.runtime_ms
