# src/bulkgraph/contracts/boundaries.py
"""Protocols for the external collaborators of the graph computer.

The computer never executes a superstep or a shuffle itself. It builds a
job spec, hands it to an engine, and reads back one success/failure
outcome. Keeping these boundaries narrow lets the sequencing logic run
against in-memory fakes in tests.

Boundaries:
- BspEngine: Runs one vertex-program job to completion
- MapReduceEngine: Runs one map-reduce job, reports memory contributions
- DistributedStorage: exists / delete / copy for locations
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from bulkgraph.contracts.locations import Location


@dataclass(frozen=True, slots=True)
class BspJobSpec:
    """Everything the BSP engine needs to run a vertex program.

    Attributes:
        name: Job name (prefix + program name)
        input_location: Graph to load
        output_location: Where to write the computed graph, None to discard
        output_has_edges: Whether written vertices carry their edges
        program_state: Serialized vertex program (from store_state)
        uses_combiner: Whether the program declared a message combiner
        archives: Staged executable archives for the worker classpath
        properties: Engine configuration passed through unchanged
    """

    name: str
    input_location: Location
    output_location: Location | None
    output_has_edges: bool
    program_state: Mapping[str, Any]
    uses_combiner: bool = False
    archives: tuple[Location, ...] = ()
    properties: Mapping[str, Any] = field(default_factory=dict)

    @property
    def discards_output(self) -> bool:
        """True when the engine should not write the graph back at all."""
        return self.output_location is None


@dataclass(frozen=True, slots=True)
class MapReduceJobSpec:
    """Everything the map-reduce engine needs to run one reduction job.

    Attributes:
        name: Job name
        memory_keys: Keys the job is allowed to contribute
        input_location: Graph to read (vertex program output or input graph)
        input_has_edges: Shape of the input graph
        output_location: Where the job may write its own results
        job_state: Serialized map-reduce job (from store_state)
        archives: Staged executable archives for the worker classpath
        properties: Engine configuration passed through unchanged
    """

    name: str
    memory_keys: frozenset[str]
    input_location: Location
    input_has_edges: bool
    output_location: Location
    job_state: Mapping[str, Any]
    archives: tuple[Location, ...] = ()
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class MapReduceJobResult:
    """Outcome of a map-reduce job.

    ``contributions`` is only meaningful when ``succeeded`` is True.
    """

    succeeded: bool
    contributions: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, contributions: Mapping[str, Any] | None = None) -> "MapReduceJobResult":
        return cls(succeeded=True, contributions=dict(contributions or {}))

    @classmethod
    def failure(cls) -> "MapReduceJobResult":
        return cls(succeeded=False)


@runtime_checkable
class BspEngine(Protocol):
    """Runs a vertex-program job and blocks until it finishes."""

    def run(self, job: BspJobSpec) -> bool:
        """Run the job.

        Returns:
            True if the whole distributed job succeeded. No partial
            success is reported. Engines may also raise.
        """
        ...


@runtime_checkable
class MapReduceEngine(Protocol):
    """Runs a map-reduce job and blocks until it finishes."""

    def run(self, job: MapReduceJobSpec) -> MapReduceJobResult:
        """Run the job and return its memory contributions."""
        ...


@runtime_checkable
class DistributedStorage(Protocol):
    """Storage reachable by every worker node.

    Implementations decide which location schemes they handle.
    """

    def supports(self, location: Location) -> bool:
        """Whether this storage can address ``location``."""
        ...

    def exists(self, location: Location) -> bool:
        """Whether anything exists at ``location``."""
        ...

    def delete(self, location: Location, recursive: bool = True) -> bool:
        """Delete ``location``.

        Returns:
            True if something was deleted, False if nothing existed
        """
        ...

    def copy_from_local(self, local_path: Path, location: Location) -> None:
        """Copy a local file to ``location``, overwriting it."""
        ...

    def home_directory(self) -> Location:
        """Home location of the executing user."""
        ...
