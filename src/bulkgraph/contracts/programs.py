# src/bulkgraph/contracts/programs.py
"""Phase descriptor protocols: vertex programs and map-reduce jobs.

These protocols describe what the computer needs to know about a phase
to sequence it. They say nothing about how the phase computes: the BSP
engine and the map-reduce engine interpret the serialized state.

Descriptor Types:
- VertexProgram: The optional BSP phase (at most one per computer)
- MapReduce: A reduction phase contributing keys to computation memory
- MessageCombiner: Optional message folding declared by a vertex program
"""

from collections.abc import Sequence
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bulkgraph.contracts.enums import Persist, ResultGraph

# Keys starting with this prefix are reserved for the computer itself.
HIDDEN_PREFIX = "~"

# Memory key carrying the number of supersteps the vertex program ran.
HIDDEN_ITERATION = HIDDEN_PREFIX + "iteration"


@runtime_checkable
class MessageCombiner(Protocol):
    """Folds two messages bound for the same vertex into one."""

    def combine(self, message_a: Any, message_b: Any) -> Any: ...


@runtime_checkable
class MapReduce(Protocol):
    """Protocol for reduction phases.

    A map-reduce job reads the graph produced by the previous phase (or
    the input graph when there is no vertex program) and contributes
    values for ``memory_keys`` to computation memory.

    Implementations must be hashable: the computer de-duplicates jobs by
    equality so that a job declared by both the caller and the vertex
    program runs once.

    Example:
        @dataclass(frozen=True)
        class CountVertices:
            name: str = "count-vertices"
            memory_keys: frozenset[str] = frozenset({"vertexCount"})

            def store_state(self, configuration: dict[str, Any]) -> None:
                configuration["mapreduce.class"] = "CountVertices"
    """

    name: str
    memory_keys: frozenset[str]

    def store_state(self, configuration: dict[str, Any]) -> None:
        """Serialize this job into the engine job configuration."""
        ...


@runtime_checkable
class VertexProgram(Protocol):
    """Protocol for the BSP vertex-centric phase.

    Lifecycle:
    1. Configured via GraphComputer.program(), keys declared at submit()
    2. store_state(configuration) - serialized into the BSP job spec
    3. The BSP engine runs the program, the computer never calls it

    Attributes:
        name: Human readable program identity, used in job names
        memory_compute_keys: Keys the program populates in computation memory
        message_combiner: Optional combiner shipped to the engine
        preferred_result_graph: Default result graph when the caller does not choose
        preferred_persist: Default persist when the caller does not choose
        map_reducers: Reduction jobs the program requires after it runs
        required_features: Computer feature names the program depends on
    """

    name: str
    memory_compute_keys: frozenset[str]
    message_combiner: MessageCombiner | None
    preferred_result_graph: "ResultGraph"
    preferred_persist: "Persist"
    map_reducers: Sequence[MapReduce]
    required_features: frozenset[str]

    def store_state(self, configuration: dict[str, Any]) -> None:
        """Serialize this program into the engine job configuration."""
        ...


@dataclass(frozen=True, slots=True)
class ComputerFeatures:
    """What a graph computer supports.

    Vertex programs declare required feature names; each name must match
    a field here and that field must be True. Unknown names are treated
    as unsupported.
    """

    supports_global_message_scopes: bool = True
    supports_local_message_scopes: bool = True
    supports_vertex_addition: bool = False
    supports_vertex_removal: bool = False
    supports_vertex_property_addition: bool = True
    supports_vertex_property_removal: bool = False
    supports_edge_addition: bool = False
    supports_edge_removal: bool = False
    supports_edge_property_addition: bool = False
    supports_edge_property_removal: bool = False
    supports_direct_objects: bool = False

    def supports(self, feature: str) -> bool:
        """Whether ``feature`` (with or without ``supports_`` prefix) is supported."""
        name = feature if feature.startswith("supports_") else f"supports_{feature}"
        if name not in _FEATURE_NAMES:
            return False
        return bool(getattr(self, name))


_FEATURE_NAMES = frozenset(f.name for f in fields(ComputerFeatures))
