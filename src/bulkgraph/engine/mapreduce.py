# src/bulkgraph/engine/mapreduce.py
"""Map-reduce job execution and the synthetic memory-derivation job.

execute_map_reduce_job() is the only place computation memory is written
from engine output: it declares the job's keys, runs the job, and merges
the reported contributions by key.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from bulkgraph.contracts.boundaries import MapReduceJobSpec
from bulkgraph.contracts.errors import ComputationMemoryError, MapReduceJobError
from bulkgraph.contracts.programs import HIDDEN_ITERATION

if TYPE_CHECKING:
    from bulkgraph.contracts.boundaries import MapReduceEngine
    from bulkgraph.contracts.locations import Location
    from bulkgraph.contracts.programs import MapReduce, VertexProgram
    from bulkgraph.core.memory import ComputationMemory

logger = structlog.get_logger(__name__)

MEMORY_MAP_REDUCE_NAME = "~memory"


@dataclass(frozen=True, slots=True)
class MemoryMapReduce:
    """Reads the vertex program's memory out of its output graph.

    Costs one extra map-reduce pass, so it is only added when the settings
    ask for derive_memory. Its keys are the program's memory compute keys
    plus HIDDEN_ITERATION.
    """

    memory_keys: frozenset[str]
    name: str = MEMORY_MAP_REDUCE_NAME

    @classmethod
    def for_program(cls, program: VertexProgram) -> MemoryMapReduce:
        return cls(memory_keys=frozenset(program.memory_compute_keys) | {HIDDEN_ITERATION})

    def store_state(self, configuration: dict[str, Any]) -> None:
        configuration["bulkgraph.memory.keys"] = sorted(self.memory_keys)


def build_map_reduce_job(
    job: MapReduce,
    *,
    input_location: Location,
    input_has_edges: bool,
    output_root: Location,
    archives: tuple[Location, ...] = (),
    properties: Mapping[str, Any] | None = None,
) -> MapReduceJobSpec:
    """Build the engine spec for one map-reduce job.

    The job writes under ``<output_root>/<job name>``.
    """
    state: dict[str, Any] = {}
    job.store_state(state)
    return MapReduceJobSpec(
        name=job.name,
        memory_keys=frozenset(job.memory_keys),
        input_location=input_location,
        input_has_edges=input_has_edges,
        output_location=output_root.child(job.name),
        job_state=state,
        archives=archives,
        properties=dict(properties or {}),
    )


def execute_map_reduce_job(
    job: MapReduce,
    memory: ComputationMemory,
    engine: MapReduceEngine,
    spec: MapReduceJobSpec,
) -> None:
    """Run one map-reduce job and merge its contributions into memory.

    Raises:
        MapReduceJobError: The engine raised, reported failure, or
            contributed a key the job did not declare
    """
    memory.declare_map_reduce_keys(job)
    logger.info("Running map-reduce job", job=job.name, input=str(spec.input_location), input_has_edges=spec.input_has_edges)

    try:
        result = engine.run(spec)
    except Exception as e:
        raise MapReduceJobError(job.name, f"The map-reduce job '{job.name}' raised: {e}") from e

    if not result.succeeded:
        raise MapReduceJobError(job.name)

    undeclared = sorted(set(result.contributions) - set(job.memory_keys))
    if undeclared:
        raise MapReduceJobError(job.name, f"The map-reduce job '{job.name}' contributed undeclared memory key(s) {undeclared}")

    try:
        memory.merge(result.contributions)
    except ComputationMemoryError as e:
        raise MapReduceJobError(job.name, str(e)) from e
