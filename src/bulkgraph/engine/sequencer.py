# src/bulkgraph/engine/sequencer.py
"""JobSequencer: runs one submission's phases strictly in order.

Phase order:
1. STAGING: copy executable archives (when enabled)
2. PREPARE: clear the output location left by a previous run
3. VERTEX_PROGRAM: exactly one BSP job, if a program is configured
4. MAP_REDUCE: every planned job, one at a time, in plan order
5. CLEANUP: delete the intermediate graph when nothing is persisted

A failure in any phase aborts every later phase. Nothing is retried here;
retries are the engines' business. Cleanup only runs after success.

The plan is built before the submission future exists (see
build_execution_plan), so an illegal configuration never reaches this
module.
"""

from __future__ import annotations

import time
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from bulkgraph.contracts.boundaries import BspJobSpec
from bulkgraph.contracts.enums import Persist, ResultGraph, SubmissionStatus
from bulkgraph.contracts.errors import (
    InputLocationNotFoundError,
    InvalidMapReduceJobError,
    MapReduceJobError,
    VertexProgramJobError,
)
from bulkgraph.contracts.events import (
    PhaseAction,
    PhaseCompleted,
    PhaseError,
    PhaseStarted,
    PipelinePhase,
    SubmissionSummary,
)
from bulkgraph.contracts.programs import HIDDEN_PREFIX
from bulkgraph.contracts.results import ComputerResult, MaterializationOutcome, OutputGraph
from bulkgraph.engine.mapreduce import MemoryMapReduce, build_map_reduce_job, execute_map_reduce_job
from bulkgraph.engine.materialization import resolve_materialization

if TYPE_CHECKING:
    from bulkgraph.contracts.boundaries import BspEngine, DistributedStorage, MapReduceEngine
    from bulkgraph.contracts.locations import Location
    from bulkgraph.contracts.programs import MapReduce, VertexProgram
    from bulkgraph.core.config import ComputerSettings
    from bulkgraph.core.events import EventBusProtocol
    from bulkgraph.core.memory import ComputationMemory
    from bulkgraph.engine.clock import Clock
    from bulkgraph.engine.spans import SpanFactory
    from bulkgraph.engine.staging import ArtifactStager

logger = structlog.get_logger(__name__)

# Child of the output location holding the vertex program's output graph
INTERMEDIATE_GRAPH = "~g"

BSP_JOB_PREFIX = "bulkgraph(bsp): "


@dataclass(frozen=True, slots=True)
class ExecutionPlan:
    """Everything decided before a submission starts running.

    Attributes:
        program: The vertex program, None for map-reduce only submissions
        map_reduces: Jobs in execution order, de-duplicated
        outcome: Resolved materialization
    """

    program: VertexProgram | None
    map_reduces: tuple[MapReduce, ...]
    outcome: MaterializationOutcome

    @property
    def writes_intermediate(self) -> bool:
        """Whether the BSP job must write its output graph.

        Output is only skipped when nothing is persisted and no map-reduce
        job reads it.
        """
        return self.program is not None and (self.outcome.persist != Persist.NOTHING or bool(self.map_reduces))


def build_execution_plan(
    program: VertexProgram | None,
    map_reduces: Sequence[MapReduce],
    *,
    result_graph: ResultGraph | None,
    persist: Persist | None,
    derive_memory: bool,
) -> ExecutionPlan:
    """Merge derived jobs, add the memory job, resolve materialization.

    Order: caller-declared jobs, then the program's derived jobs, then the
    memory-derivation job. Duplicates keep their first position.

    Raises:
        ResultGraphPersistCombinationError: Illegal materialization choice
        InvalidMapReduceJobError: A job name cannot serve as its output location
    """
    ordered: list[MapReduce] = list(map_reduces)
    if program is not None:
        ordered.extend(program.map_reducers)
        if derive_memory:
            ordered.append(MemoryMapReduce.for_program(program))

    jobs = tuple(dict.fromkeys(ordered))
    _check_job_names(jobs)
    outcome = resolve_materialization(program, result_graph, persist)
    return ExecutionPlan(program=program, map_reduces=jobs, outcome=outcome)


def _check_job_names(jobs: Sequence[MapReduce]) -> None:
    """Every job needs its own ``<output>/<job name>`` location."""
    seen: set[str] = set()
    for job in jobs:
        name = job.name
        if not name or "/" in name:
            raise InvalidMapReduceJobError(name, "the name must be a single non-empty path segment")
        if name.startswith(HIDDEN_PREFIX) and not isinstance(job, MemoryMapReduce):
            raise InvalidMapReduceJobError(name, f"names starting with {HIDDEN_PREFIX!r} are reserved")
        if name in seen:
            raise InvalidMapReduceJobError(name, "another planned job already uses this name")
        seen.add(name)


class JobSequencer:
    """Runs an ExecutionPlan against the engines and storage.

    Owned by one GraphComputer, used for exactly one submission, always on
    the submission's worker thread.
    """

    def __init__(
        self,
        settings: ComputerSettings,
        *,
        bsp_engine: BspEngine | None,
        map_reduce_engine: MapReduceEngine | None,
        storage: DistributedStorage,
        stager: ArtifactStager,
        memory: ComputationMemory,
        event_bus: EventBusProtocol,
        span_factory: SpanFactory,
        clock: Clock,
    ) -> None:
        self._settings = settings
        self._bsp_engine = bsp_engine
        self._map_reduce_engine = map_reduce_engine
        self._storage = storage
        self._stager = stager
        self._memory = memory
        self._events = event_bus
        self._spans = span_factory
        self._clock = clock

    @property
    def intermediate_location(self) -> Location:
        return self._settings.output.child(INTERMEDIATE_GRAPH)

    @contextmanager
    def _phase(self, phase: PipelinePhase, action: PhaseAction, target: str | None = None) -> Iterator[None]:
        """Emit PhaseStarted, then exactly one of PhaseCompleted / PhaseError."""
        phase_start = time.perf_counter()
        self._events.emit(PhaseStarted(phase=phase, action=action, target=target))
        try:
            yield
        except Exception as e:
            self._events.emit(PhaseError(phase=phase, error=e, target=target))
            raise
        self._events.emit(PhaseCompleted(phase=phase, duration_seconds=time.perf_counter() - phase_start, target=target))

    def run(self, plan: ExecutionPlan, start_time: float) -> ComputerResult:
        """Execute every phase of the plan.

        Args:
            plan: The submission's execution plan
            start_time: Clock reading taken when submit() accepted the submission

        Returns:
            ComputerResult with the output graph handle and frozen memory

        Raises:
            ComputerExecutionError: Staging, a job, or the input check failed
        """
        program_name = plan.program.name if plan.program is not None else None
        completed: list[str] = []
        run_start = time.perf_counter()
        try:
            with self._spans.submission_span(program_name, len(plan.map_reduces)):
                archives = self._stage()
                self._clear_output()

                if plan.program is not None:
                    self._run_vertex_program(plan, plan.program, archives)

                input_location = self.intermediate_location if plan.program is not None else self._require_input()
                for job in plan.map_reduces:
                    self._run_map_reduce(job, input_location, plan.outcome.has_edges, archives)
                    completed.append(job.name)

                if plan.outcome.persist == Persist.NOTHING:
                    self._cleanup()
        except Exception:
            self._events.emit(
                SubmissionSummary(
                    status=SubmissionStatus.FAILED,
                    program=program_name,
                    map_reduce_jobs=tuple(completed),
                    duration_seconds=time.perf_counter() - run_start,
                )
            )
            raise

        self._memory.runtime_ms = (self._clock.monotonic() - start_time) * 1000
        result = ComputerResult(graph=self._output_graph(plan.outcome), memory=self._memory.as_immutable())
        logger.info(
            "Submission completed",
            program=program_name,
            map_reduce_jobs=completed,
            runtime_ms=result.runtime_ms,
        )
        self._events.emit(
            SubmissionSummary(
                status=SubmissionStatus.COMPLETED,
                program=program_name,
                map_reduce_jobs=tuple(completed),
                duration_seconds=time.perf_counter() - run_start,
            )
        )
        return result

    def _stage(self) -> tuple[Location, ...]:
        if not self._settings.stage_artifacts:
            return ()
        with self._phase(PipelinePhase.STAGING, PhaseAction.STAGING), self._spans.staging_span():
            self._stager.stage()
        return self._stager.classpath

    def _clear_output(self) -> None:
        output = self._settings.output
        with self._phase(PipelinePhase.PREPARE, PhaseAction.CLEARING, str(output)):
            if self._storage.exists(output):
                self._storage.delete(output, recursive=True)
                logger.info("Cleared previous output", location=str(output))

    def _require_input(self) -> Location:
        location = self._settings.input
        if not self._storage.exists(location):
            raise InputLocationNotFoundError(location)
        return location

    def _run_vertex_program(self, plan: ExecutionPlan, program: VertexProgram, archives: tuple[Location, ...]) -> None:
        job_name = BSP_JOB_PREFIX + program.name
        with self._phase(PipelinePhase.VERTEX_PROGRAM, PhaseAction.EXECUTING, job_name), self._spans.vertex_program_span(program.name):
            input_location = self._require_input()
            state: dict[str, Any] = {}
            program.store_state(state)
            spec = BspJobSpec(
                name=job_name,
                input_location=input_location,
                output_location=self.intermediate_location if plan.writes_intermediate else None,
                output_has_edges=plan.outcome.has_edges,
                program_state=state,
                uses_combiner=program.message_combiner is not None,
                archives=archives,
                properties=dict(self._settings.properties),
            )
            if self._bsp_engine is None:
                raise VertexProgramJobError(job_name, "No BSP engine is configured on this computer")

            logger.info(job_name, input=str(input_location), discards_output=spec.discards_output)
            try:
                succeeded = self._bsp_engine.run(spec)
            except Exception as e:
                raise VertexProgramJobError(job_name, f"The BSP job '{job_name}' raised: {e}") from e
            if not succeeded:
                raise VertexProgramJobError(job_name)

    def _run_map_reduce(self, job: MapReduce, input_location: Location, input_has_edges: bool, archives: tuple[Location, ...]) -> None:
        with self._phase(PipelinePhase.MAP_REDUCE, PhaseAction.EXECUTING, job.name), self._spans.map_reduce_span(job.name, input_has_edges):
            if self._map_reduce_engine is None:
                raise MapReduceJobError(job.name, "No map-reduce engine is configured on this computer")
            spec = build_map_reduce_job(
                job,
                input_location=input_location,
                input_has_edges=input_has_edges,
                output_root=self._settings.output,
                archives=archives,
                properties=self._settings.properties,
            )
            execute_map_reduce_job(job, self._memory, self._map_reduce_engine, spec)

    def _cleanup(self) -> None:
        intermediate = self.intermediate_location
        with self._phase(PipelinePhase.CLEANUP, PhaseAction.DELETING, str(intermediate)), self._spans.cleanup_span():
            try:
                if self._storage.exists(intermediate):
                    self._storage.delete(intermediate, recursive=True)
            except Exception:
                # Best effort: the computation itself succeeded
                logger.error("Failed to delete intermediate output", location=str(intermediate), exc_info=True)

    def _output_graph(self, outcome: MaterializationOutcome) -> OutputGraph:
        properties: Mapping[str, Any] = dict(self._settings.properties)
        if outcome.result_graph == ResultGraph.ORIGINAL:
            return OutputGraph(
                location=self._settings.input,
                result_graph=outcome.result_graph,
                persist=outcome.persist,
                has_edges=True,
                properties=properties,
            )
        return OutputGraph(
            location=self.intermediate_location,
            result_graph=outcome.result_graph,
            persist=outcome.persist,
            has_edges=outcome.has_edges,
            properties=properties,
        )
