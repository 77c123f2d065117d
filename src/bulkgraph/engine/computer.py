# src/bulkgraph/engine/computer.py
"""GraphComputer: the caller-facing surface of a bulkgraph submission.

A GraphComputer is configured through chaining setters and submitted
exactly once:

    result = (
        GraphComputer(settings, bsp_engine=bsp, map_reduce_engine=mr, storage=storage)
        .program(PageRank())
        .map_reduce(CountVertices())
        .result(ResultGraph.NEW)
        .persist(Persist.VERTEX_PROPERTIES)
        .submit()
        .result()
    )

Everything that can be checked without touching storage or an engine is
checked inside submit(), on the caller's thread, and raised from it
directly. Everything else runs on a worker thread and fails the returned
future.
"""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

import structlog

from bulkgraph.contracts.enums import Isolation, Persist, ResultGraph
from bulkgraph.contracts.errors import (
    IsolationNotSupportedError,
    NoComputationDeclaredError,
    UnsupportedLocationError,
)
from bulkgraph.contracts.programs import ComputerFeatures, MapReduce, VertexProgram
from bulkgraph.core.events import NullEventBus
from bulkgraph.core.memory import ComputationMemory
from bulkgraph.engine.clock import DEFAULT_CLOCK
from bulkgraph.engine.guard import SubmissionGuard
from bulkgraph.engine.sequencer import ExecutionPlan, JobSequencer, build_execution_plan
from bulkgraph.engine.spans import SpanFactory
from bulkgraph.engine.staging import ArtifactStager
from bulkgraph.engine.validation import validate_program_on_computer

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

    from bulkgraph.contracts.boundaries import BspEngine, DistributedStorage, MapReduceEngine
    from bulkgraph.contracts.results import ComputerResult
    from bulkgraph.core.config import ComputerSettings
    from bulkgraph.core.events import EventBusProtocol
    from bulkgraph.engine.clock import Clock

logger = structlog.get_logger(__name__)


class GraphComputer:
    """One-shot orchestrator for a vertex program and its map-reduce jobs.

    Args:
        settings: Input/output locations, staging and engine properties
        bsp_engine: Runs the vertex program job (required only with a program)
        map_reduce_engine: Runs map-reduce jobs (required only with jobs)
        storage: Storage every location lives in
        event_bus: Receives phase and summary events
        clock: Monotonic clock for runtime measurement
        tracer: OpenTelemetry tracer, None disables tracing
        executor: Runs the pipeline; a private single-thread pool by default
        environ: Environment the stager reads archive directories from
        features: What this computer's engines support
    """

    def __init__(
        self,
        settings: ComputerSettings,
        *,
        storage: DistributedStorage,
        bsp_engine: BspEngine | None = None,
        map_reduce_engine: MapReduceEngine | None = None,
        event_bus: EventBusProtocol | None = None,
        clock: Clock | None = None,
        tracer: Tracer | None = None,
        executor: Executor | None = None,
        environ: Mapping[str, str] | None = None,
        features: ComputerFeatures | None = None,
    ) -> None:
        self._settings = settings
        self._storage = storage
        self._bsp_engine = bsp_engine
        self._map_reduce_engine = map_reduce_engine
        self._events = event_bus if event_bus is not None else NullEventBus()
        self._clock = clock if clock is not None else DEFAULT_CLOCK
        self._span_factory = SpanFactory(tracer)
        self._executor = executor
        self._environ = environ
        self._features = features if features is not None else ComputerFeatures()

        self._guard = SubmissionGuard()
        self._memory = ComputationMemory()
        self._program: VertexProgram | None = None
        self._map_reduces: list[MapReduce] = []
        self._result_graph: ResultGraph | None = None
        self._persist: Persist | None = None

    # =========================================================================
    # Configuration (chaining)
    # =========================================================================

    def isolation(self, isolation: Isolation) -> GraphComputer:
        """Only BSP isolation is supported.

        Raises:
            IsolationNotSupportedError: For any other isolation level
        """
        if isolation != Isolation.BSP:
            raise IsolationNotSupportedError(isolation)
        return self

    def result(self, result_graph: ResultGraph) -> GraphComputer:
        self._result_graph = result_graph
        return self

    def persist(self, persist: Persist) -> GraphComputer:
        self._persist = persist
        return self

    def program(self, program: VertexProgram) -> GraphComputer:
        """Set the vertex program. A later call replaces the earlier one."""
        self._program = program
        return self

    def map_reduce(self, job: MapReduce) -> GraphComputer:
        """Add a map-reduce job. Jobs run in the order they were added."""
        self._map_reduces.append(job)
        return self

    def features(self) -> ComputerFeatures:
        return self._features

    @property
    def submitted(self) -> bool:
        return self._guard.submitted

    # =========================================================================
    # Submission
    # =========================================================================

    def submit(self) -> Future[ComputerResult]:
        """Submit the computation.

        Returns:
            Future resolving to a ComputerResult, or failing with a
            ComputerExecutionError chained to the engine or storage cause

        Raises:
            ComputerAlreadySubmittedError: submit() was already called
            NoComputationDeclaredError: Neither a program nor a job is configured
            ProgramValidationError: The program cannot run on this computer
            ResultGraphPersistCombinationError: Illegal materialization choice
            InvalidMapReduceJobError: A planned job name is malformed, reserved or shared
            UnsupportedLocationError: Storage cannot address a configured location
        """
        # Guard first: a second submit() must fail even if the first one
        # failed its own configuration checks.
        self._guard.try_submit()

        if self._program is None and not self._map_reduces:
            raise NoComputationDeclaredError()

        if self._program is not None:
            validate_program_on_computer(self._program, self._features)

        plan = build_execution_plan(
            self._program,
            self._map_reduces,
            result_graph=self._result_graph,
            persist=self._persist,
            derive_memory=self._settings.derive_memory,
        )
        self._check_locations()

        if plan.program is not None:
            self._memory.declare_vertex_program_keys(plan.program)

        sequencer = JobSequencer(
            self._settings,
            bsp_engine=self._bsp_engine,
            map_reduce_engine=self._map_reduce_engine,
            storage=self._storage,
            stager=ArtifactStager(self._storage, self._settings, environ=self._environ, event_bus=self._events),
            memory=self._memory,
            event_bus=self._events,
            span_factory=self._span_factory,
            clock=self._clock,
        )
        logger.info(
            "Submitting graph computation",
            program=plan.program.name if plan.program is not None else None,
            map_reduce_jobs=[job.name for job in plan.map_reduces],
            result_graph=str(plan.outcome.result_graph),
            persist=str(plan.outcome.persist),
        )
        return self._launch(sequencer, plan)

    def _check_locations(self) -> None:
        for location in (self._settings.input, self._settings.output):
            if not self._storage.supports(location):
                raise UnsupportedLocationError(location, getattr(self._storage, "SCHEMES", ()))

    def _launch(self, sequencer: JobSequencer, plan: ExecutionPlan) -> Future[ComputerResult]:
        start_time = self._clock.monotonic()
        if self._executor is not None:
            return self._executor.submit(sequencer.run, plan, start_time)

        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="bulkgraph-submission")
        try:
            return pool.submit(sequencer.run, plan, start_time)
        finally:
            # Already-queued work still runs; the worker exits after it
            pool.shutdown(wait=False)

    def __repr__(self) -> str:
        program = self._program.name if self._program is not None else "none"
        return f"GraphComputer[program={program}, map_reduces={len(self._map_reduces)}, storage={type(self._storage).__name__}]"
