"""Submission engine: sequencing, staging, materialization and the computer."""

from bulkgraph.engine.clock import DEFAULT_CLOCK, Clock, MockClock, SystemClock
from bulkgraph.engine.computer import GraphComputer
from bulkgraph.engine.guard import SubmissionGuard
from bulkgraph.engine.mapreduce import MemoryMapReduce
from bulkgraph.engine.materialization import check_combination, resolve_materialization
from bulkgraph.engine.sequencer import ExecutionPlan, JobSequencer, build_execution_plan
from bulkgraph.engine.spans import SpanFactory
from bulkgraph.engine.staging import ArtifactStager
from bulkgraph.engine.validation import validate_program_on_computer

__all__ = [
    "DEFAULT_CLOCK",
    "ArtifactStager",
    "Clock",
    "ExecutionPlan",
    "GraphComputer",
    "JobSequencer",
    "MemoryMapReduce",
    "MockClock",
    "SpanFactory",
    "SubmissionGuard",
    "SystemClock",
    "build_execution_plan",
    "check_combination",
    "resolve_materialization",
    "validate_program_on_computer",
]
