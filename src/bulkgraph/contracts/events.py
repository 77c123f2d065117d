"""Observability events for submission execution.

Events are emitted by the sequencer and consumed by whoever subscribed
to the computer's event bus (progress displays, tests, result delivery).
"""

from dataclasses import dataclass
from enum import StrEnum

from bulkgraph.contracts.enums import SubmissionStatus


class PipelinePhase(StrEnum):
    """Submission lifecycle phases for observability events."""

    STAGING = "staging"
    PREPARE = "prepare"
    VERTEX_PROGRAM = "vertex_program"
    MAP_REDUCE = "map_reduce"
    CLEANUP = "cleanup"


class PhaseAction(StrEnum):
    """Actions within a pipeline phase."""

    STAGING = "staging"
    CLEARING = "clearing"
    EXECUTING = "executing"
    DELETING = "deleting"


@dataclass(frozen=True, slots=True)
class PhaseStarted:
    """Emitted when a pipeline phase begins.

    Attributes:
        phase: The lifecycle phase starting
        action: What's happening
        target: Optional target (job name, location)
    """

    phase: PipelinePhase
    action: PhaseAction
    target: str | None = None


@dataclass(frozen=True, slots=True)
class PhaseCompleted:
    """Emitted when a pipeline phase completes successfully."""

    phase: PipelinePhase
    duration_seconds: float
    target: str | None = None


@dataclass(frozen=True, slots=True)
class PhaseError:
    """Emitted when a pipeline phase fails.

    Stores the full exception object to preserve the chained engine cause.
    """

    phase: PipelinePhase
    error: BaseException
    target: str | None = None

    @property
    def error_message(self) -> str:
        """Human-readable error message for formatting."""
        return str(self.error)


@dataclass(frozen=True, slots=True)
class StagingWarning:
    """Emitted for non-fatal staging conditions (missing variable or directory)."""

    message: str
    path: str | None = None


@dataclass(frozen=True, slots=True)
class SubmissionSummary:
    """Emitted once when a submission finishes, successfully or not.

    Attributes:
        status: COMPLETED or FAILED
        program: Vertex program name, None for map-reduce only submissions
        map_reduce_jobs: Names of jobs that completed, in execution order
        duration_seconds: Wall-clock duration of the pipeline
    """

    status: SubmissionStatus
    program: str | None
    map_reduce_jobs: tuple[str, ...]
    duration_seconds: float
