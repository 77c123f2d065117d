"""Error taxonomy for graph computer submissions.

Two families matter to callers:

- ComputerConfigurationError: detected before any external job launches.
  Raised synchronously from the configuration setters or from submit().
  Nothing has been staged, deleted or launched.
- ComputerExecutionError: raised while the pipeline runs on the worker
  thread. Surfaces through the submission future with the engine's
  original exception chained as __cause__.

Non-fatal conditions (missing staging environment variable, missing
library directory) are logged and never raised.
"""

from typing import Any


class GraphComputerError(Exception):
    """Base exception for bulkgraph."""

    pass


# =============================================================================
# Configuration errors (fail fast, no side effects)
# =============================================================================


class ComputerConfigurationError(GraphComputerError):
    """The computer was configured in a way that cannot be executed."""

    pass


class IsolationNotSupportedError(ComputerConfigurationError):
    """Raised when an isolation level other than BSP is requested."""

    def __init__(self, isolation: Any) -> None:
        self.isolation = isolation
        super().__init__(f"The graph computer does not support {isolation} isolation")


class ResultGraphPersistCombinationError(ComputerConfigurationError):
    """Raised when the result graph and persist choice cannot be combined.

    The original input graph cannot be mutated in place, so asking for
    the ORIGINAL graph while keeping computed properties or edges is
    rejected.
    """

    def __init__(self, result_graph: Any, persist: Any) -> None:
        self.result_graph = result_graph
        self.persist = persist
        super().__init__(f"The computer does not support the following result graph and persist combination: {result_graph}:{persist}")


class NoComputationDeclaredError(ComputerConfigurationError):
    """Raised when submit() is called with neither a vertex program nor map-reduce jobs."""

    def __init__(self) -> None:
        super().__init__("The computer has no vertex program nor map reducers to execute")


class ProgramValidationError(ComputerConfigurationError):
    """Raised when a vertex program's requirements are not met by the computer."""

    def __init__(self, program_name: str, reason: str) -> None:
        self.program_name = program_name
        self.reason = reason
        super().__init__(f"Vertex program '{program_name}' cannot run on this computer: {reason}")


class UnsupportedLocationError(ComputerConfigurationError):
    """Raised when a location's scheme is not handled by the storage boundary."""

    def __init__(self, location: Any, supported: tuple[str, ...] = ()) -> None:
        self.location = location
        self.supported = supported
        detail = f" Supported schemes: {list(supported)}" if supported else ""
        super().__init__(f"Storage does not support location '{location}'.{detail}")


class InvalidMapReduceJobError(ComputerConfigurationError):
    """Raised when a planned map-reduce job cannot be given its own output location.

    A job writes under ``<output>/<job name>``, so its name must be one path
    segment, unique among planned jobs, and free of the reserved hidden
    prefix used for the intermediate graph.
    """

    def __init__(self, job_name: str, reason: str) -> None:
        self.job_name = job_name
        self.reason = reason
        super().__init__(f"Map-reduce job {job_name!r} cannot be planned: {reason}")


class ComputerAlreadySubmittedError(GraphComputerError):
    """Raised when submit() is called a second time on the same computer.

    Not retried: a computer is a one-shot value object and its phase
    descriptors may already have been consumed by the first submission.
    """

    def __init__(self) -> None:
        super().__init__("The computer has already been submitted")


# =============================================================================
# Execution errors (surface through the submission future)
# =============================================================================


class ComputerExecutionError(GraphComputerError):
    """A phase of a running submission failed.

    The underlying cause is always chained (raise ... from cause) so
    callers can tell engine-reported failures apart from orchestrator
    configuration failures.
    """

    pass


class StagingError(ComputerExecutionError):
    """Raised when copying or registering an executable archive fails."""

    def __init__(self, local_path: Any, message: str) -> None:
        self.local_path = local_path
        super().__init__(f"Failed to stage artifact {local_path}: {message}")


class InputLocationNotFoundError(ComputerExecutionError):
    """Raised when the vertex program's input location does not exist."""

    def __init__(self, location: Any) -> None:
        self.location = location
        super().__init__(f"The provided input location does not exist: {location}")


class VertexProgramJobError(ComputerExecutionError):
    """Raised when the BSP job fails. No map-reduce job runs afterwards."""

    def __init__(self, job_name: str, message: str | None = None) -> None:
        self.job_name = job_name
        super().__init__(message or f"The BSP job '{job_name}' failed -- aborting all subsequent map-reduce jobs")


class MapReduceJobError(ComputerExecutionError):
    """Raised when a map-reduce job fails. Remaining jobs are not run."""

    def __init__(self, job_name: str, message: str | None = None) -> None:
        self.job_name = job_name
        super().__init__(message or f"The map-reduce job '{job_name}' failed -- aborting all subsequent map-reduce jobs")


# =============================================================================
# Computation memory errors
# =============================================================================


class ComputationMemoryError(GraphComputerError):
    """Base class for memory key violations."""

    pass


class UndeclaredMemoryKeyError(ComputationMemoryError, KeyError):
    """Raised when a key is read or written that no phase declared."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"The memory key '{key}' was not declared by any phase")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class MemoryKeyNotWrittenError(ComputationMemoryError, KeyError):
    """Raised when a declared key is read before any phase has written it."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"The memory key '{key}' has not been written yet")

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidMemoryKeyError(ComputationMemoryError, ValueError):
    """Raised when a declared key is empty or uses the reserved hidden prefix."""

    def __init__(self, key: Any, reason: str) -> None:
        self.key = key
        super().__init__(f"Invalid memory key {key!r}: {reason}")


# =============================================================================
# Response channel errors
# =============================================================================


class FinalResponseAlreadyWrittenError(GraphComputerError):
    """Raised when a second final message is written for the same request."""

    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        super().__init__(f"Another final response message was already written for request {request_id}")
