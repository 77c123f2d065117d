"""Shared contracts for bulkgraph.

This package is a LEAF: it imports nothing from bulkgraph.core or
bulkgraph.engine. Everything the engine and the caller exchange is
defined here.
"""

from bulkgraph.contracts.boundaries import (
    BspEngine,
    BspJobSpec,
    DistributedStorage,
    MapReduceEngine,
    MapReduceJobResult,
    MapReduceJobSpec,
)
from bulkgraph.contracts.enums import (
    Isolation,
    Persist,
    ResponseStatus,
    ResultGraph,
    SubmissionStatus,
)
from bulkgraph.contracts.errors import (
    ComputationMemoryError,
    ComputerAlreadySubmittedError,
    ComputerConfigurationError,
    ComputerExecutionError,
    FinalResponseAlreadyWrittenError,
    GraphComputerError,
    InputLocationNotFoundError,
    InvalidMapReduceJobError,
    InvalidMemoryKeyError,
    IsolationNotSupportedError,
    MapReduceJobError,
    MemoryKeyNotWrittenError,
    NoComputationDeclaredError,
    ProgramValidationError,
    ResultGraphPersistCombinationError,
    StagingError,
    UndeclaredMemoryKeyError,
    UnsupportedLocationError,
    VertexProgramJobError,
)
from bulkgraph.contracts.locations import Location
from bulkgraph.contracts.programs import (
    HIDDEN_ITERATION,
    HIDDEN_PREFIX,
    ComputerFeatures,
    MapReduce,
    MessageCombiner,
    VertexProgram,
)
from bulkgraph.contracts.results import (
    ComputerResult,
    MaterializationOutcome,
    MemorySnapshot,
    OutputGraph,
    StagedArtifact,
)

__all__ = [
    "HIDDEN_ITERATION",
    "HIDDEN_PREFIX",
    "BspEngine",
    "BspJobSpec",
    "ComputationMemoryError",
    "ComputerAlreadySubmittedError",
    "ComputerConfigurationError",
    "ComputerExecutionError",
    "ComputerFeatures",
    "ComputerResult",
    "DistributedStorage",
    "FinalResponseAlreadyWrittenError",
    "GraphComputerError",
    "InputLocationNotFoundError",
    "InvalidMapReduceJobError",
    "InvalidMemoryKeyError",
    "Isolation",
    "IsolationNotSupportedError",
    "Location",
    "MapReduce",
    "MapReduceEngine",
    "MapReduceJobError",
    "MapReduceJobResult",
    "MapReduceJobSpec",
    "MaterializationOutcome",
    "MemoryKeyNotWrittenError",
    "MemorySnapshot",
    "MessageCombiner",
    "NoComputationDeclaredError",
    "OutputGraph",
    "Persist",
    "ProgramValidationError",
    "ResponseStatus",
    "ResultGraph",
    "ResultGraphPersistCombinationError",
    "StagedArtifact",
    "StagingError",
    "SubmissionStatus",
    "UndeclaredMemoryKeyError",
    "UnsupportedLocationError",
    "VertexProgram",
    "VertexProgramJobError",
]
