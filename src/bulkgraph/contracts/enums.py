"""Modes and kinds used across subsystem boundaries.

Every value here crosses a boundary: caller configuration, engine job
specs, or the response channel.
"""

from enum import IntEnum, StrEnum


class Isolation(StrEnum):
    """Message visibility semantics between supersteps.

    Only BSP is supported by this computer. DIRTY_BSP exists so that
    callers asking for it get a clear rejection rather than a typo error.
    """

    BSP = "bsp"
    DIRTY_BSP = "dirty_bsp"


class ResultGraph(StrEnum):
    """Which graph view the caller receives after a computation."""

    ORIGINAL = "original"
    NEW = "new"


class Persist(StrEnum):
    """What computed data survives to persistent storage.

    Values:
        NOTHING: Nothing is kept, intermediate output is deleted
        VERTEX_PROPERTIES: Vertices with their computed properties, no edges
        EDGES: Vertices, computed properties and edges
    """

    NOTHING = "nothing"
    VERTEX_PROPERTIES = "vertex_properties"
    EDGES = "edges"


class SubmissionStatus(StrEnum):
    """Final status of a submission, reported in SubmissionSummary."""

    COMPLETED = "completed"
    FAILED = "failed"


class ResponseStatus(IntEnum):
    """Status codes for messages written to a response channel.

    PARTIAL_CONTENT and AUTHENTICATE are the only non-final statuses;
    every other status terminates the request.
    """

    SUCCESS = 200
    NO_CONTENT = 204
    PARTIAL_CONTENT = 206
    UNAUTHORIZED = 401
    AUTHENTICATE = 407
    REQUEST_ERROR_MALFORMED_REQUEST = 498
    REQUEST_ERROR_INVALID_REQUEST_ARGUMENTS = 499
    SERVER_ERROR = 500
    SERVER_ERROR_TIMEOUT = 598

    @property
    def is_final(self) -> bool:
        """Whether a message with this status terminates the request."""
        return self not in (ResponseStatus.PARTIAL_CONTENT, ResponseStatus.AUTHENTICATE)
