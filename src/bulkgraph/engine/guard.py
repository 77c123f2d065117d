# src/bulkgraph/engine/guard.py
"""SubmissionGuard: structural guarantee that a computer runs at most once.

A GraphComputer is a one-shot value object. Its phase descriptors are
fixed before the first submit() and may be partially consumed by it, so a
second submission would silently reuse stale configuration. The guard
turns that into an immediate, permanent error.

The flag is per instance, never module level: two computers never share
submission state.
"""

import threading

from bulkgraph.contracts.errors import ComputerAlreadySubmittedError


class SubmissionGuard:
    """One-shot latch, safe under concurrent try_submit() calls.

    Usage::

        guard = SubmissionGuard()
        guard.try_submit()   # first caller wins
        guard.try_submit()   # raises ComputerAlreadySubmittedError
    """

    __slots__ = ("_lock", "_submitted")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._submitted = False

    def try_submit(self) -> None:
        """Transition false -> true, or fail if another caller already did.

        Raises:
            ComputerAlreadySubmittedError: The guard was already set
        """
        # compare-and-set: the check and the write happen under one lock
        with self._lock:
            if self._submitted:
                raise ComputerAlreadySubmittedError()
            self._submitted = True

    @property
    def submitted(self) -> bool:
        """Whether a submission has been accepted."""
        return self._submitted
