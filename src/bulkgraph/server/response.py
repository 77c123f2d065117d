# src/bulkgraph/server/response.py
"""At-most-one final response per request.

A request served over a channel may receive any number of non-final
messages (PARTIAL_CONTENT, AUTHENTICATE) followed by exactly one final
message. Once a final message is written, every later write for that
request fails, final or not. Only the final flag is compare-and-set under
a lock; the writer itself runs outside it. When writers race on the same
request, exactly one final write wins.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from bulkgraph.contracts.enums import ResponseStatus
from bulkgraph.contracts.errors import FinalResponseAlreadyWrittenError

if TYPE_CHECKING:
    from concurrent.futures import Future

    from bulkgraph.contracts.results import ComputerResult

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ResponseMessage:
    """One message on the response channel."""

    request_id: str
    status: ResponseStatus
    payload: Any = None

    @property
    def is_final(self) -> bool:
        return self.status.is_final


class ResponseContext:
    """Wraps a channel writer for a single request.

    Args:
        request_id: Request the messages answer
        writer: Sends one message to the channel
    """

    def __init__(self, request_id: str, writer: Callable[[ResponseMessage], None]) -> None:
        self._request_id = request_id
        self._writer = writer
        self._lock = threading.Lock()
        self._final_written = False

    @property
    def request_id(self) -> str:
        return self._request_id

    @property
    def final_written(self) -> bool:
        return self._final_written

    def write_and_flush(self, message: ResponseMessage) -> None:
        """Write a message, marking the request finished if it is final.

        Raises:
            FinalResponseAlreadyWrittenError: A final message was already written
        """
        with self._lock:
            if self._final_written:
                raise FinalResponseAlreadyWrittenError(self._request_id)
            self._final_written = message.is_final
        self._writer(message)

    def write(self, status: ResponseStatus, payload: Any = None) -> None:
        self.write_and_flush(ResponseMessage(request_id=self._request_id, status=status, payload=payload))


def bind_result(future: Future[ComputerResult], context: ResponseContext) -> None:
    """Deliver a submission's outcome as the request's final message.

    A successful submission is written as SUCCESS with the ComputerResult
    as payload; a failed one as SERVER_ERROR with the exception.
    """

    def _deliver(done: Future[ComputerResult]) -> None:
        if done.cancelled():
            context.write(ResponseStatus.SERVER_ERROR, "Submission was cancelled")
            return
        error = done.exception()
        if error is not None:
            logger.warning("Submission failed, answering with server error", request_id=context.request_id, error=str(error))
            context.write(ResponseStatus.SERVER_ERROR, error)
            return
        context.write(ResponseStatus.SUCCESS, done.result())

    future.add_done_callback(_deliver)
