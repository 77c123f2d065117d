"""Response channel for delivering submission outcomes to remote callers."""

from bulkgraph.server.response import ResponseContext, ResponseMessage, bind_result

__all__ = ["ResponseContext", "ResponseMessage", "bind_result"]
