# src/bulkgraph/engine/spans.py
"""OpenTelemetry span factory for graph computer submissions.

Falls back to no-op mode when no tracer is configured.

Span Hierarchy:
    submission
    ├── staging
    ├── vertex_program:{program_name}
    ├── map_reduce:{job_name}
    └── cleanup
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer


class NoOpSpan:
    """No-op span for when tracing is disabled."""

    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_status(self, status: Any) -> None:
        pass

    def record_exception(self, exception: BaseException) -> None:
        pass

    def is_recording(self) -> bool:
        return False


class SpanFactory:
    """Factory for submission spans.

    When no tracer is provided, all span methods yield a shared NoOpSpan.

    Example:
        factory = SpanFactory(tracer=opentelemetry.trace.get_tracer("bulkgraph"))

        with factory.submission_span(program="PageRank"):
            with factory.vertex_program_span("PageRank"):
                ...
    """

    _NOOP_SPAN = NoOpSpan()

    def __init__(self, tracer: "Tracer | None" = None) -> None:
        self._tracer = tracer

    @property
    def enabled(self) -> bool:
        """Whether tracing is enabled."""
        return self._tracer is not None

    @contextmanager
    def submission_span(self, program: str | None, map_reduce_count: int) -> Iterator["Span | NoOpSpan"]:
        """Span covering the whole asynchronous pipeline."""
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span("submission") as span:
            span.set_attribute("program.name", program or "")
            span.set_attribute("map_reduce.count", map_reduce_count)
            yield span

    @contextmanager
    def staging_span(self) -> Iterator["Span | NoOpSpan"]:
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span("staging") as span:
            yield span

    @contextmanager
    def vertex_program_span(self, program_name: str) -> Iterator["Span | NoOpSpan"]:
        """Span for the BSP job.

        Args:
            program_name: Name of the vertex program
        """
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span(f"vertex_program:{program_name}") as span:
            span.set_attribute("program.name", program_name)
            yield span

    @contextmanager
    def map_reduce_span(self, job_name: str, input_has_edges: bool) -> Iterator["Span | NoOpSpan"]:
        """Span for one map-reduce job.

        Args:
            job_name: Name of the map-reduce job
            input_has_edges: Shape of the job's input graph
        """
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span(f"map_reduce:{job_name}") as span:
            span.set_attribute("map_reduce.name", job_name)
            span.set_attribute("map_reduce.input_has_edges", input_has_edges)
            yield span

    @contextmanager
    def cleanup_span(self) -> Iterator["Span | NoOpSpan"]:
        if self._tracer is None:
            yield self._NOOP_SPAN
            return

        with self._tracer.start_as_current_span("cleanup") as span:
            yield span
