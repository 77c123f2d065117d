# src/bulkgraph/engine/materialization.py
"""Materialization policy: which graph view to return and what to keep.

Two pure functions, no side effects:

- check_combination(): the ResultGraph x Persist validity matrix. Returns
  the error instead of raising it, so the matrix can be tested (and
  reported) on its own.
- resolve_materialization(): fills defaults from the vertex program's
  preferences (or ORIGINAL/NOTHING without one) and raises the error
  check_combination() returns.

The resolved outcome's has_edges flag decides the shape of the BSP output,
of every map-reduce job's input, and of the returned graph handle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bulkgraph.contracts.enums import Persist, ResultGraph
from bulkgraph.contracts.errors import ResultGraphPersistCombinationError
from bulkgraph.contracts.results import MaterializationOutcome

if TYPE_CHECKING:
    from bulkgraph.contracts.programs import VertexProgram


def check_combination(result_graph: ResultGraph, persist: Persist) -> ResultGraphPersistCombinationError | None:
    """Validate a result graph / persist pairing.

    The original input graph is never mutated in place, so ORIGINAL is
    only valid when nothing computed is kept.

    Returns:
        None if the pairing is valid, otherwise the error naming both values
    """
    if result_graph == ResultGraph.ORIGINAL and persist != Persist.NOTHING:
        return ResultGraphPersistCombinationError(result_graph, persist)
    return None


def resolve_materialization(
    program: VertexProgram | None,
    result_graph: ResultGraph | None = None,
    persist: Persist | None = None,
) -> MaterializationOutcome:
    """Resolve the caller's explicit choices against the program's preferences.

    Args:
        program: The configured vertex program, if any
        result_graph: Caller's explicit choice, None to use the default
        persist: Caller's explicit choice, None to use the default

    Returns:
        Immutable MaterializationOutcome

    Raises:
        ResultGraphPersistCombinationError: ORIGINAL paired with anything but NOTHING
    """
    if persist is None:
        persist = program.preferred_persist if program is not None else Persist.NOTHING
    if result_graph is None:
        result_graph = program.preferred_result_graph if program is not None else ResultGraph.ORIGINAL

    error = check_combination(result_graph, persist)
    if error is not None:
        raise error
    return MaterializationOutcome(result_graph=result_graph, persist=persist)
