# src/bulkgraph/engine/validation.py
"""Vertex program validation, run by submit() before anything launches.

Validations performed:
- Memory compute keys are non-empty strings outside the reserved prefix
- Every feature the program requires is supported by the computer

A failure here has no side effects: nothing has been staged, deleted or
submitted to an engine yet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bulkgraph.contracts.errors import InvalidMemoryKeyError, ProgramValidationError
from bulkgraph.core.memory import validate_memory_keys

if TYPE_CHECKING:
    from bulkgraph.contracts.programs import ComputerFeatures, VertexProgram


def validate_program_on_computer(program: VertexProgram, features: ComputerFeatures) -> None:
    """Validate a vertex program against the computer that will run it.

    Args:
        program: The configured vertex program
        features: What the computer supports

    Raises:
        ProgramValidationError: If a memory key is invalid or a required
            feature is unsupported
    """
    try:
        validate_memory_keys(program.memory_compute_keys)
    except InvalidMemoryKeyError as e:
        raise ProgramValidationError(program.name, str(e)) from e

    unsupported = sorted(feature for feature in program.required_features if not features.supports(feature))
    if unsupported:
        raise ProgramValidationError(
            program.name,
            f"the computer does not support required feature(s) {unsupported}",
        )
