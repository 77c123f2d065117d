# tests/engine/test_validation.py
"""Tests for vertex program validation against computer features."""

import pytest

from bulkgraph.contracts import ComputerFeatures, InvalidMemoryKeyError, ProgramValidationError
from bulkgraph.engine.validation import validate_program_on_computer
from tests.helpers.fakes import StubVertexProgram


class TestValidateProgramOnComputer:
    def test_valid_program_passes(self) -> None:
        program = StubVertexProgram(required_features=frozenset({"global_message_scopes", "supports_vertex_property_addition"}))

        validate_program_on_computer(program, ComputerFeatures())

    def test_unsupported_features_listed_sorted(self) -> None:
        program = StubVertexProgram(name="Mutator", required_features=frozenset({"vertex_removal", "edge_addition"}))

        with pytest.raises(ProgramValidationError) as exc_info:
            validate_program_on_computer(program, ComputerFeatures())

        assert exc_info.value.program_name == "Mutator"
        assert "['edge_addition', 'vertex_removal']" in str(exc_info.value)

    def test_unknown_feature_is_unsupported(self) -> None:
        program = StubVertexProgram(required_features=frozenset({"time_travel"}))

        with pytest.raises(ProgramValidationError, match="time_travel"):
            validate_program_on_computer(program, ComputerFeatures())

    def test_feature_enabled_on_computer_passes(self) -> None:
        program = StubVertexProgram(required_features=frozenset({"vertex_removal"}))

        validate_program_on_computer(program, ComputerFeatures(supports_vertex_removal=True))

    @pytest.mark.parametrize("key", ["", "~iteration"])
    def test_invalid_memory_key_chained(self, key: str) -> None:
        program = StubVertexProgram(memory_compute_keys=frozenset({key}))

        with pytest.raises(ProgramValidationError) as exc_info:
            validate_program_on_computer(program, ComputerFeatures())

        assert isinstance(exc_info.value.__cause__, InvalidMemoryKeyError)
