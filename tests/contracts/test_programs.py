# tests/contracts/test_programs.py
"""Tests for phase descriptor protocols and ComputerFeatures."""

import pytest

from bulkgraph.contracts import ComputerFeatures, MapReduce, ResponseStatus, VertexProgram
from tests.helpers.fakes import StubMapReduce, StubVertexProgram


class TestProtocols:
    def test_stub_program_is_vertex_program(self) -> None:
        assert isinstance(StubVertexProgram(), VertexProgram)

    def test_stub_job_is_map_reduce(self) -> None:
        assert isinstance(StubMapReduce("count"), MapReduce)


class TestComputerFeatures:
    @pytest.mark.parametrize("name", ["global_message_scopes", "supports_global_message_scopes"])
    def test_prefix_optional(self, name: str) -> None:
        assert ComputerFeatures().supports(name)

    def test_unknown_feature_unsupported(self) -> None:
        assert ComputerFeatures().supports("teleportation") is False

    def test_defaults_disallow_mutation(self) -> None:
        features = ComputerFeatures()

        assert not features.supports("vertex_addition")
        assert not features.supports("edge_removal")
        assert features.supports("vertex_property_addition")


class TestResponseStatus:
    @pytest.mark.parametrize("status", [ResponseStatus.PARTIAL_CONTENT, ResponseStatus.AUTHENTICATE])
    def test_non_final(self, status: ResponseStatus) -> None:
        assert status.is_final is False

    @pytest.mark.parametrize("status", [ResponseStatus.SUCCESS, ResponseStatus.NO_CONTENT, ResponseStatus.SERVER_ERROR])
    def test_final(self, status: ResponseStatus) -> None:
        assert status.is_final is True
