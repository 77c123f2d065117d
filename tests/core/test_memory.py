# tests/core/test_memory.py
"""Tests for ComputationMemory declaration, write and read rules."""

import pytest

from bulkgraph.contracts import (
    HIDDEN_ITERATION,
    InvalidMemoryKeyError,
    MemoryKeyNotWrittenError,
    UndeclaredMemoryKeyError,
)
from bulkgraph.core.memory import ComputationMemory, validate_memory_keys
from tests.helpers.fakes import StubMapReduce, StubVertexProgram


@pytest.fixture
def memory() -> ComputationMemory:
    memory = ComputationMemory()
    memory.declare_vertex_program_keys(StubVertexProgram(memory_compute_keys=frozenset({"rank", "delta"})))
    return memory


class TestValidateMemoryKeys:
    @pytest.mark.parametrize("key", [None, "", 42, "~hidden"])
    def test_rejects_invalid_keys(self, key: object) -> None:
        with pytest.raises(InvalidMemoryKeyError):
            validate_memory_keys([key])

    def test_hidden_allowed_when_requested(self) -> None:
        validate_memory_keys([HIDDEN_ITERATION], allow_hidden=True)

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="can not be empty"):
            validate_memory_keys(["ok", ""])


class TestDeclaration:
    def test_program_keys_declared(self, memory: ComputationMemory) -> None:
        assert memory.declared_keys == frozenset({"rank", "delta"})

    def test_map_reduce_keys_declared(self, memory: ComputationMemory) -> None:
        memory.declare_map_reduce_keys(StubMapReduce("count", frozenset({"vertexCount"})))

        assert "vertexCount" in memory.declared_keys

    def test_hidden_iteration_not_reported_as_declared(self, memory: ComputationMemory) -> None:
        memory.declare_map_reduce_keys(StubMapReduce("~memory", frozenset({"rank", HIDDEN_ITERATION})))

        assert HIDDEN_ITERATION not in memory.declared_keys


class TestReadWrite:
    def test_write_then_read(self, memory: ComputationMemory) -> None:
        memory.set("rank", 0.25)

        assert memory.get("rank") == 0.25
        assert memory.keys() == frozenset({"rank"})

    def test_overwrite_replaces_value(self, memory: ComputationMemory) -> None:
        memory.set("rank", 0.25)
        memory.set("rank", 0.5)

        assert memory.get("rank") == 0.5

    def test_write_to_undeclared_key_raises(self, memory: ComputationMemory) -> None:
        with pytest.raises(UndeclaredMemoryKeyError, match="'edgeCount' was not declared"):
            memory.set("edgeCount", 1)

    def test_read_unknown_key_raises(self, memory: ComputationMemory) -> None:
        with pytest.raises(UndeclaredMemoryKeyError):
            memory.get("edgeCount")

    def test_read_unwritten_key_raises(self, memory: ComputationMemory) -> None:
        with pytest.raises(MemoryKeyNotWrittenError, match="has not been written"):
            memory.get("delta")

    def test_memory_errors_are_key_errors(self, memory: ComputationMemory) -> None:
        with pytest.raises(KeyError):
            memory.get("delta")

    def test_merge_is_all_or_nothing(self, memory: ComputationMemory) -> None:
        with pytest.raises(UndeclaredMemoryKeyError):
            memory.merge({"rank": 1.0, "bogus": 2})

        assert memory.keys() == frozenset()

    def test_merge_iteration(self, memory: ComputationMemory) -> None:
        memory.declare_map_reduce_keys(StubMapReduce("~memory", frozenset({HIDDEN_ITERATION})))

        memory.merge({HIDDEN_ITERATION: 9})

        assert memory.iteration == 9
        assert memory.keys() == frozenset()


class TestSnapshot:
    def test_snapshot_is_detached(self, memory: ComputationMemory) -> None:
        memory.set("rank", 1.0)
        memory.runtime_ms = 12.5

        snapshot = memory.as_immutable()
        memory.set("rank", 2.0)

        assert snapshot["rank"] == 1.0
        assert snapshot.runtime_ms == 12.5
        assert snapshot.declared_keys == frozenset({"rank", "delta"})
        assert "delta" not in snapshot

    def test_snapshot_rejects_assignment(self, memory: ComputationMemory) -> None:
        snapshot = memory.as_immutable()

        with pytest.raises(TypeError):
            snapshot["rank"] = 1.0  # type: ignore[index]
