"""Tests for the key-value backends."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from workout_store.backends import InMemoryBackend, JsonFileBackend
from workout_store.exceptions import BackendError


class TestInMemoryBackend:
    @pytest.mark.asyncio
    async def test_get_missing_is_none(self) -> None:
        assert await InMemoryBackend().get("weights") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self) -> None:
        backend = InMemoryBackend()
        await backend.set("workoutType", "B")
        assert await backend.get("workoutType") == "B"

    @pytest.mark.asyncio
    async def test_remove_many_ignores_absent_keys(self) -> None:
        backend = InMemoryBackend({"a": "1", "b": "2", "c": "3"})
        await backend.remove_many(["a", "b", "missing"])
        assert backend.snapshot() == {"c": "3"}

    def test_initial_dict_is_copied(self) -> None:
        initial = {"a": "1"}
        backend = InMemoryBackend(initial)
        initial["a"] = "changed"
        assert backend.snapshot() == {"a": "1"}


class TestJsonFileBackend:
    @pytest.mark.asyncio
    async def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        backend = JsonFileBackend(tmp_path / "state.json")
        assert await backend.get("weights") is None

    @pytest.mark.asyncio
    async def test_set_creates_parent_dirs_and_persists(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "state.json"
        await JsonFileBackend(path).set("workoutType", "B")

        assert json.loads(path.read_text(encoding="utf-8")) == {"workoutType": "B"}
        assert await JsonFileBackend(path).get("workoutType") == "B"

    @pytest.mark.asyncio
    async def test_remove_many_rewrites_file(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"a": "1", "b": "2", "c": "3"}), encoding="utf-8")
        await JsonFileBackend(path).remove_many(("a", "c"))
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    @pytest.mark.asyncio
    async def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        backend = JsonFileBackend(tmp_path / "state.json")
        await backend.set("a", "1")
        await backend.set("b", "2")
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    @pytest.mark.asyncio
    async def test_corrupt_file_raises_backend_error(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(BackendError):
            await JsonFileBackend(path).get("weights")

    @pytest.mark.asyncio
    async def test_non_object_file_raises_backend_error(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(BackendError):
            await JsonFileBackend(path).set("a", "1")

    def test_path_expands_user(self) -> None:
        backend = JsonFileBackend("~/state.json")
        assert "~" not in str(backend.path)
