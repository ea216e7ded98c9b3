"""Key-value backends: string keys, string values, asynchronous access.

The tracker only needs get, set and a multi-key remove, so any local store
can sit behind ``KeyValueBackend``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from workout_store.exceptions import BackendError

logger = logging.getLogger(__name__)


class KeyValueBackend(ABC):
    """Asynchronous string key-value store.

    ``get`` returns None for a missing key. ``remove_many`` either removes
    every listed key or raises, leaving the store unchanged. Failures are
    raised as BackendError.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def remove_many(self, keys: list[str] | tuple[str, ...]) -> None:
        ...


class InMemoryBackend(KeyValueBackend):
    """Dict-backed store for tests and throwaway runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_many(self, keys: list[str] | tuple[str, ...]) -> None:
        for key in keys:
            self._data.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """Copy of the raw stored values."""
        return dict(self._data)


class JsonFileBackend(KeyValueBackend):
    """All keys in one JSON object file.

    Every write replaces the whole file through a temp file and
    ``os.replace``, so a multi-key removal lands atomically. File I/O runs in
    a worker thread; a lock serialises read-modify-write cycles.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def get(self, key: str) -> str | None:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            data[key] = value
            await asyncio.to_thread(self._write_all, data)

    async def remove_many(self, keys: list[str] | tuple[str, ...]) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            for key in keys:
                data.pop(key, None)
            await asyncio.to_thread(self._write_all, data)

    # ------------------------------------------------------------------
    # Internal helpers (run in a worker thread)
    # ------------------------------------------------------------------

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise BackendError(f"Cannot read {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise BackendError(f"{self._path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise BackendError(f"Cannot write {self._path}: {exc}") from exc
        logger.debug("Wrote %d keys to %s", len(data), self._path)
