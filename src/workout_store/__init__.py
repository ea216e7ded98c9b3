"""Workout store: all tracker persistence I/O lives here."""

from workout_store.backends import InMemoryBackend, JsonFileBackend, KeyValueBackend
from workout_store.exceptions import (
    BackendError,
    SessionNotFoundError,
    StorageClearError,
    StorageWriteError,
    WorkoutStoreError,
)
from workout_store.storage import WorkoutStorage

__all__ = [
    "BackendError",
    "InMemoryBackend",
    "JsonFileBackend",
    "KeyValueBackend",
    "SessionNotFoundError",
    "StorageClearError",
    "StorageWriteError",
    "WorkoutStorage",
    "WorkoutStoreError",
]
