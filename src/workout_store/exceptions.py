"""Custom exception hierarchy for the workout store."""

from __future__ import annotations


class WorkoutStoreError(Exception):
    """Base exception for all workout_store errors."""


class BackendError(WorkoutStoreError):
    """The underlying key-value backend failed to read or write."""


class StorageWriteError(WorkoutStoreError):
    """A state-of-record write did not reach the backend."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class StorageClearError(WorkoutStoreError):
    """Wiping the stored keys failed; nothing is guaranteed removed."""


class SessionNotFoundError(WorkoutStoreError):
    """No stored session has the requested id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id
