"""Exceptions raised by the synchronization core."""

from __future__ import annotations

from typing import Optional


class SyncError(Exception):
    """Base class for configsync errors."""


class PathResolutionError(SyncError):
    """A live or snapshot root could not be determined."""


class CopyError(SyncError):
    """Copying a single entity failed.

    Attributes:
        entity_id: Identifier of the entity being copied.
        reason: Human readable description of the failure.
    """

    def __init__(self, entity_id: str, reason: str) -> None:
        super().__init__(f"{entity_id}: {reason}")
        self.entity_id = entity_id
        self.reason = reason


class RestoreError(SyncError):
    """A restore precondition failed."""

    SNAPSHOT_MISSING = "snapshot-missing"

    def __init__(self, reason: str, path: Optional[str] = None) -> None:
        message = f"Backup directory not found: {path}" if path else reason
        super().__init__(message)
        self.reason = reason
        self.path = path
