"""Core functionality for configsync."""

from .backup import BackupManager
from .config import SyncConfig
from .restore import RestoreManager

__all__ = ["BackupManager", "RestoreManager", "SyncConfig"]
