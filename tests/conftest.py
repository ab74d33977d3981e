"""Test configuration."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

from configsync.core.backup import BackupManager
from configsync.core.config import SyncConfig
from configsync.core.restore import RestoreManager
from helpers import ScriptedConfirm, create_live_files


@pytest.fixture
def live_root(tmp_path: Path) -> Path:
    """Live configuration root (not created)."""
    return tmp_path / "home" / ".claude"


@pytest.fixture
def snapshot_root(tmp_path: Path) -> Path:
    """Snapshot root (not created)."""
    return tmp_path / "dotfiles" / "claude"


@pytest.fixture
def sync_config(live_root: Path, snapshot_root: Path) -> SyncConfig:
    """Configuration pointing at temporary roots."""
    return SyncConfig(live_root=live_root, snapshot_root=snapshot_root)


@pytest.fixture
def populated_live_root(live_root: Path) -> Path:
    """Live root holding every tracked entity plus an untracked plugin cache."""
    create_live_files(live_root)
    return live_root


@pytest.fixture
def console() -> Console:
    """Console that writes into a buffer."""
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def backup_manager(sync_config: SyncConfig, console: Console) -> BackupManager:
    """Create a backup manager for testing."""
    return BackupManager(sync_config, console)


@pytest.fixture
def make_restore_manager(
    sync_config: SyncConfig, console: Console
) -> Callable[..., RestoreManager]:
    """Build restore managers that answer the confirmation with scripted answers."""

    def factory(*answers: bool) -> RestoreManager:
        return RestoreManager(sync_config, console, confirm=ScriptedConfirm(*answers))

    return factory
