"""Tests for restore functionality."""

import io
import shutil
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

from configsync.core.backup import BackupManager
from configsync.core.config import SyncConfig
from configsync.core.errors import PathResolutionError, RestoreError
from configsync.core.paths import Direction, resolve_all
from configsync.core.report import Outcome
from configsync.core.restore import CONFIRM_PROMPT, RestoreManager, console_confirm
from helpers import ScriptedConfirm, console_output, create_live_files, snapshot_contents

MakeRestoreManager = Callable[..., RestoreManager]


@pytest.fixture
def snapshot(backup_manager: BackupManager, tmp_path: Path, snapshot_root: Path) -> Path:
    """Create a snapshot from a separate live root."""
    source = tmp_path / "other_machine" / ".claude"
    create_live_files(source)
    BackupManager(SyncConfig(source, snapshot_root), backup_manager.console).backup(render=False)
    return snapshot_root


def test_restore_into_empty_live_root(
    make_restore_manager: MakeRestoreManager, snapshot: Path, live_root: Path
) -> None:
    """Test restoring onto a machine without any configuration."""
    report = make_restore_manager(True).restore()

    assert report is not None
    assert [entry.outcome for entry in report.outcomes] == [Outcome.RESTORED] * 4
    assert (live_root / "skills" / "review" / "SKILL.md").read_text() == "# Review\n"
    assert (live_root / "settings.json").read_text() == '{"theme": "dark"}'
    assert not (live_root / "plugins" / "cache.bin").exists()
    assert not report.mismatches


def test_restore_asks_for_confirmation(
    sync_config: SyncConfig, console: Console, snapshot: Path
) -> None:
    """Test that the confirmation prompt is shown once."""
    confirm = ScriptedConfirm(True)
    RestoreManager(sync_config, console, confirm=confirm).restore()

    assert confirm.prompts == [CONFIRM_PROMPT]


def test_restore_declined(
    make_restore_manager: MakeRestoreManager,
    snapshot: Path,
    populated_live_root: Path,
    console: Console,
) -> None:
    """Test that declining leaves the live root untouched."""
    (populated_live_root / "settings.json").write_text("local")
    before = snapshot_contents(populated_live_root)

    assert make_restore_manager(False).restore() is None

    assert snapshot_contents(populated_live_root) == before
    assert "Restore cancelled" in console_output(console)


def test_restore_declined_does_not_create_live_root(
    make_restore_manager: MakeRestoreManager, snapshot: Path, live_root: Path
) -> None:
    """Test that declining does not create the live root."""
    make_restore_manager(False).restore()

    assert not live_root.exists()


def test_restore_missing_snapshot(
    make_restore_manager: MakeRestoreManager, live_root: Path, snapshot_root: Path
) -> None:
    """Test that a missing snapshot fails before prompting or writing."""
    manager = make_restore_manager(True)

    with pytest.raises(RestoreError) as excinfo:
        manager.restore()

    assert excinfo.value.reason == RestoreError.SNAPSHOT_MISSING
    assert manager.confirm.prompts == []  # type: ignore[attr-defined]
    assert not live_root.exists()
    assert not snapshot_root.exists()


def test_restore_replaces_skills(
    make_restore_manager: MakeRestoreManager, snapshot: Path, populated_live_root: Path
) -> None:
    """Test that live skills not in the snapshot are discarded."""
    (populated_live_root / "skills" / "stale.md").write_text("stale")

    make_restore_manager(True).restore()

    assert not (populated_live_root / "skills" / "stale.md").exists()
    assert (populated_live_root / "skills" / "notes.md").exists()


def test_restore_keeps_untracked_plugin_files(
    make_restore_manager: MakeRestoreManager, snapshot: Path, populated_live_root: Path
) -> None:
    """Test that the live plugin cache is left byte-for-byte unchanged."""
    (populated_live_root / "plugins" / "cache.bin").write_bytes(b"\x00\x01local cache")
    (populated_live_root / "plugins" / "installed_plugins.json").write_text("local")

    make_restore_manager(True).restore()

    plugins_dir = populated_live_root / "plugins"
    assert (plugins_dir / "cache.bin").read_bytes() == b"\x00\x01local cache"
    assert (plugins_dir / "cache" / "blob.bin").read_bytes() == b"\x00\x01cache"
    assert (plugins_dir / "installed_plugins.json").read_text() == '{"plugins": ["lint"]}'


def test_restore_skips_entities_absent_in_snapshot(
    make_restore_manager: MakeRestoreManager, snapshot: Path, populated_live_root: Path
) -> None:
    """Test that entities missing from the snapshot are skipped and left alone."""
    (snapshot / "keybindings.json").unlink()
    (populated_live_root / "keybindings.json").write_text("local keys")

    report = make_restore_manager(True).restore()

    assert report.outcome_for("keybindings").outcome is Outcome.SKIPPED_ABSENT_IN_SNAPSHOT
    assert (populated_live_root / "keybindings.json").read_text() == "local keys"


def test_restore_continues_after_failure(
    make_restore_manager: MakeRestoreManager,
    snapshot: Path,
    live_root: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test that a failing entity is reported and the rest are restored."""

    def fail(*args: object, **kwargs: object) -> None:
        raise OSError("Read-only file system")

    monkeypatch.setattr(shutil, "copytree", fail)

    report = make_restore_manager(True).restore()

    assert report.outcome_for("skills").outcome is Outcome.FAILED
    assert report.outcome_for("settings").outcome is Outcome.RESTORED
    assert (live_root / "settings.json").exists()


def test_validate_restore_reports_mismatch(
    make_restore_manager: MakeRestoreManager, snapshot: Path, live_root: Path
) -> None:
    """Test that verification notices a restored file that differs."""
    manager = make_restore_manager(True)
    report = manager.restore()
    assert not report.mismatches

    (live_root / "settings.json").write_text("changed")
    (live_root / "skills" / "extra.md").write_text("extra")

    problems = manager.validate_restore(resolve_all(manager.config, Direction.RESTORE))

    assert problems["settings"] == [
        "Content mismatch: settings.json (backup: 17 bytes, target: 7 bytes)"
    ]
    assert problems["skills"] == ["Only in target: extra.md"]
    assert "plugins" not in problems


@pytest.mark.parametrize(
    "answer, expected",
    [("y\n", True), ("YES\n", True), ("n\n", False), ("\n", False), ("", False)],
)
def test_console_confirm(answer: str, expected: bool, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that only an explicit yes confirms."""
    monkeypatch.setattr("sys.stdin", io.StringIO(answer))
    console = Console(file=io.StringIO())

    assert console_confirm(console)("Continue? ") is expected


def test_restore_live_root_not_creatable(
    snapshot: Path, tmp_path: Path, console: Console
) -> None:
    """Test that a live root that cannot be created is a root-level error."""
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    config = SyncConfig(live_root=blocker / ".claude", snapshot_root=snapshot)
    manager = RestoreManager(config, console, confirm=ScriptedConfirm(True))

    with pytest.raises(PathResolutionError) as excinfo:
        manager.restore()

    assert "Cannot create live configuration root" in str(excinfo.value)


def test_restore_same_roots_refused_before_prompt(snapshot: Path, console: Console) -> None:
    """Test that overlapping roots are refused without asking."""
    confirm = ScriptedConfirm(True)
    before = snapshot_contents(snapshot)

    with pytest.raises(PathResolutionError):
        RestoreManager(SyncConfig(snapshot, snapshot), console, confirm=confirm).restore()

    assert confirm.prompts == []
    assert snapshot_contents(snapshot) == before


def test_restore_settings_shadowed_by_directory(
    make_restore_manager: MakeRestoreManager, snapshot: Path, live_root: Path
) -> None:
    """Test that a live directory named like a tracked file is reported as failed."""
    (live_root / "settings.json").mkdir(parents=True)

    report = make_restore_manager(True).restore()

    assert report.outcome_for("settings").outcome is Outcome.FAILED
    assert not (live_root / "settings.json" / "settings.json").exists()
    assert report.outcome_for("keybindings").outcome is Outcome.RESTORED
