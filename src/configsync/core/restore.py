"""Restore functionality for configsync."""

from __future__ import annotations

import filecmp
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from rich.console import Console

from .catalog import EntityKind
from .config import SyncConfig
from .errors import CopyError, RestoreError
from .mirror import mirror_resolved, source_exists
from .paths import Direction, ResolvedEntity, ensure_root, resolve_all
from .report import OperationReport, Outcome, render_report

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]

CONFIRM_PROMPT = "This will overwrite the existing configuration. Continue? (y/N): "


def console_confirm(console: Console) -> ConfirmFn:
    """Build a confirmation callable that asks on the given console.

    Only an explicit ``y`` or ``yes`` confirms. Empty input and end of input
    count as a decline.
    """

    def confirm(prompt: str) -> bool:
        try:
            answer = console.input(prompt)
        except EOFError:
            console.print()
            return False
        return answer.strip().lower() in ("y", "yes")

    return confirm


def _compare_trees(src_dir: Path, dst_dir: Path) -> List[str]:
    problems = []
    src_files = {p.relative_to(src_dir) for p in src_dir.rglob("*") if p.is_file()}
    dst_files = {p.relative_to(dst_dir) for p in dst_dir.rglob("*") if p.is_file()}

    for rel_path in sorted(src_files - dst_files):
        problems.append(f"Missing in target: {rel_path}")
    for rel_path in sorted(dst_files - src_files):
        problems.append(f"Only in target: {rel_path}")
    for rel_path in sorted(src_files & dst_files):
        if not filecmp.cmp(src_dir / rel_path, dst_dir / rel_path, shallow=False):
            problems.append(f"Content mismatch: {rel_path}")
    return problems


def _compare_file(src_file: Path, dst_file: Path) -> List[str]:
    if not dst_file.is_file():
        return [f"Missing in target: {dst_file.name}"]
    if not filecmp.cmp(src_file, dst_file, shallow=False):
        src_size = src_file.stat().st_size
        dst_size = dst_file.stat().st_size
        return [
            f"Content mismatch: {dst_file.name} "
            f"(backup: {src_size} bytes, target: {dst_size} bytes)"
        ]
    return []


class RestoreManager:
    """Manage restoring the live configuration from the snapshot."""

    def __init__(
        self,
        config: SyncConfig,
        console: Optional[Console] = None,
        confirm: Optional[ConfirmFn] = None,
    ) -> None:
        """Initialize restore manager.

        Args:
            config: Live and snapshot roots.
            console: Rich console for output. If None, creates a new console.
            confirm: Callable asked before anything is overwritten. Defaults to
                an interactive prompt on the console.
        """
        self.config = config
        self.console = console or Console()
        self.confirm = confirm or console_confirm(self.console)
        self.logger = logging.getLogger(__name__)
        self.logger.debug(
            "RestoreManager initialized with snapshot root: %s", self.config.snapshot_root
        )

    def check_snapshot(self) -> None:
        """Make sure there is a snapshot to restore from.

        Raises:
            RestoreError: If the snapshot root does not exist.
        """
        snapshot_root = self.config.snapshot_root
        self.logger.debug("Checking if snapshot root exists: %s", snapshot_root)
        if not snapshot_root.is_dir():
            raise RestoreError(RestoreError.SNAPSHOT_MISSING, str(snapshot_root))

    def validate_restore(self, resolved_entities: List[ResolvedEntity]) -> Dict[str, List[str]]:
        """Compare restored entities with their snapshot copies.

        Only the tracked content is compared: whole directory trees for
        directory mirrors, the allow-listed files for selective file sets.

        Args:
            resolved_entities: Entities that were restored.

        Returns:
            Problems found, keyed by entity id. Entities without problems are
            left out.
        """
        results: Dict[str, List[str]] = {}
        for resolved in resolved_entities:
            entity = resolved.entity
            src = resolved.source_path
            dst = resolved.destination_path

            if entity.kind is EntityKind.DIRECTORY_MIRROR:
                problems = _compare_trees(src, dst)
            elif entity.kind is EntityKind.SELECTIVE_FILE_SET:
                problems = []
                for name in sorted(entity.allowed_filenames):
                    if (src / name).is_file():
                        problems.extend(_compare_file(src / name, dst / name))
            else:
                problems = _compare_file(src, dst)

            if problems:
                logger.warning("Restored %s differs from backup: %s", entity.id, problems)
                results[entity.id] = problems
            else:
                logger.info("Validated %s", entity.id)
        return results

    def restore(self, render: bool = True) -> Optional[OperationReport]:
        """Restore all tracked entities from the snapshot root.

        The snapshot is treated as the desired state: directory mirrors replace
        the live directory as a whole, while selective file sets and whole
        files only overwrite the tracked files and keep untracked siblings.

        Args:
            render: Whether to print the outcome table when done.

        Returns:
            The report of the run, or None if the user declined.

        Raises:
            RestoreError: If the snapshot root does not exist. Checked before
                the prompt, and nothing is written.
            PathResolutionError: If the roots overlap (checked before the
                prompt) or the live root cannot be created.
        """
        self.check_snapshot()
        resolved_entities = resolve_all(self.config, Direction.RESTORE)

        self.console.print("[yellow]⚠[/yellow]  Restoring will overwrite the existing configuration")
        if not self.confirm(CONFIRM_PROMPT):
            logger.info("Restore declined")
            self.console.print("[blue]ℹ[/blue]  Restore cancelled")
            return None

        self.console.print("[blue]ℹ[/blue]  Restoring configuration...")
        ensure_root(self.config.live_root, "live configuration root")

        report = OperationReport("restore")
        restored: List[ResolvedEntity] = []
        for resolved in resolved_entities:
            entity = resolved.entity
            if not source_exists(resolved):
                logger.info("Skipping %s: not present in backup", entity.id)
                report.record(entity.id, Outcome.SKIPPED_ABSENT_IN_SNAPSHOT)
                continue

            try:
                mirror_resolved(resolved)
            except CopyError as e:
                logger.error("Error restoring %s: %s", entity.id, e.reason)
                report.record(entity.id, Outcome.FAILED, e.reason)
                continue

            report.record(entity.id, Outcome.RESTORED)
            restored.append(resolved)

        report.mismatches = self.validate_restore(restored)

        if render:
            render_report(report, self.console)
            if report.mismatches:
                self.console.print(
                    "[yellow]Warning: Some files may not have been restored correctly[/yellow]"
                )

        return report
