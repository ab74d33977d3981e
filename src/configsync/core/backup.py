"""Backup of the live configuration into the snapshot directory.

This module copies every tracked entity from the live configuration root into
the snapshot root. Each entity is handled independently: a missing source is
skipped, a copy failure is recorded, and the remaining entities are still
processed.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console

from .config import SyncConfig
from .errors import CopyError
from .mirror import mirror_resolved, source_exists
from .paths import Direction, ensure_root, resolve_all
from .report import OperationReport, Outcome, render_report, render_snapshot_listing

logger = logging.getLogger(__name__)


class BackupManager:
    """Manages backups of the live configuration.

    Attributes:
        config (SyncConfig): Live and snapshot roots
        console (Console): Rich console for output formatting
    """

    def __init__(self, config: SyncConfig, console: Optional[Console] = None):
        """Initialize the backup manager.

        Args:
            config (SyncConfig): Live and snapshot roots
            console (Optional[Console]): Rich console for output. If None, creates
                                      a new console.
        """
        self.config = config
        self.console = console or Console()

    def backup(self, render: bool = True) -> OperationReport:
        """Back up all tracked entities into the snapshot root.

        Runs through the catalog in order. Entities whose live copy does not
        exist are reported as skipped, which is expected for optional files
        such as keybindings. Directory mirrors are replaced as a whole and
        files are overwritten, so repeating a backup of an unchanged live root
        produces an identical snapshot.

        Args:
            render (bool): If True, print the outcome table and a listing of
                          the snapshot contents when done

        Returns:
            OperationReport: Outcome of every entity in catalog order

        Raises:
            PathResolutionError: If the live root cannot be determined, the roots
                                overlap, or the snapshot root cannot be created.
                                Entities are only copied after these checks.

        Example:
            ```python
            manager = BackupManager(SyncConfig.default())
            report = manager.backup()
            if report.failed:
                ...
            ```
        """
        resolved_entities = resolve_all(self.config, Direction.BACKUP)

        self.console.print("[blue]ℹ[/blue]  Backing up configuration...")
        logger.debug(
            "Backup from %s to %s", self.config.live_root, self.config.snapshot_root
        )

        ensure_root(self.config.snapshot_root, "snapshot root")

        report = OperationReport("backup")
        for resolved in resolved_entities:
            entity = resolved.entity
            if not source_exists(resolved):
                logger.info("Skipping %s: %s not found", entity.id, resolved.source_path)
                report.record(entity.id, Outcome.SKIPPED_MISSING_SOURCE)
                continue

            try:
                mirror_resolved(resolved)
            except CopyError as e:
                logger.error("Error backing up %s: %s", entity.id, e.reason)
                report.record(entity.id, Outcome.FAILED, e.reason)
                continue

            report.record(entity.id, Outcome.CAPTURED)

        if render:
            render_report(report, self.console)
            self.console.print(f"\nBackup location: {self.config.snapshot_root}\n")
            render_snapshot_listing(self.config.snapshot_root, self.console)

        return report
