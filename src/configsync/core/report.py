"""Per-entity outcome reporting for backup and restore runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console
from rich.filesize import decimal
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .catalog import get_entities, get_entity


class Outcome(str, Enum):
    """Result of processing one entity."""

    CAPTURED = "captured"
    RESTORED = "restored"
    SKIPPED_MISSING_SOURCE = "skipped-missing-source"
    SKIPPED_ABSENT_IN_SNAPSHOT = "skipped-absent-in-snapshot"
    FAILED = "failed"

    @property
    def is_skip(self) -> bool:
        return self in (Outcome.SKIPPED_MISSING_SOURCE, Outcome.SKIPPED_ABSENT_IN_SNAPSHOT)


OUTCOME_STYLES: Dict[Outcome, str] = {
    Outcome.CAPTURED: "[green]✓ captured[/green]",
    Outcome.RESTORED: "[green]✓ restored[/green]",
    Outcome.SKIPPED_MISSING_SOURCE: "[yellow]⚠ skipped (not found)[/yellow]",
    Outcome.SKIPPED_ABSENT_IN_SNAPSHOT: "[yellow]⚠ skipped (not in backup)[/yellow]",
    Outcome.FAILED: "[red]✗ failed[/red]",
}


@dataclass(frozen=True)
class EntityOutcome:
    """Outcome recorded for a single entity."""

    entity_id: str
    outcome: Outcome
    reason: Optional[str] = None


@dataclass
class OperationReport:
    """Ordered per-entity outcomes of one backup or restore run.

    Attributes:
        operation: Name of the operation ("backup" or "restore").
        outcomes: Outcomes in catalog order.
        mismatches: Verification problems keyed by entity id. Only filled in
            after a restore.
    """

    operation: str
    outcomes: List[EntityOutcome] = field(default_factory=list)
    mismatches: Dict[str, List[str]] = field(default_factory=dict)

    def record(self, entity_id: str, outcome: Outcome, reason: Optional[str] = None) -> None:
        """Append the outcome for an entity."""
        self.outcomes.append(EntityOutcome(entity_id, outcome, reason))

    def outcome_for(self, entity_id: str) -> Optional[EntityOutcome]:
        """Get the recorded outcome for an entity, if any."""
        for entry in self.outcomes:
            if entry.entity_id == entity_id:
                return entry
        return None

    @property
    def failed(self) -> List[EntityOutcome]:
        return [entry for entry in self.outcomes if entry.outcome is Outcome.FAILED]

    @property
    def succeeded(self) -> List[EntityOutcome]:
        return [
            entry
            for entry in self.outcomes
            if entry.outcome in (Outcome.CAPTURED, Outcome.RESTORED)
        ]


def render_report(report: OperationReport, console: Console) -> None:
    """Display a report as a table.

    Args:
        report: Report to display.
        console: Console to print to.
    """
    table = Table(title=f"{report.operation.capitalize()} Results")
    table.add_column("Entity", style="cyan")
    table.add_column("Path", style="magenta")
    table.add_column("Status")
    table.add_column("Details", style="yellow")

    for entry in report.outcomes:
        try:
            path = get_entity(entry.entity_id).display_path
        except KeyError:
            path = ""

        details = escape(entry.reason or "")
        problems = report.mismatches.get(entry.entity_id)
        if problems:
            shown = [escape(problem) for problem in problems[:3]]
            if len(problems) > 3:
                shown.append("...")
            details = "\n".join(filter(None, [details, "Verification:", *shown]))

        table.add_row(entry.entity_id, path, OUTCOME_STYLES[entry.outcome], details)

    console.print(table)

    if report.failed:
        console.print(
            f"[red]✗ {len(report.failed)} of {len(report.outcomes)} entities failed[/red]"
        )
    else:
        console.print(f"[green]✓ {report.operation.capitalize()} completed[/green]")


def _add_children(tree: Tree, directory: Path) -> None:
    for path in sorted(directory.iterdir(), key=lambda p: (not p.is_dir(), p.name)):
        if path.is_dir() and not path.is_symlink():
            branch = tree.add(f"[bold blue]{escape(path.name)}/[/]")
            _add_children(branch, path)
        else:
            size = decimal(path.lstat().st_size)
            tree.add(f"[green]{escape(path.name)}[/] [dim]({size})[/]")


def render_snapshot_listing(snapshot_root: Path, console: Console) -> None:
    """Display the contents of the snapshot root as a tree."""
    tree = Tree(f"[bold]{escape(str(snapshot_root))}[/]")
    try:
        _add_children(tree, snapshot_root)
    except (PermissionError, FileNotFoundError):
        console.print("[yellow]Error reading directory[/yellow]")
        return
    console.print(tree)


def render_usage(console: Console, prog_name: str = "configsync") -> None:
    """Display the usage summary with every tracked path."""
    console.print("Usage:")
    console.print(f"  {prog_name} backup   - back up the configuration into the snapshot")
    console.print(f"  {prog_name} restore  - restore the configuration from the snapshot")
    console.print("")
    console.print("Tracked paths:")
    entities = get_entities()
    width = max(len(entity.display_path) for entity in entities)
    for entity in entities:
        console.print(f"  • {entity.display_path.ljust(width)}  ({entity.description})")
