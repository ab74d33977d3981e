"""Command line interface for configsync."""

from typing import List, Optional, Tuple

import click
from rich.markup import escape

from .core.backup import BackupManager
from .core.config import SyncConfig
from .core.errors import SyncError
from .core.logging import console, setup_logging
from .core.report import render_usage
from .core.restore import RestoreManager


def _fail(ctx: click.Context, error: Exception) -> None:
    console.print(f"[red]✗[/red]  {escape(str(error))}")
    ctx.exit(1)


class SyncGroup(click.Group):
    """Command group that answers unknown commands with the usage summary."""

    def resolve_command(
        self, ctx: click.Context, args: List[str]
    ) -> Tuple[Optional[str], Optional[click.Command], List[str]]:
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError:
            render_usage(console, ctx.find_root().info_name or "configsync")
            ctx.exit(1)


@click.group(cls=SyncGroup, invoke_without_command=True)
@click.option("--debug", is_flag=True, help="Show debug logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Also write the full log to this file",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, log_file: Optional[str]) -> None:
    """Back up and restore the configuration directory.

    Copies the tracked configuration from ~/.claude into the claude/ directory
    next to this tool, and back again.

    Main commands:

      backup    Copy the live configuration into the snapshot
      restore   Copy the snapshot back over the live configuration
    """
    if ctx.invoked_subcommand is None:
        render_usage(console, ctx.info_name or "configsync")
        ctx.exit(1)

    setup_logging(debug=debug, log_file=log_file)

    if ctx.obj is None:
        try:
            ctx.obj = SyncConfig.default()
        except SyncError as e:
            _fail(ctx, e)

    errors = ctx.obj.validate()
    if errors:
        _fail(ctx, SyncError("; ".join(errors)))


@cli.command()
@click.pass_context
def backup(ctx: click.Context) -> None:
    """Back up the live configuration into the snapshot.

    Every tracked entity is copied from ~/.claude into the snapshot directory.
    Missing entities are skipped and failures are reported, but neither stops
    the other entities from being backed up. Commit the snapshot afterwards to
    keep it.
    """
    manager = BackupManager(ctx.obj, console)
    try:
        manager.backup()
    except SyncError as e:
        _fail(ctx, e)


@cli.command()
@click.pass_context
def restore(ctx: click.Context) -> None:
    """Restore the live configuration from the snapshot.

    Asks for confirmation first; anything other than "y" cancels without
    changing a file. Tracked directories are replaced as a whole, tracked files
    are overwritten, and untracked files next to them are kept.
    """
    manager = RestoreManager(ctx.obj, console)
    try:
        manager.restore()
    except SyncError as e:
        _fail(ctx, e)


def main() -> None:
    """Entry point for the configsync CLI."""
    cli()


if __name__ == "__main__":
    main()
