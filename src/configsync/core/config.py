"""Root configuration for configsync.

The core never reads the user's home directory or the install location on its
own. Both roots are resolved once, at start, into a :class:`SyncConfig` which
is passed to the backup and restore managers.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .errors import PathResolutionError

# Directory consulted by the host application at runtime, relative to $HOME
LIVE_DIR_NAME = ".claude"

# Snapshot directory, relative to the tool's install location
SNAPSHOT_DIR_NAME = "claude"


def install_root() -> Path:
    """Return the directory the tool is installed in (the repository root).

    The snapshot lives in the checkout next to the sources, so this only works
    from a source or editable install.

    Raises:
        PathResolutionError: If the package is not running from a checkout's
            ``src/`` directory.
    """
    package_parent = Path(__file__).resolve().parents[2]
    if package_parent.name != "src":
        raise PathResolutionError(
            f"Cannot locate the snapshot directory: {package_parent} is not a source "
            "checkout. Install with 'pip install -e .' from the repository."
        )
    return package_parent.parent


def roots_overlap(first: Path, second: Path) -> bool:
    """Check whether two roots are the same directory or nested in each other."""
    first = first.resolve()
    second = second.resolve()
    return first == second or first in second.parents or second in first.parents


def default_live_root(home: Optional[Path] = None) -> Path:
    """Return the conventional live configuration root.

    Raises:
        PathResolutionError: If the user's home directory cannot be determined.
    """
    if home is None:
        try:
            home = Path.home()
        except (KeyError, RuntimeError) as e:
            raise PathResolutionError(f"Cannot determine home directory: {e}") from e
    return home / LIVE_DIR_NAME


@dataclass(frozen=True)
class SyncConfig:
    """Live and snapshot roots for one invocation.

    Attributes:
        live_root: Directory actually used by the host application.
        snapshot_root: Version-controlled directory holding the last backup.
    """

    live_root: Path
    snapshot_root: Path

    @classmethod
    def default(cls) -> "SyncConfig":
        """Build the configuration from the user profile and install location."""
        return cls(
            live_root=default_live_root(),
            snapshot_root=install_root() / SNAPSHOT_DIR_NAME,
        )

    def validate(self) -> List[str]:
        """Validate configuration."""
        errors = []

        if not isinstance(self.live_root, Path):
            errors.append("live_root must be a path")
        elif not self.live_root.is_absolute():
            errors.append(f"live_root {self.live_root} must be absolute")

        if not isinstance(self.snapshot_root, Path):
            errors.append("snapshot_root must be a path")
        elif not self.snapshot_root.is_absolute():
            errors.append(f"snapshot_root {self.snapshot_root} must be absolute")

        if not errors and roots_overlap(self.live_root, self.snapshot_root):
            errors.append(
                f"live_root {self.live_root} and snapshot_root {self.snapshot_root} "
                "must not be the same or nested directories"
            )

        return errors
