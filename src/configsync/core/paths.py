"""Resolve tracked entities to concrete source and destination paths."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from .catalog import ConfigEntity, get_entities
from .config import SyncConfig, roots_overlap
from .errors import PathResolutionError


class Direction(str, Enum):
    """Direction of a synchronization run."""

    BACKUP = "backup"
    RESTORE = "restore"


@dataclass(frozen=True)
class ResolvedEntity:
    """An entity bound to the paths of a single operation."""

    entity: ConfigEntity
    source_path: Path
    destination_path: Path


def _check_root(root: Optional[Path], name: str) -> Path:
    if root is None or not str(root):
        raise PathResolutionError(f"{name} could not be determined")
    if not root.is_absolute():
        raise PathResolutionError(f"{name} {root} is not an absolute path")
    return root


def _check_roots(config: SyncConfig) -> Tuple[Path, Path]:
    live_root = _check_root(config.live_root, "Live configuration root")
    snapshot_root = _check_root(config.snapshot_root, "Snapshot root")
    if roots_overlap(live_root, snapshot_root):
        raise PathResolutionError(
            f"Live configuration root {live_root} and snapshot root {snapshot_root} "
            "must not be the same or nested directories"
        )
    return live_root, snapshot_root


def resolve_for_backup(config: SyncConfig, entity: ConfigEntity) -> ResolvedEntity:
    """Resolve an entity for copying live configuration into the snapshot.

    Args:
        config: Root configuration.
        entity: Entity to resolve.

    Returns:
        ResolvedEntity with the live path as source and the snapshot path as
        destination.

    Raises:
        PathResolutionError: If the live root cannot be determined or the
            roots overlap.
    """
    live_root, snapshot_root = _check_roots(config)
    return ResolvedEntity(
        entity=entity,
        source_path=live_root / entity.relative_name,
        destination_path=snapshot_root / entity.relative_name,
    )


def resolve_for_restore(config: SyncConfig, entity: ConfigEntity) -> ResolvedEntity:
    """Resolve an entity for copying the snapshot back to the live root.

    Raises:
        PathResolutionError: If either root is unusable or the snapshot root
            does not exist.
    """
    live_root, snapshot_root = _check_roots(config)
    if not snapshot_root.is_dir():
        raise PathResolutionError(f"Snapshot root {snapshot_root} does not exist")
    return ResolvedEntity(
        entity=entity,
        source_path=snapshot_root / entity.relative_name,
        destination_path=live_root / entity.relative_name,
    )


def resolve_all(config: SyncConfig, direction: Direction) -> List[ResolvedEntity]:
    """Resolve every tracked entity in catalog order."""
    resolve = resolve_for_backup if direction is Direction.BACKUP else resolve_for_restore
    return [resolve(config, entity) for entity in get_entities()]


def ensure_root(root: Path, name: str) -> None:
    """Create a root directory if it is missing.

    Raises:
        PathResolutionError: If the directory cannot be created.
    """
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PathResolutionError(f"Cannot create {name} {root}: {e}") from e
