"""Copy engine for tracked configuration entities.

This module copies a single entity in one direction, from ``source_path`` to
``destination_path``, according to the entity's kind:

- directory mirrors replace the destination subtree as a whole, so no stale
  files survive from an earlier copy
- selective file sets only copy the allow-listed files inside the container
  and leave every other file in that directory alone
- whole files are copied over the destination when the source exists

Nothing is ever deleted outside a directory mirror's destination.
"""

from __future__ import annotations

import errno
import logging
import shutil
from pathlib import Path
from typing import List

from .catalog import ConfigEntity, EntityKind
from .errors import CopyError
from .paths import ResolvedEntity

logger = logging.getLogger(__name__)


def source_exists(resolved: ResolvedEntity) -> bool:
    """Check whether the source side of an entity is present.

    Directory mirrors and selective file sets need a directory, whole-file
    entities need a regular file.
    """
    if resolved.entity.kind is EntityKind.WHOLE_FILE:
        return resolved.source_path.is_file()
    return resolved.source_path.is_dir()


def _replace_directory(source_path: Path, destination_path: Path) -> None:
    if destination_path.is_symlink() or destination_path.is_file():
        logger.debug("Removing %s before mirroring", destination_path)
        destination_path.unlink()
    elif destination_path.exists():
        logger.debug("Removing directory %s before mirroring", destination_path)
        shutil.rmtree(destination_path)

    destination_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source_path, destination_path, symlinks=True)


def _copy_over(src_file: Path, dst_file: Path) -> None:
    # copy2 would write inside a directory of the same name instead of replacing it
    if dst_file.is_dir():
        raise IsADirectoryError(errno.EISDIR, "Destination is a directory", str(dst_file))
    shutil.copy2(src_file, dst_file)


def _copy_selected(
    source_path: Path, destination_path: Path, allowed_filenames: List[str]
) -> List[Path]:
    destination_path.mkdir(parents=True, exist_ok=True)
    copied = []
    for name in allowed_filenames:
        src_file = source_path / name
        if not src_file.is_file():
            logger.debug("Tracked file %s not present, leaving destination as is", src_file)
            continue
        _copy_over(src_file, destination_path / name)
        copied.append(destination_path / name)
    return copied


def _copy_file(source_path: Path, destination_path: Path) -> bool:
    if not source_path.is_file():
        return False
    destination_path.parent.mkdir(parents=True, exist_ok=True)
    _copy_over(source_path, destination_path)
    return True


def mirror(source_path: Path, destination_path: Path, entity: ConfigEntity) -> None:
    """Copy one entity from ``source_path`` to ``destination_path``.

    Args:
        source_path: Where the entity is read from.
        destination_path: Where the entity is written to.
        entity: Catalog entry describing the copy semantics.

    Raises:
        CopyError: On any I/O or permission failure while copying.
    """
    try:
        if entity.kind is EntityKind.DIRECTORY_MIRROR:
            _replace_directory(source_path, destination_path)
            logger.info("Mirrored directory %s -> %s", source_path, destination_path)
        elif entity.kind is EntityKind.SELECTIVE_FILE_SET:
            copied = _copy_selected(
                source_path, destination_path, sorted(entity.allowed_filenames)
            )
            logger.info(
                "Copied %d tracked file(s) from %s -> %s",
                len(copied),
                source_path,
                destination_path,
            )
        elif _copy_file(source_path, destination_path):
            logger.info("Copied file %s -> %s", source_path, destination_path)
    except OSError as e:
        raise CopyError(entity.id, str(e)) from e


def mirror_resolved(resolved: ResolvedEntity) -> None:
    """Mirror an already resolved entity."""
    mirror(resolved.source_path, resolved.destination_path, resolved.entity)
