"""Catalog of tracked configuration entities.

Every entity lives at the same relative path under the live root and the
snapshot root. Tracking a new file or directory only requires appending an
entry to ``CATALOG``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Tuple


class EntityKind(str, Enum):
    """How an entity is copied between the two roots."""

    DIRECTORY_MIRROR = "directory-mirror"
    SELECTIVE_FILE_SET = "selective-file-set"
    WHOLE_FILE = "whole-file"


@dataclass(frozen=True)
class ConfigEntity:
    """A tracked piece of configuration.

    Attributes:
        id: Short identifier used in reports.
        relative_name: Path relative to both roots. For selective file sets this
            is the container directory.
        kind: Copy semantics for the entity.
        description: Friendly name shown in the usage summary.
        allowed_filenames: File names managed inside a selective file set's
            container. Anything else in that directory is never touched.
    """

    id: str
    relative_name: str
    kind: EntityKind
    description: str = ""
    allowed_filenames: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        if self.kind is EntityKind.SELECTIVE_FILE_SET and not self.allowed_filenames:
            raise ValueError(f"Selective file set {self.id} must list allowed filenames")
        if self.kind is not EntityKind.SELECTIVE_FILE_SET and self.allowed_filenames:
            raise ValueError(f"Only selective file sets may list allowed filenames ({self.id})")

    @property
    def display_path(self) -> str:
        """Relative path with a trailing slash for directory entities."""
        if self.kind is EntityKind.WHOLE_FILE:
            return self.relative_name
        return self.relative_name.rstrip("/") + "/"


CATALOG: Tuple[ConfigEntity, ...] = (
    ConfigEntity(
        id="skills",
        relative_name="skills",
        kind=EntityKind.DIRECTORY_MIRROR,
        description="global skills",
    ),
    # cache/ and marketplaces/ next to these manifests are regenerable
    ConfigEntity(
        id="plugins",
        relative_name="plugins",
        kind=EntityKind.SELECTIVE_FILE_SET,
        description="global plugins",
        allowed_filenames=frozenset({"installed_plugins.json", "known_marketplaces.json"}),
    ),
    ConfigEntity(
        id="settings",
        relative_name="settings.json",
        kind=EntityKind.WHOLE_FILE,
        description="global settings",
    ),
    ConfigEntity(
        id="keybindings",
        relative_name="keybindings.json",
        kind=EntityKind.WHOLE_FILE,
        description="keybindings",
    ),
)


def get_entities() -> List[ConfigEntity]:
    """Get all tracked entities in catalog order."""
    return list(CATALOG)


def get_entity(entity_id: str) -> ConfigEntity:
    """Get a tracked entity by id.

    Raises:
        KeyError: If no entity has the given id.
    """
    for entity in CATALOG:
        if entity.id == entity_id:
            return entity
    raise KeyError(entity_id)


def tracked_paths() -> List[str]:
    """Relative display paths of every tracked entity."""
    return [entity.display_path for entity in CATALOG]
