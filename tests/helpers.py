"""Shared helpers for the test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from rich.console import Console


def create_live_files(live_root: Path) -> None:
    """Create a live configuration directory with every tracked entity."""
    skills_dir = live_root / "skills"
    (skills_dir / "review").mkdir(parents=True, exist_ok=True)
    (skills_dir / "review" / "SKILL.md").write_text("# Review\n")
    (skills_dir / "notes.md").write_text("notes")

    plugins_dir = live_root / "plugins"
    (plugins_dir / "cache").mkdir(parents=True, exist_ok=True)
    (plugins_dir / "cache" / "blob.bin").write_bytes(b"\x00\x01cache")
    (plugins_dir / "installed_plugins.json").write_text('{"plugins": ["lint"]}')
    (plugins_dir / "known_marketplaces.json").write_text('{"marketplaces": []}')
    (plugins_dir / "cache.bin").write_bytes(b"\xffregenerable")

    (live_root / "settings.json").write_text('{"theme": "dark"}')
    (live_root / "keybindings.json").write_text('{"ctrl+k": "clear"}')


def snapshot_contents(root: Path) -> Dict[str, bytes]:
    """Map every file under root to its bytes, keyed by relative path."""
    return {
        str(path.relative_to(root)): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


def console_output(console: Console) -> str:
    """Text written to a buffered console."""
    return console.file.getvalue()  # type: ignore[attr-defined]


class ScriptedConfirm:
    """Confirmation callable that replays scripted answers."""

    def __init__(self, *answers: bool) -> None:
        self.answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else False
