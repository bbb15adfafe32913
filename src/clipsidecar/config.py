"""Preset configuration loading and merging."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from clipsidecar.candidates import SidecarNames


_BUNDLED_DIR = Path(__file__).parent / "presets"


@dataclass(frozen=True)
class StoreConfig:
    """Settings shared by every store operation."""

    user_edited_name: str = ".ingest-metadata-pp.json"
    original_name: str = ".ingest-metadata.json"
    temp_marker: str = ".tmp"
    agent_id: str = "cep-panel"
    separator: str = "-"
    indent: int = 2
    filesystem: str = "local"

    @classmethod
    def from_dict(cls, data: dict) -> StoreConfig:
        """Build a config from a preset mapping. Unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @property
    def names(self) -> SidecarNames:
        return SidecarNames(user_edited=self.user_edited_name, original=self.original_name)


def load_preset(name: str, search_dirs: list[Path] | None = None) -> dict:
    """Load a preset by name from bundled presets or user directories.

    Searches user directories first, then bundled presets.
    Raises FileNotFoundError if preset not found.
    """
    dirs = list(search_dirs or []) + [_BUNDLED_DIR]
    for d in dirs:
        path = Path(d) / f"{name}.yaml"
        if path.exists():
            with open(path) as f:
                return yaml.safe_load(f) or {}
    raise FileNotFoundError(
        f"Preset '{name}' not found. Searched: {', '.join(str(d) for d in dirs)}"
    )


def merge_config(preset: dict, overrides: dict) -> dict:
    """Merge preset config with CLI overrides. None values in overrides are ignored."""
    result = dict(preset)
    for key, value in overrides.items():
        if value is not None:
            result[key] = value
    return result


def list_presets(search_dirs: list[Path] | None = None) -> list[str]:
    """List available preset names from bundled and user directories."""
    dirs = list(search_dirs or []) + [_BUNDLED_DIR]
    names = set()
    for d in dirs:
        d = Path(d)
        if d.is_dir():
            for f in d.glob("*.yaml"):
                names.add(f.stem)
    return sorted(names)


def load_store_config(
    preset: str = "default",
    search_dirs: list[Path] | None = None,
    overrides: dict | None = None,
) -> StoreConfig:
    """Load a preset and apply overrides on top of it."""
    data = merge_config(load_preset(preset, search_dirs), overrides or {})
    return StoreConfig.from_dict(data)
