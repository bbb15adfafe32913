"""Filesystem backends — get_filesystem, list_filesystems, register_filesystem."""

from __future__ import annotations

from clipsidecar.fs.base import FileSystem

_REGISTRY: dict[str, type] = {}


def register_filesystem(name: str, cls: type) -> None:
    """Register a FileSystem implementation by name."""
    _REGISTRY[name] = cls


def get_filesystem(name: str) -> FileSystem:
    """Return an instance of the named filesystem. Raises KeyError if unknown."""
    if name not in _REGISTRY:
        raise KeyError(f"Unknown filesystem: '{name}'. Available: {', '.join(_REGISTRY)}")
    return _REGISTRY[name]()


def list_filesystems() -> list[str]:
    """Return sorted list of registered filesystem names."""
    return sorted(_REGISTRY.keys())


# Register built-in backends
from clipsidecar.fs.local import LocalFileSystem  # noqa: E402
from clipsidecar.fs.memory import MemoryFileSystem  # noqa: E402
register_filesystem("local", LocalFileSystem)
register_filesystem("memory", MemoryFileSystem)
