"""Base protocol for the filesystem operations the store relies on."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """Protocol that all filesystem backends must implement.

    Every method raises OSError on failure.
    """

    def exists(self, path: Path) -> bool: ...

    def read_text(self, path: Path) -> str: ...

    def write_text(self, path: Path, content: str) -> None: ...

    def remove(self, path: Path) -> None: ...

    def rename(self, src: Path, dst: Path) -> None: ...
