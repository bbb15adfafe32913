"""Filesystem backend backed by the real disk."""

from __future__ import annotations

import os
from pathlib import Path


class LocalFileSystem:
    """Reads and writes UTF-8 files on the local disk."""

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

    def remove(self, path: Path) -> None:
        Path(path).unlink()

    def rename(self, src: Path, dst: Path) -> None:
        Path(src).rename(dst)
