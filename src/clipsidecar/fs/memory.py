"""In-memory filesystem backend, used where no real media folder exists."""

from __future__ import annotations

from pathlib import PurePath


class MemoryFileSystem:
    """Dictionary-backed files keyed by path.

    ``rename`` refuses to replace an existing file, matching the most
    restrictive host filesystems the store has to run on.
    """

    def __init__(self, files: dict | None = None):
        self.files: dict[str, str] = {}
        for path, content in (files or {}).items():
            self.files[self._key(path)] = content

    @staticmethod
    def _key(path) -> str:
        return str(PurePath(path))

    def exists(self, path) -> bool:
        return self._key(path) in self.files

    def read_text(self, path) -> str:
        try:
            return self.files[self._key(path)]
        except KeyError:
            raise FileNotFoundError(f"No such file: {path}") from None

    def write_text(self, path, content: str) -> None:
        self.files[self._key(path)] = content

    def remove(self, path) -> None:
        try:
            del self.files[self._key(path)]
        except KeyError:
            raise FileNotFoundError(f"No such file: {path}") from None

    def rename(self, src, dst) -> None:
        src_key, dst_key = self._key(src), self._key(dst)
        if src_key not in self.files:
            raise FileNotFoundError(f"No such file: {src}")
        if dst_key in self.files:
            raise FileExistsError(f"File exists: {dst}")
        self.files[dst_key] = self.files.pop(src_key)
