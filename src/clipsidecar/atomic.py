"""Crash-safe replacement of a sidecar document: write temp, retire old, rename new."""

from __future__ import annotations

import logging
from pathlib import Path

from clipsidecar.errors import PersistError
from clipsidecar.fs.base import FileSystem

logger = logging.getLogger(__name__)

DEFAULT_TEMP_MARKER = ".tmp"
BACKUP_MARKER = ".bak"


def temp_path_for(target: Path, marker: str = DEFAULT_TEMP_MARKER) -> Path:
    """Return the sibling temp path: '.ingest-metadata.json' -> '.ingest-metadata.tmp.json'."""
    target = Path(target)
    return target.with_name(f"{target.stem}{marker}{target.suffix}")


def replace_file(
    target: Path,
    content: str,
    fs: FileSystem,
    marker: str = DEFAULT_TEMP_MARKER,
) -> None:
    """Replace ``target`` with ``content`` or raise PersistError.

    The new content is staged under the temp name before the old file is
    touched. The rename is not assumed to overwrite, so the old file is
    first moved aside to a backup name and only deleted once the new one is
    in place. If the rename fails the backup is moved back. At every point
    a complete old or new document exists on disk.
    """
    target = Path(target)
    temp = temp_path_for(target, marker)
    backup = temp_path_for(target, BACKUP_MARKER)

    try:
        fs.write_text(temp, content)
    except OSError as e:
        _discard(temp, fs)
        raise PersistError(f"Could not stage {temp}: {e}") from e

    had_target = fs.exists(target)
    if had_target:
        try:
            if fs.exists(backup):
                fs.remove(backup)
            fs.rename(target, backup)
        except OSError as e:
            raise PersistError(f"Could not remove {target}: {e}") from e

    try:
        fs.rename(temp, target)
    except OSError as e:
        if had_target:
            _restore(backup, target, fs)
        raise PersistError(f"Could not rename {temp} to {target}: {e}") from e

    if had_target:
        _discard(backup, fs)


def write_atomic(
    target: Path,
    content: str,
    fs: FileSystem | None = None,
    marker: str = DEFAULT_TEMP_MARKER,
) -> bool:
    """Durably write ``content`` to ``target``. Returns False on any failure."""
    if fs is None:
        from clipsidecar.fs.local import LocalFileSystem
        fs = LocalFileSystem()
    try:
        replace_file(target, content, fs, marker)
    except PersistError as e:
        logger.warning("Atomic write failed: %s", e)
        return False
    logger.debug("Atomic write complete: %s", target)
    return True


def _restore(backup: Path, target: Path, fs: FileSystem) -> None:
    try:
        fs.rename(backup, target)
    except OSError:
        logger.error("Could not restore %s from %s", target, backup, exc_info=True)


def _discard(path: Path, fs: FileSystem) -> None:
    try:
        if fs.exists(path):
            fs.remove(path)
    except OSError:
        logger.debug("Could not discard %s", path, exc_info=True)
