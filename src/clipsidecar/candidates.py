"""Which sidecar files may hold a clip's record, and which one writes go to."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path

from clipsidecar.errors import NoWriteTargetError
from clipsidecar.fs.base import FileSystem

logger = logging.getLogger(__name__)


class Variant(enum.Enum):
    """The two sidecar files that live side by side in a folder."""

    USER_EDITED = "user_edited"
    ORIGINAL = "original"


@dataclass(frozen=True)
class SidecarNames:
    """Fixed filenames of the two sidecar variants."""

    user_edited: str = ".ingest-metadata-pp.json"
    original: str = ".ingest-metadata.json"

    def for_variant(self, variant: Variant) -> str:
        if variant is Variant.USER_EDITED:
            return self.user_edited
        return self.original


DEFAULT_NAMES = SidecarNames()


@dataclass(frozen=True)
class Candidate:
    """One sidecar file to try: a folder plus a variant."""

    folder: Path
    variant: Variant

    def path(self, names: SidecarNames = DEFAULT_NAMES) -> Path:
        return Path(self.folder) / names.for_variant(self.variant)


def _folders(preferred: Path | None, fallback: Path | None) -> list[Path]:
    folders = []
    for folder in (preferred, fallback):
        if folder is None or str(folder) == "":
            continue
        folder = Path(folder)
        if folder not in folders:
            folders.append(folder)
    return folders


def resolve_read_candidates(
    preferred: Path | None,
    fallback: Path | None,
) -> list[Candidate]:
    """Return read candidates, highest priority first.

    Preferred folder before fallback folder; within a folder the
    user-edited variant before the original.
    """
    return [
        Candidate(folder, variant)
        for folder in _folders(preferred, fallback)
        for variant in (Variant.USER_EDITED, Variant.ORIGINAL)
    ]


def resolve_write_target(
    preferred: Path | None,
    fallback: Path | None,
    fs: FileSystem,
    names: SidecarNames = DEFAULT_NAMES,
) -> Path:
    """Return the folder writes should go to.

    The first folder already holding either sidecar variant wins. Raises
    NoWriteTargetError when neither does; documents are created by ingest,
    never by the store.
    """
    for folder in _folders(preferred, fallback):
        for variant in Variant:
            if fs.exists(folder / names.for_variant(variant)):
                logger.debug("Write target: %s (found %s)", folder, variant.value)
                return folder
    raise NoWriteTargetError(
        f"No sidecar document found to write into. Searched: "
        f"{', '.join(str(f) for f in _folders(preferred, fallback)) or 'no folders'}"
    )
