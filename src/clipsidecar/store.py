"""Sidecar store — read and update clip records in the JSON files next to media."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from clipsidecar.atomic import replace_file
from clipsidecar.candidates import (
    Candidate,
    Variant,
    resolve_read_candidates,
    resolve_write_target,
)
from clipsidecar.config import StoreConfig
from clipsidecar.errors import (
    DocumentUnreadableError,
    NotFoundError,
    SidecarError,
)
from clipsidecar.fs import get_filesystem
from clipsidecar.fs.base import FileSystem
from clipsidecar.records import (
    ClipRecord,
    compute_shot_name,
    extract_clip_id,
    merge_updates,
    utc_timestamp,
)

logger = logging.getLogger(__name__)


def _parent_folder(path: str | os.PathLike | None) -> Path | None:
    if path is None or str(path) == "":
        return None
    return Path(path).parent


@dataclass(frozen=True)
class ClipSource:
    """What the host bridge knows about a clip: its filename and storage folders."""

    filename: str
    preferred_folder: Path | None = None
    fallback_folder: Path | None = None

    @classmethod
    def from_media_paths(
        cls,
        media_path: str | os.PathLike | None,
        proxy_path: str | os.PathLike | None = None,
        name: str | None = None,
    ) -> ClipSource:
        """Build a source from the clip's media path and optional proxy path.

        The proxy folder is preferred since it is usually online; the raw
        media folder is the fallback. ``name`` defaults to the media file's
        basename.
        """
        if name is None:
            if not media_path:
                raise ValueError("A clip name or media path is required")
            name = Path(media_path).name
        return cls(
            filename=name,
            preferred_folder=_parent_folder(proxy_path),
            fallback_folder=_parent_folder(media_path),
        )

    @property
    def clip_id(self) -> str:
        return extract_clip_id(self.filename)


class SidecarStore:
    """Stateless read/write access to clip records.

    Every call re-reads from disk. Failures are logged and reported as
    ``None`` from :meth:`read` and ``False`` from :meth:`write`.
    """

    def __init__(self, config: StoreConfig | None = None, fs: FileSystem | None = None):
        self.config = config or StoreConfig()
        self.fs = fs if fs is not None else get_filesystem(self.config.filesystem)

    # -- documents ---------------------------------------------------------

    def load_document(self, path: Path) -> dict:
        """Read and parse a sidecar document. Raises DocumentUnreadableError."""
        try:
            text = self.fs.read_text(path)
            data = json.loads(text)
        except (OSError, ValueError) as e:
            raise DocumentUnreadableError(f"Cannot read {path}: {e}") from e
        if not isinstance(data, dict):
            raise DocumentUnreadableError(
                f"{path} holds a JSON {type(data).__name__}, expected an object"
            )
        return data

    def dump_document(self, document: dict) -> str:
        return json.dumps(document, indent=self.config.indent, ensure_ascii=False)

    # -- reads -------------------------------------------------------------

    def _lookup(self, candidate: Candidate, clip_id: str) -> ClipRecord | None:
        path = candidate.path(self.config.names)
        if not self.fs.exists(path):
            logger.debug("Candidate missing: %s", path)
            return None
        logger.debug("Trying candidate (%s): %s", candidate.variant.value, path)
        document = self.load_document(path)
        data = document.get(clip_id)
        if data is None:
            logger.debug("Clip '%s' not in %s", clip_id, path)
            return None
        record = ClipRecord.from_dict(data, clip_id=clip_id)
        if not record.shotName:
            record.shotName = compute_shot_name(record, self.config.separator)
            logger.debug("shotName computed for '%s': %s", clip_id, record.shotName)
        logger.debug("Clip '%s' found in %s", clip_id, path)
        return record

    def get(self, source: ClipSource) -> ClipRecord:
        """Return the authoritative record for a clip. Raises NotFoundError."""
        clip_id = source.clip_id
        candidates = resolve_read_candidates(source.preferred_folder, source.fallback_folder)
        for candidate in candidates:
            try:
                record = self._lookup(candidate, clip_id)
            except (DocumentUnreadableError, OSError, TypeError, ValueError) as e:
                logger.warning("Skipping unusable sidecar: %s", e)
                continue
            if record is not None:
                return record
        raise NotFoundError(f"No sidecar record for clip '{clip_id}' ({source.filename})")

    def read(self, source: ClipSource) -> ClipRecord | None:
        """Return the clip's record, or None when no candidate holds one."""
        try:
            return self.get(source)
        except NotFoundError as e:
            logger.info("%s", e)
        return None

    # -- writes ------------------------------------------------------------

    def update(self, source: ClipSource, updates: Mapping) -> ClipRecord:
        """Merge ``updates`` into the clip's record and persist the document.

        Raises NoWriteTargetError, DocumentUnreadableError or PersistError.
        """
        folder = resolve_write_target(
            source.preferred_folder, source.fallback_folder, self.fs, self.config.names,
        )
        path = Candidate(folder, Variant.ORIGINAL).path(self.config.names)
        if not self.fs.exists(path):
            raise DocumentUnreadableError(f"No {self.config.original_name} in {folder}")
        document = self.load_document(path)

        clip_id = source.clip_id
        existing_data = document.get(clip_id)
        existing = None
        if existing_data is not None:
            existing = ClipRecord.from_dict(existing_data, clip_id=clip_id)

        record = merge_updates(
            existing,
            updates,
            source.filename,
            utc_timestamp(),
            self.config.agent_id,
            self.config.separator,
        )
        logger.debug(
            "Merged %d field(s) into %s record '%s'",
            len(updates), "existing" if existing else "new", clip_id,
        )

        document[clip_id] = record.to_dict()
        replace_file(path, self.dump_document(document), self.fs, self.config.temp_marker)
        logger.info("Wrote metadata for '%s' to %s (shotName: %s)", clip_id, path, record.shotName)
        return record

    def write(self, source: ClipSource, updates: Mapping) -> bool:
        """Apply a partial field map to the clip's record. Returns False on failure."""
        try:
            self.update(source, updates)
        except (SidecarError, OSError, TypeError, ValueError) as e:
            logger.warning("Write failed for %s: %s", source.filename, e)
            return False
        return True


def lookup_metadata(source: ClipSource, store: SidecarStore | None = None) -> dict | None:
    """Host-bridge entry point: the clip's record as a JSON mapping, or None."""
    store = store or SidecarStore()
    record = store.read(source)
    if record is None:
        return None
    return record.to_dict()


def apply_metadata_update(
    source: ClipSource,
    updates: Mapping | str,
    store: SidecarStore | None = None,
) -> bool:
    """Host-bridge entry point: apply updates given as a mapping or a JSON string."""
    store = store or SidecarStore()
    if isinstance(updates, str):
        try:
            updates = json.loads(updates)
        except ValueError as e:
            logger.warning("Rejected update for %s: invalid JSON (%s)", source.filename, e)
            return False
    if not isinstance(updates, Mapping):
        logger.warning("Rejected update for %s: expected an object", source.filename)
        return False
    return store.write(source, updates)
