"""Clip records: typed fields, display-name derivation, and update merging."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Mapping


class _Unset:
    """Sentinel type for update values that must be skipped."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

# Fields written once when a record is created and never changed by updates.
PROTECTED_FIELDS = ("id", "originalFilename", "createdAt", "createdBy")

# Order of the components that make up the display name.
NAME_COMPONENTS = ("location", "subject", "action", "shotType")


@dataclass
class ClipRecord:
    """Structured metadata for a single clip, keyed by its identifier."""

    id: str
    originalFilename: str | None = None
    shotName: str | None = None
    location: str | None = None
    subject: str | None = None
    action: str | None = None
    shotType: str | None = None
    shotNumber: int | str | None = None
    keywords: list[str] | None = None
    good: Any = None
    lockedFields: list[str] | None = None
    createdAt: str | None = None
    createdBy: str | None = None
    modifiedAt: str | None = None
    modifiedBy: str | None = None
    extra: dict = field(default_factory=dict)
    # Keys as they appeared in the stored record, nulls included.
    key_order: list[str] = field(default_factory=list, compare=False, repr=False)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name not in ("extra", "key_order"))

    @classmethod
    def from_dict(cls, data: Mapping, clip_id: str | None = None) -> ClipRecord:
        """Build a record from its JSON mapping.

        Keys that are not named fields are kept in ``extra`` so that data
        written by other tools survives a rewrite. ``clip_id`` fills in
        ``id`` when the stored record lacks one.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Clip record must be a JSON object, got {type(data).__name__}")
        known = cls.field_names()
        kwargs = {k: copy.deepcopy(v) for k, v in data.items() if k in known}
        extra = {k: copy.deepcopy(v) for k, v in data.items() if k not in known}
        if "id" not in kwargs or kwargs["id"] is None:
            if clip_id is None:
                raise ValueError("Clip record has no 'id'")
            kwargs["id"] = clip_id
        return cls(**kwargs, extra=extra, key_order=list(data.keys()))

    def to_dict(self) -> dict:
        """Return the JSON mapping for this record.

        Keys read from the stored record come first, in their stored order,
        and keep a stored ``null``. Fields set since then follow; fields that
        were never stored and are still unset are omitted.
        """
        known = self.field_names()
        out = {}
        for key in self.key_order:
            if key in known:
                out[key] = copy.deepcopy(getattr(self, key))
            elif key in self.extra:
                out[key] = copy.deepcopy(self.extra[key])
        for name in known:
            value = getattr(self, name)
            if name not in out and value is not None:
                out[name] = copy.deepcopy(value)
        for key, value in self.extra.items():
            if key not in out:
                out[key] = copy.deepcopy(value)
        return out

    def clone(self) -> ClipRecord:
        return replace(
            self,
            keywords=list(self.keywords) if self.keywords is not None else None,
            lockedFields=list(self.lockedFields) if self.lockedFields is not None else None,
            extra=copy.deepcopy(self.extra),
            key_order=list(self.key_order),
        )


def _component(record: ClipRecord | Mapping, name: str):
    if isinstance(record, ClipRecord):
        return getattr(record, name)
    return record.get(name)


def _has_shot_number(value) -> bool:
    if value is None or value is UNSET or isinstance(value, bool):
        return False
    if isinstance(value, str):
        value = value.strip()
        return value not in ("", "0")
    return value != 0


def compute_shot_name(record: ClipRecord | Mapping | None, separator: str = "-") -> str:
    """Build the display name for a record.

    Non-empty components are joined in the fixed order location, subject,
    action, shotType. A ``-#<shotNumber>`` suffix is appended only when the
    shot number is present and non-zero.
    """
    if not record:
        return ""
    parts = []
    for name in NAME_COMPONENTS:
        value = _component(record, name)
        if value:
            parts.append(str(value))
    base = separator.join(parts)
    shot_number = _component(record, "shotNumber")
    if _has_shot_number(shot_number):
        return f"{base}{separator}#{shot_number}"
    return base


def extract_clip_id(filename: str) -> str:
    """Strip the last extension from a filename: 'EAV0TEST1.MOV' -> 'EAV0TEST1'."""
    stem, dot, ext = filename.rpartition(".")
    if not dot or not stem or not ext or "/" in ext or "\\" in ext:
        return filename
    return stem


def utc_timestamp(now: datetime | None = None) -> str:
    """Format a timestamp as UTC ISO-8601 with millisecond precision and a 'Z' suffix."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def merge_updates(
    existing: ClipRecord | None,
    updates: Mapping,
    filename: str,
    now: str,
    agent_id: str,
    separator: str = "-",
) -> ClipRecord:
    """Merge a partial field map over a record and return the result.

    ``existing`` is left untouched. A missing record starts from a default
    holding only ``id`` and ``originalFilename``; creation stamps belong to
    whatever ingested the clip. Values equal to ``UNSET`` are skipped and
    ``None`` clears a field, removing its key. List fields are replaced
    wholesale. Identity and creation fields are never overwritten once set.
    """
    if existing is None:
        record = ClipRecord(id=extract_clip_id(filename), originalFilename=filename)
    else:
        record = existing.clone()

    known = ClipRecord.field_names()
    for key, value in updates.items():
        if value is UNSET or key in ("shotName", "extra"):
            continue
        if key in PROTECTED_FIELDS and getattr(record, key) is not None:
            continue
        if isinstance(value, (list, tuple)):
            value = list(value)
        else:
            value = copy.deepcopy(value)
        if value is None and key in record.key_order:
            record.key_order.remove(key)
        if key in known:
            setattr(record, key, value)
        elif value is None:
            record.extra.pop(key, None)
        else:
            record.extra[key] = value

    record.shotName = compute_shot_name(record, separator)
    record.modifiedAt = now
    record.modifiedBy = agent_id
    return record
