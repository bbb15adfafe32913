"""Failure types raised inside the store and recovered at its boundary."""

from __future__ import annotations


class SidecarError(Exception):
    """Base class for all sidecar store failures."""


class NotFoundError(SidecarError):
    """No candidate document holds a record for the clip identifier."""


class DocumentUnreadableError(SidecarError):
    """A sidecar path exists but its content is not a JSON object."""


class NoWriteTargetError(SidecarError):
    """Neither folder holds a sidecar document to write into."""


class PersistError(SidecarError):
    """The atomic write failed at the temp-write, remove, or rename step."""
