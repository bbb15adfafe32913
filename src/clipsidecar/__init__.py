"""Sidecar metadata store for tagging video and image clips."""

__version__ = "0.3.0"
