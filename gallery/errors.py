"""
Error types raised by the gateway and storage backends.
"""

from __future__ import annotations


class GalleryError(Exception):
    """Base class for failures the controller catches and logs."""


class ConfigurationError(GalleryError):
    """The remote application id is not configured."""


class TransportError(GalleryError):
    """Network failure or malformed response from the remote endpoint."""


class DatabaseError(GalleryError):
    """The remote endpoint reported a handled failure."""

    def __init__(self, message: str = "Database error"):
        super().__init__(message)
        self.message = message


class LocalStoreError(GalleryError):
    """Stored local data is missing or cannot be decoded."""
