"""Exception hierarchy for spm-mirror.

Fatal errors (``ConfigError``, ``ManifestError``, ``CloneError``,
``ConfigWriteError``, ``MirrorRootError``) abort a run. ``RegistrationError``
and ``UpdateError`` are raised per item and recovered by their callers.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping


class MirrorPackageError(Exception):
    """Base exception for spm-mirror."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(MirrorPackageError):
    """Raised when settings are invalid or incomplete."""


class ManifestError(MirrorPackageError):
    """Base class for Package.resolved problems."""


class ReadError(ManifestError):
    """Raised when the manifest is missing, unreadable, or not UTF-8 text."""


class DecodeError(ManifestError):
    """Raised when the manifest is not JSON or its pins are malformed."""


class CloneError(MirrorPackageError):
    """Raised when cloning a dependency into the mirror root fails."""


class RegistrationError(MirrorPackageError):
    """Raised when the package manager rejects a mirror registration."""


class UpdateError(MirrorPackageError):
    """Raised when refreshing an existing mirror fails."""


class ConfigWriteError(MirrorPackageError):
    """Raised when a mirror configuration document cannot be written."""


class MirrorRootError(MirrorPackageError):
    """Raised when the mirror root directory is missing or not a directory."""


__all__ = [
    "MirrorPackageError",
    "ConfigError",
    "ManifestError",
    "ReadError",
    "DecodeError",
    "CloneError",
    "RegistrationError",
    "UpdateError",
    "ConfigWriteError",
    "MirrorRootError",
]
