"""Mirror data models.

Provides immutable dataclasses for manifest pins, planned dependencies and
the outcome of each mirroring step.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class PinKind(str, Enum):
    """Pin kinds understood by the planner."""

    REMOTE_SOURCE_CONTROL = "remoteSourceControl"
    LOCAL_SOURCE_CONTROL = "localSourceControl"
    OTHER = "other"

    @classmethod
    def classify(cls, raw: str) -> PinKind:
        """Map a raw ``kind`` string to a PinKind (unknown strings → OTHER)."""
        for member in (cls.REMOTE_SOURCE_CONTROL, cls.LOCAL_SOURCE_CONTROL):
            if raw == member.value:
                return member
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class Pin:
    """One resolved dependency record from Package.resolved.

    Attributes:
        identity: Package identity
        kind: Raw kind string as written in the manifest
        location: Repository URL or local path
        revision: Pinned commit, if any
        version: Resolved version, informational
        branch: Tracked branch, informational
    """

    identity: str
    kind: str
    location: str
    revision: str | None = None
    version: str | None = None
    branch: str | None = None

    @property
    def pin_kind(self) -> PinKind:
        return PinKind.classify(self.kind)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Pin:
        """Create a Pin from a normalized (v2-shaped) pin dictionary."""
        state = data.get("state") or {}
        revision = state.get("revision")
        if revision is None:
            revision = data.get("revision")
        return cls(
            identity=data["identity"],
            kind=data["kind"],
            location=data["location"],
            revision=revision or None,
            version=state.get("version"),
            branch=state.get("branch"),
        )


@dataclass(frozen=True, slots=True)
class Dependency:
    """A remote repository to mirror, keyed by URL."""

    url: str
    revision: str | None = None


@dataclass(frozen=True, slots=True)
class MirrorPlan:
    """Output of the planner.

    Attributes:
        dependencies: URL → Dependency, in first-seen order
        notices: Informational messages about excluded or duplicate pins
    """

    dependencies: dict[str, Dependency] = field(default_factory=dict)
    notices: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PlannedMirror:
    """Dry-run view of one dependency.

    ``strategy`` is one of ``existing``, ``shallow``, ``clone`` or ``skip``.
    """

    url: str
    revision: str | None
    directory: str | None
    strategy: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "revision": self.revision,
            "directory": self.directory,
            "strategy": self.strategy,
        }


@dataclass(frozen=True, slots=True)
class RegistrationResult:
    """Result of registering one original URL with the package manager."""

    original: str
    mirror: str
    success: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class UpdateResult:
    """Result of refreshing one mirror directory."""

    name: str
    path: str
    success: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigureResult:
    """Result of a full configure run.

    Attributes:
        mirrors: URL → local mirror path for every mirrored dependency
        skipped: URLs whose mirror directory name could not be derived
        registrations: One result per registration call
        notices: Planner notices
        host_config: Path of the written host document
        container_config: Path of the written container document
    """

    mirrors: dict[str, Path]
    skipped: tuple[str, ...] = ()
    registrations: tuple[RegistrationResult, ...] = ()
    notices: tuple[str, ...] = ()
    host_config: Path | None = None
    container_config: Path | None = None

    @property
    def failed_registrations(self) -> list[RegistrationResult]:
        return [r for r in self.registrations if not r.success]


__all__ = [
    "PinKind",
    "Pin",
    "Dependency",
    "MirrorPlan",
    "PlannedMirror",
    "RegistrationResult",
    "UpdateResult",
    "ConfigureResult",
]
