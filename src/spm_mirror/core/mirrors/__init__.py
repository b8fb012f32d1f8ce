"""spm-mirror mirroring subsystem.

Mirrors the remote pins of a Swift package into a local directory and points
the Swift Package Manager at the copies.

Key components:
- ManifestParser: Decode Package.resolved into pins
- MirrorPlanner: Select and deduplicate remote dependencies
- RepositoryMirror: Clone one dependency (shallow-pinned or full)
- MirrorRegistry: Register original → mirror mappings with SwiftPM
- ConfigWriter: Write host and container mirror documents
- UpdateOrchestrator: Refresh every mirror under a mirror root
- MirrorSyncManager: Orchestrate configure mode
"""
from __future__ import annotations

from spm_mirror.core.mirrors.checkout import RepositoryMirror
from spm_mirror.core.mirrors.layout import MirrorLayout, directory_name, suffix_variants
from spm_mirror.core.mirrors.manifest import ManifestParser, parse_manifest
from spm_mirror.core.mirrors.models import (
    ConfigureResult,
    Dependency,
    MirrorPlan,
    Pin,
    PinKind,
    PlannedMirror,
    RegistrationResult,
    UpdateResult,
)
from spm_mirror.core.mirrors.planner import MirrorPlanner
from spm_mirror.core.mirrors.registry import MirrorRegistry
from spm_mirror.core.mirrors.sync import MirrorSyncManager
from spm_mirror.core.mirrors.update import UpdateOrchestrator
from spm_mirror.core.mirrors.writer import ConfigWriter, build_document

__all__ = [
    # Manifest
    "ManifestParser",
    "parse_manifest",
    # Planning
    "MirrorPlanner",
    # Materialization
    "MirrorLayout",
    "RepositoryMirror",
    "directory_name",
    "suffix_variants",
    # Registration + output
    "MirrorRegistry",
    "ConfigWriter",
    "build_document",
    # Update mode
    "UpdateOrchestrator",
    # Orchestration
    "MirrorSyncManager",
    # Models
    "Pin",
    "PinKind",
    "Dependency",
    "MirrorPlan",
    "PlannedMirror",
    "RegistrationResult",
    "UpdateResult",
    "ConfigureResult",
]
