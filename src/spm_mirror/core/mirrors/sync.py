"""Mirror sync manager.

High-level orchestration of configure mode:
Package.resolved → plan → clone → register → write configs.
"""
from __future__ import annotations

import logging
from pathlib import Path

from spm_mirror.core.config import MirrorSettings
from spm_mirror.core.exceptions import MirrorRootError
from spm_mirror.core.mirrors.checkout import RepositoryMirror
from spm_mirror.core.mirrors.layout import directory_name
from spm_mirror.core.mirrors.manifest import parse_manifest
from spm_mirror.core.mirrors.models import ConfigureResult, PlannedMirror, UpdateResult
from spm_mirror.core.mirrors.planner import MirrorPlanner
from spm_mirror.core.mirrors.registry import MirrorRegistry
from spm_mirror.core.mirrors.update import UpdateOrchestrator
from spm_mirror.core.mirrors.writer import ConfigWriter
from spm_mirror.core.process import CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)


class MirrorSyncManager:
    """Coordinates manifest parsing, cloning, registration and config output.

    Clone failures abort the run before anything is registered or written.
    Registration failures are reported and the run continues.
    """

    def __init__(self, settings: MirrorSettings, runner: CommandRunner | None = None) -> None:
        """Initialize sync manager.

        Args:
            settings: Resolved settings (mirror root must be set)
            runner: External command runner (subprocess-backed by default)
        """
        self.settings = settings
        self.mirror_root = settings.require_mirror_root()
        self.runner = runner or SubprocessRunner(timeout=settings.command_timeout)

    def _repository_mirror(self) -> RepositoryMirror:
        return RepositoryMirror(
            self.mirror_root,
            self.runner,
            git_path=self.settings.git_path,
            exact_revision=self.settings.exact_revision,
        )

    def configure(self, project_root: Path) -> ConfigureResult:
        """Mirror every remote pin of a project and point SwiftPM at the mirrors.

        Args:
            project_root: Directory containing Package.resolved

        Returns:
            ConfigureResult

        Raises:
            ReadError, DecodeError: Manifest problems (nothing mirrored)
            CloneError: A clone failed (nothing registered or written)
            ConfigWriteError: A document could not be written
        """
        pins = parse_manifest(project_root)
        plan = MirrorPlanner().plan(pins)

        repo_mirror = self._repository_mirror()
        try:
            repo_mirror.layout.ensure_root()
        except OSError as exc:
            raise MirrorRootError(
                f"Cannot create mirror root {self.mirror_root}: {exc}",
                context={"path": str(self.mirror_root)},
            ) from exc

        mirrors: dict[str, Path] = {}
        skipped: list[str] = []
        for dependency in plan.dependencies.values():
            name = repo_mirror.mirror(dependency)
            if name is None:
                skipped.append(dependency.url)
                continue
            mirrors[dependency.url] = self.mirror_root / name

        registry = MirrorRegistry(project_root, self.runner, swift_path=self.settings.swift_path)
        registrations = registry.register_all(mirrors)

        writer = ConfigWriter(project_root)
        host_config = writer.write_host(mirrors)
        container_config = writer.write_container(mirrors, self.settings.container_root)

        return ConfigureResult(
            mirrors=mirrors,
            skipped=tuple(skipped),
            registrations=tuple(registrations),
            notices=plan.notices,
            host_config=host_config,
            container_config=container_config,
        )

    def plan(self, project_root: Path) -> list[PlannedMirror]:
        """Report what :meth:`configure` would do, without side effects."""
        pins = parse_manifest(project_root)
        plan = MirrorPlanner().plan(pins)
        repo_mirror = self._repository_mirror()
        return [
            PlannedMirror(
                url=dep.url,
                revision=dep.revision,
                directory=directory_name(dep.url),
                strategy=repo_mirror.strategy_for(dep),
            )
            for dep in plan.dependencies.values()
        ]

    def update(self) -> list[UpdateResult]:
        """Refresh every mirror under the mirror root (see UpdateOrchestrator)."""
        return UpdateOrchestrator(self.mirror_root, self.runner, git_path=self.settings.git_path).update_all()


__all__ = ["MirrorSyncManager"]
