"""Refresh existing mirrors.

Walks the mirror root without looking at any manifest. Each directory is reset
to a clean tree and rebased onto its upstream; a failing directory is reported
and the walk moves on.
"""
from __future__ import annotations

import logging
from pathlib import Path

from spm_mirror.core.exceptions import MirrorRootError, UpdateError
from spm_mirror.core.mirrors.layout import MirrorLayout
from spm_mirror.core.mirrors.models import UpdateResult
from spm_mirror.core.process import CommandRunner

logger = logging.getLogger(__name__)

UPDATE_STEPS: tuple[tuple[str, ...], ...] = (
    ("restore", ":/"),
    ("pull", "--rebase"),
)


class UpdateOrchestrator:
    """Update every mirror under a mirror root."""

    def __init__(self, mirror_root: Path, runner: CommandRunner, *, git_path: str = "git") -> None:
        self.layout = MirrorLayout(mirror_root)
        self.runner = runner
        self.git_path = git_path

    def update_all(self) -> list[UpdateResult]:
        """Refresh all mirrors.

        Returns:
            One result per subdirectory, in name order

        Raises:
            MirrorRootError: If the mirror root is missing or not a directory
        """
        root = self.layout.mirror_root
        if not root.is_dir():
            raise MirrorRootError(f"Mirror root is not a directory: {root}", context={"path": str(root)})

        try:
            directories = self.layout.list_mirrors()
        except OSError as exc:
            raise MirrorRootError(f"Cannot list mirror root {root}: {exc}", context={"path": str(root)}) from exc

        results: list[UpdateResult] = []
        for directory in directories:
            try:
                self.update_one(directory)
            except UpdateError as exc:
                logger.error("Error updating mirror %s: %s", directory.name, exc)
                results.append(
                    UpdateResult(name=directory.name, path=str(directory), success=False, error=str(exc))
                )
            else:
                results.append(UpdateResult(name=directory.name, path=str(directory), success=True))
        return results

    def update_one(self, directory: Path) -> None:
        """Discard local changes in ``directory`` and pull with rebase.

        Raises:
            UpdateError: If a git step exits non-zero
        """
        logger.info("Updating %s", directory.name)
        for step in UPDATE_STEPS:
            status = self.runner.execute(self.git_path, list(step), directory)
            if status != 0:
                raise UpdateError(
                    f"git {' '.join(step)} exited with status {status}",
                    context={"directory": str(directory), "status": status},
                )


__all__ = ["UpdateOrchestrator", "UPDATE_STEPS"]
