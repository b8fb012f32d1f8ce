"""Repository mirroring.

Materializes one dependency as a directory under the mirror root, either as a
shallow, detached checkout of the pinned commit or as a full clone of the
default branch.
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Sequence

from spm_mirror.core.exceptions import CloneError
from spm_mirror.core.mirrors.layout import MirrorLayout, directory_name
from spm_mirror.core.mirrors.models import Dependency
from spm_mirror.core.process import CommandRunner
from spm_mirror.core.redaction import redact_args, redact_url

logger = logging.getLogger(__name__)

REMOTE_NAME = "origin"


class RepositoryMirror:
    """Clone dependencies into a mirror root.

    Two strategies:
    1. Exact revision (default when a revision is pinned): init, add remote,
       fetch the single commit at depth one, detach-checkout, repack.
    2. Full clone of the default branch otherwise.

    An existing directory is trusted as-is.
    """

    def __init__(
        self,
        mirror_root: Path,
        runner: CommandRunner,
        *,
        git_path: str = "git",
        exact_revision: bool = True,
    ) -> None:
        """Initialize mirror.

        Args:
            mirror_root: Directory holding the mirrors
            runner: External command runner
            git_path: Version-control executable
            exact_revision: Lock mirrors to the pinned commit when known
        """
        self.layout = MirrorLayout(mirror_root)
        self.runner = runner
        self.git_path = git_path
        self.exact_revision = exact_revision

    @property
    def mirror_root(self) -> Path:
        return self.layout.mirror_root

    def strategy_for(self, dependency: Dependency) -> str:
        """Name the strategy :meth:`mirror` would use (for dry runs)."""
        if self.layout.path_for(dependency.url) is None:
            return "skip"
        if self.layout.is_mirrored(dependency.url):
            return "existing"
        if self.exact_revision and dependency.revision:
            return "shallow"
        return "clone"

    def mirror(self, dependency: Dependency) -> str | None:
        """Mirror a dependency.

        Args:
            dependency: Dependency to mirror

        Returns:
            Mirror directory name, or None if the URL yields no directory name

        Raises:
            CloneError: If any git step fails
        """
        url = dependency.url
        name = directory_name(url)
        if name is None:
            logger.warning("Cannot derive a mirror directory from URL: %s", redact_url(url))
            return None

        directory = self.mirror_root / name
        if self.layout.is_mirrored(url):
            logger.info("Already mirroring %s", redact_url(url))
            return name

        try:
            if self.exact_revision and dependency.revision:
                self._shallow_mirror(url, dependency.revision, directory)
            else:
                self._full_clone(url, directory)
        except CloneError:
            self._discard_partial(directory)
            raise
        return name

    def _shallow_mirror(self, url: str, revision: str, directory: Path) -> None:
        logger.info("Shallow cloning %s at %s", redact_url(url), revision)
        try:
            directory.mkdir(parents=True)
        except OSError as exc:
            raise CloneError(
                f"Cannot create mirror directory {directory}: {exc}",
                context={"url": redact_url(url), "directory": str(directory)},
            ) from exc

        self._run_git(["init"], cwd=directory, url=url)
        self._run_git(["remote", "add", REMOTE_NAME, url], cwd=directory, url=url)
        self._run_git(["fetch", "--depth", "1", REMOTE_NAME, revision], cwd=directory, url=url)
        self._run_git(["checkout", "--detach", revision], cwd=directory, url=url)
        self._run_git(["repack", "-a", "-d"], cwd=directory, url=url)

    def _full_clone(self, url: str, directory: Path) -> None:
        logger.info("Cloning %s", redact_url(url))
        self._run_git(["clone", "--", url, directory.name], cwd=self.mirror_root, url=url)
        if not directory.is_dir():
            raise CloneError(
                f"git clone did not create {directory}",
                context={"url": redact_url(url), "directory": str(directory)},
            )

    def _discard_partial(self, directory: Path) -> None:
        # A leftover directory would be mistaken for a finished mirror next run.
        if directory.exists():
            logger.warning("Removing incomplete mirror at %s", directory)
            shutil.rmtree(directory, ignore_errors=True)

    def _run_git(self, args: Sequence[str], *, cwd: Path, url: str) -> None:
        """Run git, raising CloneError on a non-zero exit status."""
        status = self.runner.execute(self.git_path, list(args), cwd)
        if status != 0:
            safe_cmd = "git " + " ".join(redact_args(args))
            raise CloneError(
                f"Error cloning dependency '{redact_url(url)}': {safe_cmd} exited with status {status}",
                context={"url": redact_url(url), "command": safe_cmd, "status": status},
            )


__all__ = ["RepositoryMirror", "REMOTE_NAME"]
