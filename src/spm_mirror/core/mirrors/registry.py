"""Mirror registration with the Swift Package Manager.

Runs ``swift package config set-mirror`` in the project root for every
mirrored URL and its ``.git`` twin. The package manager treats repeated
registrations as idempotent, so nothing is cached locally.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, MutableSet, Optional

from spm_mirror.core.exceptions import RegistrationError
from spm_mirror.core.mirrors.layout import suffix_variants
from spm_mirror.core.mirrors.models import RegistrationResult
from spm_mirror.core.process import CommandRunner
from spm_mirror.core.redaction import redact_url

logger = logging.getLogger(__name__)


class MirrorRegistry:
    """Register original → mirror mappings for one project.

    Failures are per call: a rejected registration is logged and reported,
    and the remaining registrations still run.
    """

    def __init__(self, project_root: Path, runner: CommandRunner, *, swift_path: str = "swift") -> None:
        """Initialize registry.

        Args:
            project_root: Project directory the mirrors are registered for
            runner: External command runner
            swift_path: Package-manager executable
        """
        self.project_root = project_root
        self.runner = runner
        self.swift_path = swift_path

    def register(self, original: str, mirror_path: str) -> None:
        """Register a single mapping.

        Raises:
            RegistrationError: If the package manager exits non-zero
        """
        args = [
            "package", "config", "set-mirror",
            "--original", original,
            "--mirror", mirror_path,
        ]
        status = self.runner.execute(self.swift_path, args, self.project_root)
        if status != 0:
            raise RegistrationError(
                f"Error registering mirror for {redact_url(original)} (exit status {status})",
                context={"original": redact_url(original), "mirror": mirror_path, "status": status},
            )

    def register_dependency(
        self,
        url: str,
        mirror_path: Path,
        *,
        registered: Optional[MutableSet[str]] = None,
    ) -> list[RegistrationResult]:
        """Register ``url`` and, when it lacks ``.git``, its suffixed twin.

        Args:
            url: Original repository URL
            mirror_path: Local mirror directory
            registered: Originals already attempted this run; they are skipped
                and new ones are added
        """
        results: list[RegistrationResult] = []
        for original in suffix_variants(url):
            if registered is not None:
                if original in registered:
                    continue
                registered.add(original)
            try:
                self.register(original, str(mirror_path))
            except RegistrationError as exc:
                logger.error(str(exc))
                results.append(
                    RegistrationResult(original=original, mirror=str(mirror_path), success=False, error=str(exc))
                )
            else:
                logger.debug("Registered %s -> %s", redact_url(original), mirror_path)
                results.append(RegistrationResult(original=original, mirror=str(mirror_path), success=True))
        return results

    def register_all(self, mirrors: Mapping[str, Path]) -> list[RegistrationResult]:
        """Register every mirror, in sorted URL order, each original at most once."""
        results: list[RegistrationResult] = []
        registered: set[str] = set()
        for url in sorted(mirrors):
            results.extend(self.register_dependency(url, mirrors[url], registered=registered))
        return results


__all__ = ["MirrorRegistry"]
