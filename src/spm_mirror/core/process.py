"""External process boundary.

Every git and swift invocation goes through a ``CommandRunner``. Only the exit
status is consumed by callers, which keeps the mirroring logic testable with a
recording double instead of real network access.
"""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from spm_mirror.core.redaction import redact_args, redact_text

logger = logging.getLogger(__name__)

# Conventional shell statuses for "command not found" and "timed out".
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


class CommandRunner(Protocol):
    """Runs an external executable and reports its exit status."""

    def execute(self, command: str, args: Sequence[str], working_directory: Path) -> int:
        ...


class SubprocessRunner:
    """``CommandRunner`` backed by :func:`subprocess.run`.

    Output is captured; stderr of failing commands is logged with
    credentials redacted.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        """Initialize runner.

        Args:
            timeout: Seconds before a command is killed; None waits forever
        """
        self.timeout = timeout

    def execute(self, command: str, args: Sequence[str], working_directory: Path) -> int:
        argv = [command, *args]
        safe_cmd = " ".join(redact_args(argv))
        logger.debug("Running %s (cwd=%s)", safe_cmd, working_directory)
        try:
            result = subprocess.run(
                argv,
                cwd=str(working_directory),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            logger.error("Executable not found: %s", command)
            return EXIT_NOT_FOUND
        except NotADirectoryError:
            logger.error("Working directory is not a directory: %s", working_directory)
            return EXIT_NOT_FOUND
        except subprocess.TimeoutExpired:
            logger.error("Timed out after %ss: %s", self.timeout, safe_cmd)
            return EXIT_TIMEOUT

        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
            logger.warning(
                "%s exited with status %d%s",
                safe_cmd,
                result.returncode,
                f"\n{redact_text(output)}" if output else "",
            )
        return result.returncode


__all__ = ["CommandRunner", "SubprocessRunner", "EXIT_NOT_FOUND", "EXIT_TIMEOUT"]
