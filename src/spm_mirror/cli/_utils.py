"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict

from spm_mirror.core.config import MirrorSettings, dump_settings, load_settings
from spm_mirror.core.stdlib_logging import configure_logging

logger = logging.getLogger(__name__)


def get_repo_root(args: argparse.Namespace) -> Path:
    """Project root from --repo-root, else the current directory."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).expanduser().resolve()
    return Path.cwd().resolve()


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate CLI flags into nested config overrides.

    Paths given on the command line are relative to the current directory,
    not the project root.
    """
    overrides: Dict[str, Any] = {}

    def _set(section: str, key: str, value: Any) -> None:
        overrides.setdefault(section, {})[key] = value

    mirror_path = getattr(args, "mirror_path", None)
    if mirror_path:
        _set("mirror", "root", str(Path(mirror_path).expanduser().resolve()))
    if getattr(args, "exact_revision", None) is not None:
        _set("mirror", "exact_revision", bool(args.exact_revision))
    if getattr(args, "container_root", None):
        _set("mirror", "container_root", args.container_root)
    if getattr(args, "git_path", None):
        _set("tools", "git", args.git_path)
    if getattr(args, "swift_path", None):
        _set("tools", "swift", args.swift_path)
    return overrides


def load_cli_settings(args: argparse.Namespace, project_root: Path) -> MirrorSettings:
    """Load settings for ``project_root`` with CLI flags on top."""
    return load_settings(project_root, _cli_overrides(args))


def setup_logging(args: argparse.Namespace, settings: MirrorSettings) -> None:
    """Configure logging from settings, --verbose and --json."""
    level = "DEBUG" if getattr(args, "verbose", False) else settings.log_level
    configure_logging(level=level, log_file=settings.log_file, json_mode=bool(getattr(args, "json", False)))
    logger.debug("Effective settings:\n%s", dump_settings(settings))


__all__ = ["get_repo_root", "load_cli_settings", "setup_logging"]
