"""Common CLI argument registration utilities.

Option defaults are None so that an omitted flag falls through to the
project config, environment, and bundled defaults.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag (project directory holding Package.resolved)."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Project directory containing Package.resolved (default: current directory)",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )


def add_mirror_path_flag(parser: argparse.ArgumentParser) -> None:
    """Add --mirror-path option."""
    parser.add_argument(
        "--mirror-path",
        "-m",
        type=str,
        default=None,
        help="Directory which will hold the local mirrors",
    )


def add_tool_flags(parser: argparse.ArgumentParser, *, swift: bool = True) -> None:
    """Add --git-path and (optionally) --swift-path options.

    Args:
        parser: ArgumentParser to add the options to
        swift: Whether the command invokes the package manager
    """
    parser.add_argument(
        "--git-path",
        "-g",
        type=str,
        default=None,
        help="Path to the git executable",
    )
    if swift:
        parser.add_argument(
            "--swift-path",
            "-s",
            type=str,
            default=None,
            help="Path to the swift executable",
        )


def add_exact_revision_flag(parser: argparse.ArgumentParser) -> None:
    """Add --exact-revision/--no-exact-revision (alias --with-sha)."""
    parser.add_argument(
        "--exact-revision",
        "--with-sha",
        "-w",
        dest="exact_revision",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use exact revisions only (shallow fetch of the pinned commit)",
    )


def add_container_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --docker-mirror-path option."""
    parser.add_argument(
        "--docker-mirror-path",
        "-d",
        dest="container_root",
        type=str,
        default=None,
        help="Directory which will hold the local mirrors in a docker container",
    )


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_verbose_flag",
    "add_mirror_path_flag",
    "add_tool_flags",
    "add_exact_revision_flag",
    "add_container_root_flag",
]
