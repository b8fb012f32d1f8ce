"""
spm-mirror configure command.

SUMMARY: Mirror the project's pinned dependencies and point SwiftPM at them
"""
from __future__ import annotations

import argparse

from spm_mirror.cli import (
    OutputFormatter,
    add_container_root_flag,
    add_exact_revision_flag,
    add_json_flag,
    add_mirror_path_flag,
    add_repo_root_flag,
    add_tool_flags,
    add_verbose_flag,
    get_repo_root,
    load_cli_settings,
    setup_logging,
)
from spm_mirror.core.exceptions import MirrorPackageError

SUMMARY = "Mirror the project's pinned dependencies and point SwiftPM at them"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_mirror_path_flag(parser)
    add_tool_flags(parser)
    add_exact_revision_flag(parser)
    parser.add_argument(
        "--update",
        "-u",
        action="store_true",
        help="Update all local mirrors in the mirror directory instead",
    )
    add_container_root_flag(parser)
    add_repo_root_flag(parser)
    add_json_flag(parser)
    add_verbose_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Configure mirrors for the project."""
    if getattr(args, "update", False):
        from spm_mirror.cli.commands.update import main as update_main

        return update_main(args)

    from spm_mirror.core.mirrors.sync import MirrorSyncManager

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        project_root = get_repo_root(args)
        settings = load_cli_settings(args, project_root)
        setup_logging(args, settings)

        manager = MirrorSyncManager(settings)
        result = manager.configure(project_root)
    except MirrorPackageError as e:
        formatter.error(e, error_code="configure_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(
            {
                "mirrors": {url: str(path) for url, path in sorted(result.mirrors.items())},
                "skipped": list(result.skipped),
                "registrations": [
                    {
                        "original": r.original,
                        "mirror": r.mirror,
                        "success": r.success,
                        "error": r.error,
                    }
                    for r in result.registrations
                ],
                "notices": list(result.notices),
                "host_config": str(result.host_config),
                "container_config": str(result.container_config),
            }
        )
        return 0

    formatter.text(f"Mirrored {len(result.mirrors)} dependencies into {manager.mirror_root}:")
    for url, path in sorted(result.mirrors.items()):
        formatter.text(f"  {url} -> {path}")
    for url in result.skipped:
        formatter.text(f"  Skipped {url} (no directory name)")

    failed = result.failed_registrations
    if failed:
        formatter.text("")
        formatter.text(f"Failed to register {len(failed)}/{len(result.registrations)} mirrors:")
        for r in failed:
            formatter.text(f"  {r.original}: {r.error}")

    formatter.text("")
    formatter.text(f"Wrote mirrors config to {result.host_config}")
    formatter.text(f"Wrote docker mirrors config to {result.container_config}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    raise SystemExit(main(parsed))
