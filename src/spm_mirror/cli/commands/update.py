"""
spm-mirror update command.

SUMMARY: Update all local mirrors in the mirror directory
"""
from __future__ import annotations

import argparse

from spm_mirror.cli import (
    OutputFormatter,
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

SUMMARY = "Update all local mirrors in the mirror directory"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_mirror_path_flag(parser)
    add_tool_flags(parser, swift=False)
    add_repo_root_flag(parser)
    add_json_flag(parser)
    add_verbose_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Refresh every mirror; per-mirror failures do not change the exit code."""
    from spm_mirror.core.mirrors.sync import MirrorSyncManager

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        project_root = get_repo_root(args)
        settings = load_cli_settings(args, project_root)
        setup_logging(args, settings)

        results = MirrorSyncManager(settings).update()
    except MirrorPackageError as e:
        formatter.error(e, error_code="update_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(
            {
                "results": [
                    {
                        "name": r.name,
                        "path": r.path,
                        "success": r.success,
                        "error": r.error,
                    }
                    for r in results
                ]
            }
        )
        return 0

    if not results:
        formatter.text("No mirrors to update.")
        return 0

    success_count = sum(1 for r in results if r.success)
    formatter.text(f"Updated {success_count}/{len(results)} mirrors:")
    for r in results:
        status = "OK" if r.success else "FAILED"
        formatter.text(f"  {r.name}: {status}")
        if r.error:
            formatter.text(f"    Error: {r.error}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    raise SystemExit(main(parsed))
