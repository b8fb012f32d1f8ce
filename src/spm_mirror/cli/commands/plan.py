"""
spm-mirror plan command.

SUMMARY: Show what configure would mirror, without cloning anything
"""
from __future__ import annotations

import argparse

from spm_mirror.cli import (
    OutputFormatter,
    add_exact_revision_flag,
    add_json_flag,
    add_mirror_path_flag,
    add_repo_root_flag,
    add_verbose_flag,
    get_repo_root,
    load_cli_settings,
    setup_logging,
)
from spm_mirror.core.exceptions import MirrorPackageError

SUMMARY = "Show what configure would mirror, without cloning anything"

_STRATEGY_LABELS = {
    "existing": "already mirrored",
    "shallow": "shallow fetch of pinned revision",
    "clone": "full clone",
    "skip": "skipped (no directory name)",
}


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_mirror_path_flag(parser)
    add_exact_revision_flag(parser)
    add_repo_root_flag(parser)
    add_json_flag(parser)
    add_verbose_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Print the mirror plan."""
    from spm_mirror.core.mirrors.sync import MirrorSyncManager

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        project_root = get_repo_root(args)
        settings = load_cli_settings(args, project_root)
        setup_logging(args, settings)

        manager = MirrorSyncManager(settings)
        planned = manager.plan(project_root)
    except MirrorPackageError as e:
        formatter.error(e, error_code="plan_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(
            {
                "mirror_root": str(manager.mirror_root),
                "dependencies": [p.to_dict() for p in planned],
            }
        )
        return 0

    if not planned:
        formatter.text("No remote dependencies to mirror.")
        return 0

    formatter.text(f"{len(planned)} dependencies -> {manager.mirror_root}:")
    for p in planned:
        formatter.text(f"  {p.url}")
        if p.directory:
            formatter.text(f"    Directory: {p.directory}")
        if p.revision:
            formatter.text(f"    Revision: {p.revision}")
        formatter.text(f"    Action: {_STRATEGY_LABELS.get(p.strategy, p.strategy)}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    raise SystemExit(main(parsed))
