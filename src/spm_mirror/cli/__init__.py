"""
spm-mirror CLI package.

Commands live in cli/commands/ and are discovered by the dispatcher.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities (project root, settings, logging)
"""
from ._output import OutputFormatter, format_json
from ._args import (
    add_json_flag,
    add_repo_root_flag,
    add_verbose_flag,
    add_mirror_path_flag,
    add_tool_flags,
    add_exact_revision_flag,
    add_container_root_flag,
)
from ._utils import get_repo_root, load_cli_settings, setup_logging

__all__ = [
    # Output formatting
    "OutputFormatter",
    "format_json",
    # Argument helpers
    "add_json_flag",
    "add_repo_root_flag",
    "add_verbose_flag",
    "add_mirror_path_flag",
    "add_tool_flags",
    "add_exact_revision_flag",
    "add_container_root_flag",
    # Utilities
    "get_repo_root",
    "load_cli_settings",
    "setup_logging",
]
