"""CLI output formatting.

Every command prints through an OutputFormatter so ``--json`` output stays a
single machine-readable document on stdout.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict

from spm_mirror.core.exceptions import MirrorPackageError


class OutputFormatter:
    """Output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
        """
        self.json_mode = json_mode
        self.indent = indent

    def error(self, error: Exception, *, error_code: str = "error") -> None:
        """Report an error on stderr.

        Library errors contribute their class name and context to the JSON
        payload.
        """
        if self.json_mode:
            output: Dict[str, Any] = {"error": error_code, "message": str(error)}
            if isinstance(error, MirrorPackageError):
                payload = error.to_json_error()
                output["code"] = payload["code"]
                output["context"] = payload["context"]
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {error}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        """Output raw JSON data."""
        print(format_json(data, indent=self.indent))

    def text(self, message: str) -> None:
        """Output a plain text line (text mode only)."""
        if not self.json_mode:
            print(message)


def format_json(data: Any, indent: int = 2) -> str:
    """Format data as JSON string."""
    return json.dumps(data, indent=indent, default=str)


__all__ = ["OutputFormatter", "format_json"]
