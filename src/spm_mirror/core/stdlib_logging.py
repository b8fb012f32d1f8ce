from __future__ import annotations

import logging
import sys
from pathlib import Path

_CONFIGURED_KEY: tuple[str, str | None, bool] | None = None
_INSTALLED_HANDLERS: list[logging.Handler] = []

_STREAM_FORMAT = "%(levelname)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    try:
        return int(getattr(logging, name.upper()))
    except (AttributeError, TypeError, ValueError):
        return logging.INFO


def configure_logging(
    *,
    level: str = "INFO",
    log_file: Path | None = None,
    json_mode: bool = False,
) -> None:
    """Configure stdlib logging for a CLI invocation.

    Diagnostics go to stderr, or nowhere in JSON mode so machine-readable
    output stays clean. ``log_file`` adds a file handler in both modes.

    Idempotent per-process: repeated calls with the same arguments are no-ops.
    """
    global _CONFIGURED_KEY

    resolved = str(Path(log_file).expanduser().resolve()) if log_file else None
    key = (level.upper(), resolved, json_mode)
    if _CONFIGURED_KEY == key:
        return

    root = logging.getLogger()
    for h in _INSTALLED_HANDLERS:
        root.removeHandler(h)
        h.close()
    _INSTALLED_HANDLERS.clear()

    numeric = _level_from_name(level)
    root.setLevel(numeric)

    if json_mode:
        # Keeps the implicit lastResort handler from writing WARNINGs to stderr.
        stream: logging.Handler = logging.NullHandler()
    else:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(logging.Formatter(_STREAM_FORMAT))
    stream.setLevel(numeric)
    root.addHandler(stream)
    _INSTALLED_HANDLERS.append(stream)

    if resolved is not None:
        Path(resolved).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(resolved, encoding="utf-8")
        fh.setLevel(numeric)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        root.addHandler(fh)
        _INSTALLED_HANDLERS.append(fh)

    _CONFIGURED_KEY = key


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by :func:`configure_logging`."""
    global _CONFIGURED_KEY
    root = logging.getLogger()
    for h in _INSTALLED_HANDLERS:
        root.removeHandler(h)
        h.close()
    _INSTALLED_HANDLERS.clear()
    _CONFIGURED_KEY = None


__all__ = ["configure_logging", "reset_logging_for_tests"]
