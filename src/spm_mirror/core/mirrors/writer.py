"""Mirror configuration documents.

Writes the SwiftPM mirrors file in two variants:

- host: ``.swiftpm/configuration/mirrors.json``, mirror paths as on this machine
- container: ``docker-mirrors.json`` at the project root, mirror paths rebased
  onto the container mount point

Both documents share the shape ``{"object": [{"mirror", "original"}, ...],
"version": 1}``. The ``object`` key is what SwiftPM reads; keep it.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Mapping, Optional

from spm_mirror.core.exceptions import ConfigWriteError
from spm_mirror.core.mirrors.layout import suffix_variants

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = 1
HOST_CONFIG_PATH = Path(".swiftpm") / "configuration" / "mirrors.json"
CONTAINER_CONFIG_PATH = Path("docker-mirrors.json")


def build_document(
    mirrors: Mapping[str, Path],
    mirror_path_for: Optional[Callable[[Path], str]] = None,
) -> dict[str, Any]:
    """Build a mirrors document.

    Entries are ordered by original URL; each URL without ``.git`` is followed
    by its suffixed twin pointing at the same mirror. An original appears at
    most once, even when the manifest pins both forms of a URL.

    Args:
        mirrors: Original URL → local mirror path
        mirror_path_for: Maps a local mirror path to the path written out
            (defaults to ``str``)

    Returns:
        Document dictionary
    """
    render = mirror_path_for or str
    entries: list[dict[str, str]] = []
    emitted: set[str] = set()
    for url in sorted(mirrors):
        mirror = render(mirrors[url])
        for original in suffix_variants(url):
            if original in emitted:
                continue
            emitted.add(original)
            entries.append({"original": original, "mirror": mirror})
    return {"object": entries, "version": DOCUMENT_VERSION}


def container_path_for(container_root: str) -> Callable[[Path], str]:
    """Rebase a local mirror path onto ``container_root`` by its base name."""
    root = PurePosixPath(container_root)

    def _render(local: Path) -> str:
        return str(root / Path(local).name)

    return _render


def serialize_document(document: Mapping[str, Any]) -> str:
    """Pretty-printed, key-sorted JSON with a trailing newline."""
    return json.dumps(document, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def _atomic_write_text(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` via temp file + fsync + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()


class ConfigWriter:
    """Write host and container mirror documents for a project."""

    def __init__(self, project_root: Path) -> None:
        """Initialize writer.

        Args:
            project_root: Project directory receiving the documents
        """
        self.project_root = project_root

    @property
    def host_path(self) -> Path:
        return self.project_root / HOST_CONFIG_PATH

    @property
    def container_path(self) -> Path:
        return self.project_root / CONTAINER_CONFIG_PATH

    def write_host(self, mirrors: Mapping[str, Path]) -> Path:
        """Write the host document, replacing any previous one.

        Raises:
            ConfigWriteError: On serialization or filesystem failure
        """
        path = self.host_path
        self._write(path, build_document(mirrors))
        logger.info("Wrote mirrors config to %s", path)
        return path

    def write_container(self, mirrors: Mapping[str, Path], container_root: str) -> Path:
        """Write the container document, replacing any previous one.

        Raises:
            ConfigWriteError: On serialization or filesystem failure
        """
        path = self.container_path
        self._write(path, build_document(mirrors, container_path_for(container_root)))
        logger.info("Wrote docker mirrors config to %s", path)
        return path

    def _write(self, path: Path, document: Mapping[str, Any]) -> None:
        try:
            _atomic_write_text(path, serialize_document(document))
        except (OSError, TypeError, ValueError) as exc:
            raise ConfigWriteError(
                f"Cannot write mirror configuration {path}: {exc}",
                context={"path": str(path)},
            ) from exc


__all__ = [
    "CONTAINER_CONFIG_PATH",
    "DOCUMENT_VERSION",
    "HOST_CONFIG_PATH",
    "ConfigWriter",
    "build_document",
    "container_path_for",
    "serialize_document",
]
