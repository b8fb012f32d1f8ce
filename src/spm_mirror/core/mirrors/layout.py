"""Mirror root layout.

One subdirectory per mirrored repository, named after the final path segment
of the repository URL with a trailing ``.git`` removed. The name is a pure
function of the URL: two URLs that share a final segment map to the same
directory and are not disambiguated.
"""
from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

VCS_SUFFIX = ".git"


def directory_name(url: str) -> str | None:
    """Derive the mirror directory name for a repository URL.

    Args:
        url: Repository URL (scheme URL, scp-style ``user@host:path``, or path)

    Returns:
        Directory name, or None when the URL has no usable path segment

    Example:
        >>> directory_name("https://example.com/org/repo.git")
        'repo'
        >>> directory_name("https://example.com/") is None
        True
    """
    raw = str(url).strip()
    if "://" in raw:
        path = urlsplit(raw).path
    elif "@" in raw and ":" in raw:
        # scp-style git@github.com:org/repo.git
        path = raw.split(":", 1)[1]
    else:
        path = raw

    segments = [s for s in path.split("/") if s]
    if not segments:
        return None
    name = segments[-1]
    if name.endswith(VCS_SUFFIX):
        name = name[: -len(VCS_SUFFIX)]
    if name in ("", ".", ".."):
        return None
    return name


def suffix_variants(url: str) -> list[str]:
    """Return ``url`` plus its ``.git`` twin when the suffix is missing."""
    if url.endswith(VCS_SUFFIX):
        return [url]
    return [url, url + VCS_SUFFIX]


class MirrorLayout:
    """Filesystem view of a mirror root."""

    def __init__(self, mirror_root: Path) -> None:
        """Initialize layout.

        Args:
            mirror_root: Directory holding the mirrors
        """
        self.mirror_root = mirror_root

    def path_for(self, url: str) -> Path | None:
        """Mirror directory for ``url`` (None if no name can be derived)."""
        name = directory_name(url)
        if name is None:
            return None
        return self.mirror_root / name

    def is_mirrored(self, url: str) -> bool:
        """Whether a directory for ``url`` already exists.

        Presence alone counts; contents and revision are not inspected.
        """
        path = self.path_for(url)
        return path is not None and path.exists()

    def list_mirrors(self) -> list[Path]:
        """Subdirectories of the mirror root, sorted by name."""
        return sorted(
            (p for p in self.mirror_root.iterdir() if p.is_dir()),
            key=lambda p: p.name,
        )

    def ensure_root(self) -> None:
        """Ensure the mirror root directory exists."""
        self.mirror_root.mkdir(parents=True, exist_ok=True)


__all__ = ["VCS_SUFFIX", "MirrorLayout", "directory_name", "suffix_variants"]
