"""Package.resolved fixtures."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional


def v2_pin(
    identity: str,
    location: str,
    revision: Optional[str] = None,
    *,
    kind: str = "remoteSourceControl",
    version: Optional[str] = None,
) -> Dict[str, Any]:
    state: Dict[str, Any] = {}
    if revision is not None:
        state["revision"] = revision
    if version is not None:
        state["version"] = version
    return {"identity": identity, "kind": kind, "location": location, "state": state}


def v1_pin(package: str, url: str, revision: Optional[str] = None) -> Dict[str, Any]:
    return {
        "package": package,
        "repositoryURL": url,
        "state": {"branch": None, "revision": revision, "version": None},
    }


def write_resolved(project_root: Path, pins: Iterable[Dict[str, Any]], *, version: int = 2) -> Path:
    """Write a Package.resolved in the v2 (default) or v1 layout."""
    pins = list(pins)
    if version == 1:
        document: Dict[str, Any] = {"object": {"pins": pins}, "version": 1}
    else:
        document = {"pins": pins, "version": version}
    path = project_root / "Package.resolved"
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path
