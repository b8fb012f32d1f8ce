"""
spm-mirror configuration (YAML layers + environment overrides).

Sources, lowest to highest priority:
1. Bundled defaults: spm_mirror.data/config/defaults.yaml
2. Project config: <project>/.spm-mirror/config.yaml
3. Environment variables: SPM_MIRROR_<SECTION>__<KEY>
4. Explicit overrides (CLI flags)
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import jsonschema
import yaml

from spm_mirror.core.exceptions import ConfigError
from spm_mirror.data import read_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "SPM_MIRROR_"
PROJECT_CONFIG_PATH = Path(".spm-mirror") / "config.yaml"


def deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries without mutating inputs.

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        if key in result and isinstance(result[key], dict) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@dataclass(frozen=True, slots=True)
class MirrorSettings:
    """Resolved settings for one run.

    Attributes:
        mirror_root: Directory holding the mirrors (absolute)
        exact_revision: Shallow-fetch the pinned commit instead of cloning
        container_root: Mirror root as seen inside build containers
        git_path: Version-control executable
        swift_path: Package-manager executable
        command_timeout: Seconds per external command, None for no limit
        log_level: Logging level name
        log_file: Optional log file path
    """

    mirror_root: Path | None
    exact_revision: bool = True
    container_root: str = "/app/external-deps/checkouts"
    git_path: str = "git"
    swift_path: str = "swift"
    command_timeout: float | None = None
    log_level: str = "INFO"
    log_file: Path | None = None

    def require_mirror_root(self) -> Path:
        """Return the mirror root or raise if none was configured."""
        if self.mirror_root is None:
            raise ConfigError(
                "No mirror root configured; pass --mirror-path, set mirror.root in "
                f"{PROJECT_CONFIG_PATH}, or export {ENV_PREFIX}MIRROR__ROOT"
            )
        return self.mirror_root


class SettingsLoader:
    """Load, merge, and validate settings for a project."""

    def __init__(self, project_root: Path) -> None:
        """Initialize loader.

        Args:
            project_root: Project directory (holds Package.resolved)
        """
        self.project_root = project_root

    @property
    def project_config_path(self) -> Path:
        """Path to the optional project config file."""
        return self.project_root / PROJECT_CONFIG_PATH

    def _load_project_file(self) -> Dict[str, Any]:
        path = self.project_config_path
        if not path.exists():
            return {}
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a YAML mapping, got {type(data).__name__}")
        return data

    # ---- environment overrides ---------------------------------------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _coerce_type(self, value: str) -> Any:
        if value.strip().lower() in {"null", "none", "~"}:
            return None
        for caster in (self._as_bool, self._as_int, self._as_float):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _declared_types(self, path: List[str]) -> set[str]:
        """JSON types the config schema allows at ``path`` (empty if undeclared)."""
        node: Any = read_yaml("schemas", "config.schema.yaml")
        for part in path:
            props = node.get("properties") if isinstance(node, dict) else None
            if not isinstance(props, dict) or part not in props:
                return set()
            node = props[part]
        declared = node.get("type") if isinstance(node, dict) else None
        if isinstance(declared, str):
            return {declared}
        return set(declared or ())

    def _coerce_for(self, path: List[str], value: str) -> Any:
        types = self._declared_types(path)
        if "string" in types and not types & {"boolean", "integer", "number"}:
            # Paths and executables keep their text even when it looks numeric.
            if "null" in types and value.strip().lower() in {"null", "none", "~"}:
                return None
            return value.strip()
        return self._coerce_type(value)

    def _iter_env_overrides(self, environ: Mapping[str, str]) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            segs = raw.split("__")
            if len(segs) < 2 or any(not s for s in segs):
                logger.debug("Ignoring environment variable %s (expected SECTION__KEY)", key)
                continue
            path = [s.lower() for s in segs]
            yield path, self._coerce_for(path, environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any], environ: Mapping[str, str]) -> None:
        for path, value in self._iter_env_overrides(environ):
            cur = cfg
            for part in path[:-1]:
                nxt = cur.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    cur[part] = nxt
                cur = nxt
            cur[path[-1]] = value

    # ---- validation + assembly ---------------------------------------

    def validate(self, cfg: Dict[str, Any]) -> None:
        """Validate merged config against the bundled schema.

        Raises:
            ConfigError: Listing every violation with its path
        """
        schema = read_yaml("schemas", "config.schema.yaml")
        validator = jsonschema.Draft202012Validator(schema)
        errors: List[str] = []
        for error in sorted(validator.iter_errors(cfg), key=lambda e: str(list(e.path))):
            if error.path:
                errors.append(f"{'.'.join(str(p) for p in error.path)}: {error.message}")
            else:
                errors.append(error.message)
        if errors:
            raise ConfigError(
                "Invalid configuration:\n" + "\n".join(f"- {e}" for e in errors),
                context={"errors": errors},
            )

    def load_dict(
        self,
        overrides: Mapping[str, Any] | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> Dict[str, Any]:
        """Return the merged, validated configuration dictionary."""
        cfg = copy.deepcopy(read_yaml("config", "defaults.yaml"))
        cfg = deep_merge(cfg, self._load_project_file())
        self.apply_env_overrides(cfg, os.environ if environ is None else environ)
        if overrides:
            cfg = deep_merge(cfg, overrides)
        self.validate(cfg)
        return cfg

    def _resolve_path(self, value: Optional[str]) -> Path | None:
        if not value:
            return None
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.project_root / path
        return path.resolve()

    def load(
        self,
        overrides: Mapping[str, Any] | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> MirrorSettings:
        """Load settings.

        Relative paths in any layer resolve against the project root.

        Args:
            overrides: Highest-priority nested overrides (CLI flags)
            environ: Environment mapping (defaults to os.environ)

        Returns:
            MirrorSettings instance

        Raises:
            ConfigError: If any layer is unreadable or the result is invalid
        """
        cfg = self.load_dict(overrides, environ=environ)
        mirror = cfg.get("mirror") or {}
        tools = cfg.get("tools") or {}
        timeouts = cfg.get("timeouts") or {}
        log_cfg = cfg.get("logging") or {}

        timeout = timeouts.get("command_seconds")
        return MirrorSettings(
            mirror_root=self._resolve_path(mirror.get("root")),
            exact_revision=bool(mirror.get("exact_revision", True)),
            container_root=str(mirror.get("container_root", "/app/external-deps/checkouts")),
            git_path=str(tools.get("git", "git")),
            swift_path=str(tools.get("swift", "swift")),
            command_timeout=float(timeout) if timeout is not None else None,
            log_level=str(log_cfg.get("level", "INFO")).upper(),
            log_file=self._resolve_path(log_cfg.get("file")),
        )


def load_settings(
    project_root: Path,
    overrides: Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> MirrorSettings:
    """Convenience wrapper around :meth:`SettingsLoader.load`."""
    return SettingsLoader(project_root).load(overrides, environ=environ)


def dump_settings(settings: MirrorSettings) -> str:
    """Render settings as JSON for ``--verbose`` diagnostics."""
    data = {
        "mirror_root": str(settings.mirror_root) if settings.mirror_root else None,
        "exact_revision": settings.exact_revision,
        "container_root": settings.container_root,
        "git_path": settings.git_path,
        "swift_path": settings.swift_path,
        "command_timeout": settings.command_timeout,
        "log_level": settings.log_level,
        "log_file": str(settings.log_file) if settings.log_file else None,
    }
    return json.dumps(data, indent=2, sort_keys=True)


__all__ = [
    "ENV_PREFIX",
    "PROJECT_CONFIG_PATH",
    "MirrorSettings",
    "SettingsLoader",
    "deep_merge",
    "dump_settings",
    "load_settings",
]
