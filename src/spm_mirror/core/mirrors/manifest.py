"""Package.resolved parsing.

Reads the resolved-dependency manifest written by the Swift Package Manager
and turns it into an ordered list of :class:`Pin` records. Two layouts exist:

- v2/v3: ``{"pins": [{"identity", "kind", "location", "state": {...}}], "version": 2}``
- v1: ``{"object": {"pins": [{"package", "repositoryURL", "state": {...}}]}, "version": 1}``

v1 records are normalized to the v2 shape before validation.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

import jsonschema

from spm_mirror.core.exceptions import DecodeError, ReadError
from spm_mirror.core.mirrors.models import Pin, PinKind
from spm_mirror.data import read_yaml

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "Package.resolved"
SCHEMA_FILENAME = "package-resolved.schema.yaml"


class ManifestParser:
    """Decode Package.resolved into pins, preserving document order."""

    def parse_file(self, path: Path) -> list[Pin]:
        """Read and parse a manifest file.

        Args:
            path: Path to Package.resolved

        Returns:
            Pins in document order

        Raises:
            ReadError: If the file is missing, unreadable, or not UTF-8
            DecodeError: If the content is not a valid manifest
        """
        try:
            raw = path.read_bytes()
        except FileNotFoundError as exc:
            raise ReadError(f"Manifest not found: {path}", context={"path": str(path)}) from exc
        except OSError as exc:
            raise ReadError(f"Cannot read manifest {path}: {exc}", context={"path": str(path)}) from exc

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ReadError(
                f"Manifest is not valid UTF-8 text: {path}", context={"path": str(path)}
            ) from exc

        return self.parse_text(text, source=str(path))

    def parse_text(self, text: str, *, source: str = MANIFEST_FILENAME) -> list[Pin]:
        """Parse manifest text.

        Raises:
            DecodeError: If the text is not JSON or any pin is malformed
        """
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"{source} is not valid JSON: {exc}", context={"path": source}) from exc

        normalized = self._normalize(document, source)
        self._validate(normalized, source)
        pins = [Pin.from_dict(item) for item in normalized["pins"]]
        logger.debug("Parsed %d pins from %s", len(pins), source)
        return pins

    def _normalize(self, document: Any, source: str) -> dict[str, Any]:
        if not isinstance(document, dict):
            raise DecodeError(
                f"{source} must contain a JSON object, got {type(document).__name__}",
                context={"path": source},
            )
        if "pins" in document:
            return document

        legacy = document.get("object")
        if isinstance(legacy, dict) and "pins" in legacy:
            pins = legacy["pins"]
            if not isinstance(pins, list):
                return {"version": document.get("version"), "pins": pins}
            return {
                "version": document.get("version"),
                "pins": [self._normalize_v1_pin(p) for p in pins],
            }

        raise DecodeError(f"{source} has no pins", context={"path": source})

    def _normalize_v1_pin(self, item: Any) -> Any:
        # Non-dict items fall through unchanged so schema validation reports them.
        if not isinstance(item, dict):
            return item
        normalized = dict(item)
        package = item.get("package")
        if "identity" not in normalized and package is not None:
            normalized["identity"] = package.lower() if isinstance(package, str) else package
        if "location" not in normalized and "repositoryURL" in item:
            normalized["location"] = item["repositoryURL"]
        normalized.setdefault("kind", PinKind.REMOTE_SOURCE_CONTROL.value)
        return normalized

    def _validate(self, document: dict[str, Any], source: str) -> None:
        schema = read_yaml("schemas", SCHEMA_FILENAME)
        validator = jsonschema.Draft202012Validator(schema)
        errors: List[str] = []
        for error in sorted(validator.iter_errors(document), key=lambda e: str(list(e.path))):
            if error.path:
                errors.append(f"{'.'.join(str(p) for p in error.path)}: {error.message}")
            else:
                errors.append(error.message)
        if errors:
            raise DecodeError(
                f"{source} is malformed:\n" + "\n".join(f"- {e}" for e in errors),
                context={"path": source, "errors": errors},
            )


def parse_manifest(project_root: Path) -> list[Pin]:
    """Parse ``<project_root>/Package.resolved``."""
    return ManifestParser().parse_file(project_root / MANIFEST_FILENAME)


__all__ = ["MANIFEST_FILENAME", "ManifestParser", "parse_manifest"]
