"""Tests for Package.resolved parsing."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from helpers.manifests import v1_pin, v2_pin, write_resolved
from spm_mirror.core.exceptions import DecodeError, ManifestError, ReadError
from spm_mirror.core.mirrors.manifest import ManifestParser, parse_manifest


class TestParseV2:
    """Current layout: top-level pins with identity/kind/location."""

    def test_pins_in_document_order(self, project_dir: Path) -> None:
        write_resolved(
            project_dir,
            [
                v2_pin("b", "https://h/org/b", "bbb", version="1.0.0"),
                v2_pin("a", "https://h/org/a.git", "aaa"),
            ],
        )

        pins = parse_manifest(project_dir)

        assert [p.identity for p in pins] == ["b", "a"]
        assert pins[0].location == "https://h/org/b"
        assert pins[0].revision == "bbb"
        assert pins[0].version == "1.0.0"
        assert pins[1].kind == "remoteSourceControl"

    def test_empty_pin_list(self, project_dir: Path) -> None:
        write_resolved(project_dir, [])
        assert parse_manifest(project_dir) == []

    def test_missing_revision_is_none(self) -> None:
        text = json.dumps({"pins": [v2_pin("a", "https://h/a")], "version": 2})
        pins = ManifestParser().parse_text(text)
        assert pins[0].revision is None

    def test_empty_revision_is_none(self) -> None:
        text = json.dumps({"pins": [v2_pin("a", "https://h/a", "")], "version": 2})
        pins = ManifestParser().parse_text(text)
        assert pins[0].revision is None

    def test_top_level_revision_fallback(self) -> None:
        pin = {"identity": "a", "kind": "remoteSourceControl", "location": "https://h/a", "revision": "abc"}
        pins = ManifestParser().parse_text(json.dumps({"pins": [pin]}))
        assert pins[0].revision == "abc"

    def test_version_3_is_accepted(self, project_dir: Path) -> None:
        write_resolved(project_dir, [v2_pin("a", "https://h/a", "r")], version=3)
        assert [p.identity for p in parse_manifest(project_dir)] == ["a"]

    def test_unknown_kind_is_kept_verbatim(self) -> None:
        text = json.dumps({"pins": [v2_pin("r", "https://reg/r", kind="registry")]})
        pins = ManifestParser().parse_text(text)
        assert pins[0].kind == "registry"


class TestParseV1:
    """Legacy layout: object.pins with package/repositoryURL."""

    def test_v1_is_normalized(self, project_dir: Path) -> None:
        write_resolved(
            project_dir,
            [v1_pin("Alamofire", "https://github.com/Alamofire/Alamofire.git", "abc123")],
            version=1,
        )

        pins = parse_manifest(project_dir)

        assert len(pins) == 1
        assert pins[0].identity == "alamofire"
        assert pins[0].kind == "remoteSourceControl"
        assert pins[0].location == "https://github.com/Alamofire/Alamofire.git"
        assert pins[0].revision == "abc123"


class TestParseErrors:
    def test_missing_file_is_read_error(self, project_dir: Path) -> None:
        with pytest.raises(ReadError) as exc:
            parse_manifest(project_dir)
        assert "Package.resolved" in str(exc.value)

    def test_non_utf8_is_read_error(self, project_dir: Path) -> None:
        (project_dir / "Package.resolved").write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(ReadError):
            parse_manifest(project_dir)

    def test_invalid_json_is_decode_error(self, project_dir: Path) -> None:
        (project_dir / "Package.resolved").write_text("{not json", encoding="utf-8")
        with pytest.raises(DecodeError):
            parse_manifest(project_dir)

    def test_non_object_is_decode_error(self) -> None:
        with pytest.raises(DecodeError):
            ManifestParser().parse_text("[1, 2]")

    def test_missing_pins_is_decode_error(self) -> None:
        with pytest.raises(DecodeError) as exc:
            ManifestParser().parse_text(json.dumps({"version": 2}))
        assert "no pins" in str(exc.value)

    def test_pin_without_location_is_decode_error(self) -> None:
        text = json.dumps({"pins": [{"identity": "a", "kind": "remoteSourceControl"}]})
        with pytest.raises(DecodeError) as exc:
            ManifestParser().parse_text(text)
        assert "location" in str(exc.value)
        assert exc.value.context["errors"]

    def test_pin_with_wrong_type_is_decode_error(self) -> None:
        text = json.dumps({"pins": [{"identity": "a", "kind": "remoteSourceControl", "location": 42}]})
        with pytest.raises(DecodeError):
            ManifestParser().parse_text(text)

    def test_errors_share_manifest_base(self) -> None:
        with pytest.raises(ManifestError):
            ManifestParser().parse_text("")
