"""End-to-end configure/update runs against a recording runner."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from helpers.manifests import v2_pin, write_resolved
from helpers.runner import RecordingRunner, fail_args
from spm_mirror.core.config import MirrorSettings
from spm_mirror.core.exceptions import CloneError, ConfigError, ReadError
from spm_mirror.core.mirrors.sync import MirrorSyncManager


def settings_for(mirror_root: Path | None, **kwargs) -> MirrorSettings:  # type: ignore[no-untyped-def]
    return MirrorSettings(mirror_root=mirror_root, **kwargs)


def read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


class TestConfigure:
    def test_suffixed_url_single_entry(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(project_dir, [v2_pin("A", "https://example.com/org/repo.git", "abc123")])
        runner = RecordingRunner()

        result = MirrorSyncManager(settings_for(mirror_root), runner).configure(project_dir)

        assert result.mirrors == {"https://example.com/org/repo.git": mirror_root / "repo"}
        assert (mirror_root / "repo").is_dir()
        assert ("fetch", "--depth", "1", "origin", "abc123") in runner.argv("git")
        assert read_json(result.host_config) == {
            "object": [{"original": "https://example.com/org/repo.git", "mirror": str(mirror_root / "repo")}],
            "version": 1,
        }

    def test_bare_url_gets_two_entries(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(project_dir, [v2_pin("A", "https://example.com/org/repo", "abc123")])
        runner = RecordingRunner()

        result = MirrorSyncManager(settings_for(mirror_root), runner).configure(project_dir)

        entries = read_json(result.host_config)["object"]
        assert [e["original"] for e in entries] == [
            "https://example.com/org/repo",
            "https://example.com/org/repo.git",
        ]
        assert {e["mirror"] for e in entries} == {str(mirror_root / "repo")}
        assert len(runner.calls_to("swift")) == 2

    def test_container_document(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(project_dir, [v2_pin("A", "https://example.com/org/repo.git", "abc")])

        result = MirrorSyncManager(
            settings_for(mirror_root, container_root="/deps"), RecordingRunner()
        ).configure(project_dir)

        assert result.container_config == project_dir / "docker-mirrors.json"
        entries = read_json(result.container_config)["object"]
        assert entries == [{"original": "https://example.com/org/repo.git", "mirror": "/deps/repo"}]

    def test_non_remote_pins_are_not_mirrored(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(
            project_dir,
            [
                v2_pin("local", "/src/local", kind="localSourceControl"),
                v2_pin("reg", "reg.pkg", kind="registry"),
                v2_pin("a", "https://h/a.git", "r"),
            ],
        )
        runner = RecordingRunner()

        result = MirrorSyncManager(settings_for(mirror_root), runner).configure(project_dir)

        assert list(result.mirrors) == ["https://h/a.git"]
        assert len(result.notices) == 2
        assert sorted(p.name for p in mirror_root.iterdir()) == ["a"]

    def test_second_run_is_idempotent(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(
            project_dir,
            [v2_pin("a", "https://h/a", "ra"), v2_pin("b", "https://h/b.git", "rb")],
        )
        manager = MirrorSyncManager(settings_for(mirror_root), RecordingRunner())
        first = manager.configure(project_dir)
        host_bytes = first.host_config.read_bytes()
        container_bytes = first.container_config.read_bytes()

        runner = RecordingRunner()
        second = MirrorSyncManager(settings_for(mirror_root), runner).configure(project_dir)

        assert runner.calls_to("git") == []
        assert second.host_config.read_bytes() == host_bytes
        assert second.container_config.read_bytes() == container_bytes

    def test_clone_failure_aborts_before_registration(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(
            project_dir,
            [v2_pin("a", "https://h/a.git", "ra"), v2_pin("b", "https://h/b.git", "rb")],
        )
        runner = RecordingRunner(fail_when=fail_args("fetch", "--depth", "1", "origin", "rb"))

        with pytest.raises(CloneError):
            MirrorSyncManager(settings_for(mirror_root), runner).configure(project_dir)

        assert runner.calls_to("swift") == []
        assert not (project_dir / ".swiftpm").exists()
        assert not (project_dir / "docker-mirrors.json").exists()
        assert not (mirror_root / "b").exists()
        assert (mirror_root / "a").is_dir()

    def test_registration_failure_still_writes_documents(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(
            project_dir,
            [v2_pin("a", "https://h/a.git", "ra"), v2_pin("b", "https://h/b.git", "rb")],
        )
        runner = RecordingRunner(
            fail_when=lambda call: 1 if call.command == "swift" and "https://h/a.git" in call.args else None
        )

        result = MirrorSyncManager(settings_for(mirror_root), runner).configure(project_dir)

        assert [r.original for r in result.failed_registrations] == ["https://h/a.git"]
        assert len(runner.calls_to("swift")) == 2
        originals = [e["original"] for e in read_json(result.host_config)["object"]]
        assert originals == ["https://h/a.git", "https://h/b.git"]

    def test_unnamed_url_is_skipped(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(project_dir, [v2_pin("x", "https://h/", "r")])

        result = MirrorSyncManager(settings_for(mirror_root), RecordingRunner()).configure(project_dir)

        assert result.mirrors == {}
        assert result.skipped == ("https://h/",)
        assert read_json(result.host_config)["object"] == []

    def test_missing_manifest_touches_nothing(self, project_dir: Path, tmp_path: Path) -> None:
        root = tmp_path / "not-yet"
        runner = RecordingRunner()

        with pytest.raises(ReadError):
            MirrorSyncManager(settings_for(root), runner).configure(project_dir)

        assert runner.calls == []
        assert not root.exists()

    def test_mirror_root_is_created(self, project_dir: Path, tmp_path: Path) -> None:
        write_resolved(project_dir, [v2_pin("a", "https://h/a.git", "ra")])
        root = tmp_path / "deep" / "mirrors"

        MirrorSyncManager(settings_for(root), RecordingRunner()).configure(project_dir)

        assert (root / "a").is_dir()

    def test_no_mirror_root_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            MirrorSyncManager(settings_for(None), RecordingRunner())


class TestPlan:
    def test_plan_has_no_side_effects(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(
            project_dir,
            [v2_pin("a", "https://h/a.git", "ra"), v2_pin("b", "https://h/b", None)],
        )
        (mirror_root / "a").mkdir()
        runner = RecordingRunner()

        planned = MirrorSyncManager(settings_for(mirror_root), runner).plan(project_dir)

        assert [(p.url, p.directory, p.strategy) for p in planned] == [
            ("https://h/a.git", "a", "existing"),
            ("https://h/b", "b", "clone"),
        ]
        assert runner.calls == []
        assert not (project_dir / ".swiftpm").exists()


class TestUpdate:
    def test_update_uses_configured_git(self, mirror_root: Path) -> None:
        (mirror_root / "a").mkdir()
        runner = RecordingRunner()

        results = MirrorSyncManager(settings_for(mirror_root, git_path="/opt/git"), runner).update()

        assert [r.success for r in results] == [True]
        assert {c.command for c in runner.calls} == {"/opt/git"}


class TestBothUrlForms:
    """A manifest pinning ``.../a`` and ``.../a.git`` still yields one entry per original."""

    def test_each_original_registered_and_written_once(self, project_dir: Path, mirror_root: Path) -> None:
        write_resolved(
            project_dir,
            [v2_pin("a", "https://h/org/a", "ra"), v2_pin("a-git", "https://h/org/a.git", "ra")],
        )
        runner = RecordingRunner()

        result = MirrorSyncManager(settings_for(mirror_root), runner).configure(project_dir)

        expected = ["https://h/org/a", "https://h/org/a.git"]
        assert [c.args[4] for c in runner.calls_to("swift")] == expected
        assert [r.original for r in result.registrations] == expected
        for document in (result.host_config, result.container_config):
            assert [e["original"] for e in read_json(document)["object"]] == expected
