"""Tests for refreshing existing mirrors."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from helpers.runner import RecordingRunner
from spm_mirror.core.exceptions import MirrorRootError
from spm_mirror.core.mirrors.update import UpdateOrchestrator


class TestUpdateOrchestrator:
    def test_each_directory_restored_then_rebased(self, mirror_root: Path) -> None:
        for name in ("b", "a"):
            (mirror_root / name).mkdir()
        runner = RecordingRunner()

        results = UpdateOrchestrator(mirror_root, runner).update_all()

        assert [(c.cwd.name, c.args) for c in runner.calls] == [
            ("a", ("restore", ":/")),
            ("a", ("pull", "--rebase")),
            ("b", ("restore", ":/")),
            ("b", ("pull", "--rebase")),
        ]
        assert [(r.name, r.success) for r in results] == [("a", True), ("b", True)]

    def test_failure_in_one_mirror_does_not_stop_the_rest(self, mirror_root: Path) -> None:
        for name in ("a", "b", "c"):
            (mirror_root / name).mkdir()
        runner = RecordingRunner(
            fail_when=lambda call: 1 if call.cwd.name == "b" and call.args[0] == "pull" else None
        )

        results = UpdateOrchestrator(mirror_root, runner).update_all()

        assert [(r.name, r.success) for r in results] == [("a", True), ("b", False), ("c", True)]
        assert "pull --rebase" in (results[1].error or "")
        assert len(runner.calls) == 6

    def test_failed_restore_skips_pull(self, mirror_root: Path) -> None:
        (mirror_root / "a").mkdir()
        runner = RecordingRunner(fail_when=lambda call: 1 if call.args[0] == "restore" else None)

        results = UpdateOrchestrator(mirror_root, runner).update_all()

        assert [c.args[0] for c in runner.calls] == ["restore"]
        assert results[0].success is False

    def test_regular_files_are_ignored(self, mirror_root: Path) -> None:
        (mirror_root / "notes.txt").write_text("x", encoding="utf-8")
        runner = RecordingRunner()
        assert UpdateOrchestrator(mirror_root, runner).update_all() == []
        assert runner.calls == []

    def test_process_cwd_is_unchanged(self, mirror_root: Path) -> None:
        (mirror_root / "a").mkdir()
        before = os.getcwd()
        UpdateOrchestrator(mirror_root, RecordingRunner()).update_all()
        assert os.getcwd() == before

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(MirrorRootError):
            UpdateOrchestrator(tmp_path / "nope", RecordingRunner()).update_all()

    def test_root_that_is_a_file_raises(self, tmp_path: Path) -> None:
        f = tmp_path / "file"
        f.write_text("", encoding="utf-8")
        with pytest.raises(MirrorRootError):
            UpdateOrchestrator(f, RecordingRunner()).update_all()
