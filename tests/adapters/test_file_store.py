"""Tests for the file task store and atomic writes."""

import os
import stat
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from projectmd.adapters.storage import FileTaskStore, atomic_write_text
from projectmd.core.domain.entities import TaskRecord
from projectmd.core.domain.staleness import to_mtime_ns
from projectmd.core.exceptions import ParserError, TaskStoreError


SYNCED_AT = datetime(2024, 5, 1, 12, 0, 0, 654321, tzinfo=timezone.utc)


class TestAtomicWrite:
    """Tests for atomic_write_text."""

    def test_creates_file(self, tmp_path):
        path = tmp_path / "new.md"
        atomic_write_text(path, "hello\n")
        assert path.read_text() == "hello\n"

    def test_replaces_content(self, tmp_path):
        path = tmp_path / "task.md"
        path.write_text("old")
        atomic_write_text(path, "new")
        assert path.read_text() == "new"

    def test_keeps_line_endings(self, tmp_path):
        path = tmp_path / "task.md"
        atomic_write_text(path, "a\r\nb\n")
        assert path.read_bytes() == b"a\r\nb\n"

    def test_preserves_mode(self, tmp_path):
        path = tmp_path / "task.md"
        path.write_text("old")
        os.chmod(path, 0o640)

        atomic_write_text(path, "new")

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o640

    def test_sets_modified_time(self, tmp_path):
        path = tmp_path / "task.md"
        atomic_write_text(path, "x", modified_time=SYNCED_AT)
        assert os.stat(path).st_mtime_ns == to_mtime_ns(SYNCED_AT)

    def test_failure_keeps_original_and_cleans_up(self, tmp_path):
        path = tmp_path / "task.md"
        path.write_text("original")

        with patch("projectmd.adapters.storage.atomic.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError):
                atomic_write_text(path, "new")

        assert path.read_text() == "original"
        assert os.listdir(tmp_path) == ["task.md"]

    @pytest.mark.skipif(os.name != "posix", reason="directory fsync is POSIX only")
    def test_flushes_file_and_directory(self, tmp_path):
        path = tmp_path / "task.md"

        with patch("projectmd.adapters.storage.atomic.os.fsync") as fsync:
            atomic_write_text(path, "x")

        assert fsync.call_count == 2
        assert path.read_text() == "x"

    @pytest.mark.skipif(os.name != "posix", reason="directory fsync is POSIX only")
    def test_directory_flush_failure_is_logged(self, tmp_path, caplog):
        path = tmp_path / "task.md"
        error = OSError(22, "Invalid argument")

        with patch("projectmd.adapters.storage.atomic.os.fsync", side_effect=[None, error]):
            atomic_write_text(path, "x")

        assert path.read_text() == "x"
        assert "Cannot flush directory" in caplog.text


class TestFileTaskStore:
    """Tests for FileTaskStore."""

    @pytest.fixture
    def store(self):
        return FileTaskStore()

    def test_load_task(self, store, tmp_path):
        path = tmp_path / "task.md"
        path.write_text("---\nissue_id: 4\n---\n# Title\n")

        record = store.load_task(path)

        assert record.issue_id == 4
        assert record.title == "Title"

    def test_load_missing_file(self, store, tmp_path):
        with pytest.raises(TaskStoreError, match="File not found"):
            store.load_task(tmp_path / "missing.md")

    def test_load_invalid_task(self, store, tmp_path):
        path = tmp_path / "task.md"
        path.write_text("no header\n")
        with pytest.raises(ParserError):
            store.load_task(path)

    def test_load_undecodable_file(self, store, tmp_path):
        path = tmp_path / "task.md"
        path.write_bytes(b"---\n\xff\xfe\n---\n")
        with pytest.raises(TaskStoreError):
            store.load_task(path)

    def test_modified_time(self, store, tmp_path):
        path = tmp_path / "task.md"
        path.write_text("x")
        ns = to_mtime_ns(SYNCED_AT)
        os.utime(path, ns=(ns, ns))

        assert store.modified_time(path) == SYNCED_AT

    def test_modified_time_missing(self, store, tmp_path):
        with pytest.raises(TaskStoreError):
            store.modified_time(tmp_path / "missing.md")

    def test_save_task_stamps_mtime(self, store, tmp_path):
        path = tmp_path / "task.md"
        path.write_text("---\ntype: task\n---\n# T\n")
        record = store.load_task(path)

        store.save_task(path, record, synced_at=SYNCED_AT)

        assert store.modified_time(path) == SYNCED_AT
        assert store.load_task(path).content == record.content

    def test_save_task_into_missing_directory(self, store, tmp_path):
        with pytest.raises(TaskStoreError, match="Cannot write"):
            store.save_task(tmp_path / "nope" / "task.md", TaskRecord(title="T"), synced_at=SYNCED_AT)

    def test_load_project(self, store, tmp_path):
        path = tmp_path / "project.md"
        path.write_text("backend: github\nrepo: a/b\n---\n* [new] - tasks/a.md - A\n")

        project = store.load_project(path)

        assert project.config.repo == "a/b"
        assert len(project.new_tasks) == 1

    def test_link_tasks(self, store, tmp_path):
        path = tmp_path / "project.md"
        path.write_text("backend: github\nrepo: a/b\n---\n* [new] - tasks/a.md - A\n* [new] - tasks/b.md\n")

        store.link_tasks(path, {"tasks/b.md": 8})

        assert path.read_text() == "backend: github\nrepo: a/b\n---\n* [new] - tasks/a.md - A\n* [#8] - tasks/b.md\n"

    def test_link_tasks_without_changes_does_not_write(self, store, tmp_path):
        path = tmp_path / "project.md"
        path.write_text("backend: github\nrepo: a/b\n---\n* [#1] - tasks/a.md\n")
        ns = to_mtime_ns(SYNCED_AT)
        os.utime(path, ns=(ns, ns))

        store.link_tasks(path, {"tasks/a.md": 1})

        assert os.stat(path).st_mtime_ns == ns
