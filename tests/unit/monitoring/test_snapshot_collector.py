"""Unit tests for snapshot collection."""

import os
from unittest.mock import Mock

import pytest
from pollwatch.core import DigestStrategy, TimestampStrategy
from pollwatch.models import TargetInaccessibleError
from pollwatch.monitoring import SnapshotCollector, build_exclude_predicate, classify_changes


@pytest.fixture
def tree(tmp_path):
    """Create a small directory tree.

    root/
      a.txt
      b.tmp
      sub/
        c.txt
        deeper/
          d.txt
    """
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.tmp").write_text("b")
    (tmp_path / "sub" / "deeper").mkdir(parents=True)
    (tmp_path / "sub" / "c.txt").write_text("c")
    (tmp_path / "sub" / "deeper" / "d.txt").write_text("d")
    return tmp_path


class TestSnapshotCollector:
    """Test cases for SnapshotCollector."""

    def test_recursive_collects_files_only(self, tree):
        """Test that a recursive walk tracks every file but no directories."""
        snapshot = SnapshotCollector(tree, recursive=True).collect()

        assert snapshot.paths == [
            str(tree / "a.txt"),
            str(tree / "b.tmp"),
            str(tree / "sub" / "c.txt"),
            str(tree / "sub" / "deeper" / "d.txt"),
        ]

    def test_flat_includes_directories_as_entries(self, tree):
        """Test that a flat walk tracks direct children including subdirectories."""
        snapshot = SnapshotCollector(tree, recursive=False).collect()

        assert snapshot.paths == [str(tree / "a.txt"), str(tree / "b.tmp"), str(tree / "sub")]

    def test_flat_without_directories(self, tree):
        snapshot = SnapshotCollector(tree, recursive=False, include_directories=False).collect()

        assert snapshot.paths == [str(tree / "a.txt"), str(tree / "b.tmp")]

    def test_exclude_predicate(self, tree):
        """Test that excluded paths never enter the snapshot."""
        snapshot = SnapshotCollector(tree, exclude=build_exclude_predicate(["*.tmp"])).collect()

        assert str(tree / "b.tmp") not in snapshot
        assert str(tree / "a.txt") in snapshot

    def test_excluded_directory_is_not_walked(self, tree):
        """Test that excluding a directory prunes its whole subtree."""
        snapshot = SnapshotCollector(tree, exclude=lambda path: path.endswith("sub")).collect()

        assert snapshot.paths == [str(tree / "a.txt"), str(tree / "b.tmp")]

    def test_unreadable_subdirectory_skipped(self, tree, monkeypatch):
        """Test that one unreadable branch does not abort the walk."""
        original_list = SnapshotCollector._list
        locked = str(tree / "sub" / "deeper")

        def fake_list(directory):
            if directory == locked:
                raise PermissionError(13, "Permission denied", directory)
            return original_list(directory)

        monkeypatch.setattr(SnapshotCollector, "_list", staticmethod(fake_list))

        snapshot = SnapshotCollector(tree).collect()

        assert str(tree / "sub" / "c.txt") in snapshot
        assert str(tree / "sub" / "deeper" / "d.txt") not in snapshot

    def test_missing_root_raises(self, tmp_path):
        """Test that an unlistable root is reported as inaccessible."""
        with pytest.raises(TargetInaccessibleError) as exc_info:
            SnapshotCollector(tmp_path / "missing").collect()

        assert exc_info.value.context["path"] == str(tmp_path / "missing")

    def test_root_is_a_file(self, tree):
        with pytest.raises(TargetInaccessibleError):
            SnapshotCollector(tree / "a.txt").collect()

    def test_vanished_entry_absent(self, tree):
        """Test that an entry whose metadata cannot be captured is left out."""
        strategy = Mock()
        strategy.capture.side_effect = lambda path: None if path.endswith("a.txt") else 1

        snapshot = SnapshotCollector(tree, strategy=strategy).collect()

        assert str(tree / "a.txt") not in snapshot
        assert str(tree / "b.tmp") in snapshot

    def test_digest_detects_change_hidden_from_timestamps(self, tree):
        """Test the two strategies on a rewrite that restores the modification time."""
        target = tree / "a.txt"
        stat = target.stat()
        by_time = SnapshotCollector(tree, strategy=TimestampStrategy())
        by_digest = SnapshotCollector(tree, strategy=DigestStrategy())
        time_before, digest_before = by_time.collect(), by_digest.collect()

        target.write_text("rewritten")
        os.utime(target, ns=(stat.st_atime_ns, stat.st_mtime_ns))

        assert classify_changes(time_before, by_time.collect())[2] == []
        assert classify_changes(digest_before, by_digest.collect())[2] == [str(target)]

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes not supported")
    def test_named_pipe_in_tree_with_digest(self, tree):
        """Test that a FIFO in the tree is tracked without being read."""
        pipe = tree / "sub" / "pipe"
        os.mkfifo(pipe)

        snapshot = SnapshotCollector(tree, strategy=DigestStrategy()).collect()

        assert str(pipe) in snapshot
        assert str(tree / "sub" / "c.txt") in snapshot
