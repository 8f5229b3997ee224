"""
Unit tests for scanning a root against the stored inventory.
"""

import os

import pytest

from fileinventory.errors import WalkError
from fileinventory.models import (
    RootConfig,
    ScanStats,
    STATUS_CHANGED,
    STATUS_NEW,
    STATUS_UNCHANGED,
)
from fileinventory.scanner import walker
from fileinventory.scanner.reconciler import RootScanner, scan_root


def _root(sample_tree, exclude=()):
    return RootConfig(directory=str(sample_tree), exclude=list(exclude))


class TestScanRoot:
    """Test scan_root()."""

    def test_first_scan_records_every_file(self, sample_tree):
        records = scan_root(_root(sample_tree), {})
        names = [r.relative_name for r in records]
        assert names == [
            "a.txt",
            "b.txt",
            os.path.join("docs", "c.txt"),
            "empty1.dat",
            "empty2.dat",
            os.path.join("node_modules", "x.js"),
            "notes.tmp",
            "photo.png",
        ]
        assert all(r.status == STATUS_NEW for r in records)
        assert all(r.root_dir == str(sample_tree) for r in records)

    def test_observed_stat(self, sample_tree):
        records = {r.relative_name: r for r in scan_root(_root(sample_tree), {})}
        st = os.stat(sample_tree / "a.txt")
        record = records["a.txt"]
        assert record.size == 5
        assert record.mtime == st.st_mtime_ns
        assert record.ctime == st.st_ctime_ns

    def test_exclusions(self, sample_tree):
        stats = ScanStats()
        records = scan_root(
            _root(sample_tree, [r"^node_modules$", r"\.tmp$"]), {}, stats
        )
        names = {r.relative_name for r in records}
        assert "notes.tmp" not in names
        assert not any(n.startswith("node_modules") for n in names)
        assert stats.excluded_files == 1
        assert stats.excluded_dirs == 1

    def test_excluded_directory_is_never_listed(self, sample_tree, monkeypatch):
        listed = []
        real_list_dir = walker._list_dir

        def recording_list_dir(path):
            listed.append(path)
            return real_list_dir(path)

        monkeypatch.setattr(walker, "_list_dir", recording_list_dir)
        scan_root(_root(sample_tree, [r"^node_modules$"]), {})
        assert str(sample_tree / "node_modules") not in listed

    def test_unchanged_files_reuse_prior_records(self, sample_tree):
        first = scan_root(_root(sample_tree), {})
        for record in first:
            record.content_hash = "hash-" + record.relative_name
        prior = {r.identity: r for r in first}

        stats = ScanStats()
        second = scan_root(_root(sample_tree), prior, stats)
        assert all(r.status == STATUS_UNCHANGED for r in second)
        assert all(a is b for a, b in zip(first, second))
        assert stats.unchanged == len(first)
        assert stats.added == 0

    def test_changed_file_is_replaced(self, sample_tree):
        first = scan_root(_root(sample_tree), {})
        for record in first:
            record.content_hash = "old"
        prior = {r.identity: r for r in first}

        (sample_tree / "a.txt").write_bytes(b"hello, world")
        second = {r.relative_name: r for r in scan_root(_root(sample_tree), prior)}

        assert second["a.txt"].status == STATUS_CHANGED
        assert second["a.txt"].content_hash is None
        assert second["a.txt"].size == 12
        assert second["b.txt"].content_hash == "old"

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_not_inventoried(self, sample_tree):
        os.symlink(sample_tree / "a.txt", sample_tree / "link.txt")
        stats = ScanStats()
        records = scan_root(_root(sample_tree), {}, stats)
        assert "link.txt" not in {r.relative_name for r in records}
        assert stats.other_entries == 1

    def test_walk_error_raises(self, temp_dir):
        root = RootConfig(directory=str(temp_dir / "missing"))
        with pytest.raises(WalkError) as excinfo:
            scan_root(root, {})
        assert excinfo.value.operation == 'walk'
        assert isinstance(excinfo.value.cause, FileNotFoundError)

    def test_error_mid_walk_aborts_root(self, sample_tree, monkeypatch):
        real_list_dir = walker._list_dir

        def failing_list_dir(path):
            if path.endswith("docs"):
                raise PermissionError(13, "Permission denied", path)
            return real_list_dir(path)

        monkeypatch.setattr(walker, "_list_dir", failing_list_dir)
        scanner = RootScanner(_root(sample_tree), {})
        with pytest.raises(WalkError) as excinfo:
            scanner.scan()
        assert excinfo.value.path == str(sample_tree / "docs")

    def test_skip_file_predicate(self, sample_tree):
        stats = ScanStats()
        skipped = str(sample_tree / "a.txt")
        records = scan_root(_root(sample_tree), {}, stats, lambda path: path == skipped)
        names = [r.relative_name for r in records]
        assert "a.txt" not in names
        assert "b.txt" in names
        assert stats.excluded_files == 1
