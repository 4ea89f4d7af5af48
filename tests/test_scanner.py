"""Tests for the directory walker."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from diskscope.errors import ScanError
from diskscope.models import find_node
from diskscope.scanner import default_scan_path, expand_path, scan_directory


class TestExpandPath:
    def test_expands_tilde(self):
        result = expand_path("~/test")
        assert str(result).startswith(str(Path.home()))

    def test_handles_absolute_path(self):
        result = expand_path("/absolute/path")
        assert str(result) == "/absolute/path"


class TestDefaultScanPath:
    def test_posix(self):
        with patch("diskscope.scanner.sys.platform", "linux"):
            assert default_scan_path() == "/home"

    def test_windows(self):
        with patch("diskscope.scanner.sys.platform", "win32"):
            assert default_scan_path() == "C:\\"


class TestScanDirectory:
    def test_missing_path(self, tmp_path):
        with pytest.raises(ScanError):
            scan_directory(str(tmp_path / "missing"))

    def test_empty_directory(self, tmp_path):
        result = scan_directory(str(tmp_path))
        assert result.root.is_dir
        assert result.root.children == ()
        assert result.total_size == 0
        assert result.file_count == 0

    def test_sizes_roll_up(self, make_tree):
        root = make_tree()
        result = scan_directory(str(root))
        assert result.file_count == 3
        assert result.total_size == 4096 + 10 + 1000
        assert result.root.size == result.total_size
        sub = find_node(result.root, str(root / "sub"))
        assert sub.size == 1000
        assert sub.is_dir

    def test_children_sorted_largest_first(self, make_tree):
        result = scan_directory(str(make_tree()))
        assert [child.name for child in result.root.children] == ["big.bin", "sub", "small.txt"]

    def test_depth_limit(self, make_tree):
        root = make_tree()
        result = scan_directory(str(root), max_depth=1)
        sub = find_node(result.root, str(root / "sub"))
        assert sub.children == ()
        assert sub.size == 0
        assert result.file_count == 2

    def test_file_limit(self, make_tree):
        result = scan_directory(str(make_tree()), max_files=1)
        assert result.file_count == 1

    def test_children_cap_keeps_total(self, make_tree):
        result = scan_directory(str(make_tree()), max_children=1)
        assert [child.name for child in result.root.children] == ["big.bin"]
        assert result.root.size == 4096 + 10 + 1000

    def test_file_root(self, tmp_path):
        target = tmp_path / "only.txt"
        target.write_bytes(b"abc")
        result = scan_directory(str(target))
        assert not result.root.is_dir
        assert result.root.size == 3
        assert result.file_count == 1

    def test_progress_frames(self, make_tree):
        frames = []
        scan_directory(str(make_tree()), progress=frames.append)
        assert frames
        assert frames[0].files_processed >= 1
        assert frames[0].current_path

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlinks_not_followed(self, make_tree):
        root = make_tree()
        os.symlink(root / "sub", root / "link")
        result = scan_directory(str(root))
        assert result.file_count == 3
        assert find_node(result.root, str(root / "link")) is None

    def test_unreadable_directory_counted(self, make_tree):
        root = make_tree()
        real_scandir = os.scandir

        def flaky_scandir(path):
            if str(path).endswith("sub"):
                raise PermissionError("denied")
            return real_scandir(path)

        with patch("diskscope.scanner.os.scandir", side_effect=flaky_scandir):
            result = scan_directory(str(root))

        assert result.error_count == 1
        assert result.file_count == 2
