"""Tests for CLI interface."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from diskscope.cli import app
from diskscope.config import Settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings():
    with patch("diskscope.cli.setup_logging"), patch("diskscope.cli.load_settings", return_value=Settings()):
        yield


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "diskscope version" in result.stdout

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "diskscope version" in result.stdout


class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "scan" in result.stdout
        assert "demo" in result.stdout
        assert "delete" in result.stdout

    def test_scan_help(self):
        result = runner.invoke(app, ["scan", "--help"])
        assert result.exit_code == 0
        assert "--view" in result.stdout
        assert "--demo-fallback" in result.stdout


class TestDemo:
    def test_default_view(self):
        result = runner.invoke(app, ["demo"])
        assert result.exit_code == 0
        assert "Demo Directory" in result.stdout
        assert "(demo data)" in result.stdout

    def test_barchart_view(self):
        result = runner.invoke(app, ["demo", "--view", "barchart"])
        assert result.exit_code == 0
        assert "512.0 MB" in result.stdout
        assert "Applications" in result.stdout

    def test_invalid_view(self):
        result = runner.invoke(app, ["demo", "--view", "pie"])
        assert result.exit_code != 0


class TestScan:
    def test_scan_directory(self, make_tree):
        root = make_tree()
        result = runner.invoke(app, ["scan", str(root), "--view", "list"])
        assert result.exit_code == 0
        assert "Files scanned: 3" in result.stdout
        assert "big.bin" in result.stdout

    def test_missing_path_fails(self, tmp_path):
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "Scan failed" in result.stdout

    def test_missing_path_with_demo_fallback(self, tmp_path):
        result = runner.invoke(app, ["scan", str(tmp_path / "missing"), "--demo-fallback", "--view", "barchart"])
        assert result.exit_code == 0
        assert "(demo data)" in result.stdout
        assert "Documents" in result.stdout

    def test_max_depth(self, make_tree):
        root = make_tree()
        result = runner.invoke(app, ["scan", str(root), "--max-depth", "1"])
        assert result.exit_code == 0
        assert "Files scanned: 2" in result.stdout


class TestDelete:
    def test_delete_with_yes(self, make_tree):
        root = make_tree()
        result = runner.invoke(app, ["delete", str(root / "big.bin"), "--yes"])
        assert result.exit_code == 0
        assert not (root / "big.bin").exists()
        assert "Files scanned: 2" in result.stdout

    def test_delete_declined(self, make_tree):
        root = make_tree()
        with patch("diskscope.cli.confirm_action", return_value=False):
            result = runner.invoke(app, ["delete", str(root / "big.bin")])
        assert result.exit_code == 0
        assert "Cancelled" in result.stdout
        assert (root / "big.bin").exists()

    def test_delete_missing(self, tmp_path):
        result = runner.invoke(app, ["delete", str(tmp_path / "missing"), "--yes"])
        assert result.exit_code == 1
        assert "No such file" in result.stdout


class TestConfig:
    def test_shows_settings(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "demo_fallback" in result.stdout
        assert "switch_delay" in result.stdout


class TestUnusualPaths:
    def test_scan_bracketed_path(self, tmp_path):
        target = tmp_path / "a[" / "b]"
        target.mkdir(parents=True)
        (target / "x[bold].txt").write_bytes(b"x" * 10)
        result = runner.invoke(app, ["scan", str(target), "--view", "barchart"])
        assert result.exit_code == 0
        assert "x[bold].txt" in result.stdout

    def test_delete_bracketed_path(self, tmp_path):
        folder = tmp_path / "a["
        folder.mkdir()
        victim = folder / "b]"
        victim.write_bytes(b"x" * 10)
        (folder / "keep.txt").write_bytes(b"y" * 10)
        result = runner.invoke(app, ["delete", str(victim), "--yes"])
        assert result.exit_code == 0
        assert not victim.exists()
        assert "keep.txt" in result.stdout

    def test_delete_normalizes_parent_segments(self, make_tree):
        root = make_tree()
        result = runner.invoke(app, ["delete", str(root / "sub" / ".." / "big.bin"), "--yes"])
        assert result.exit_code == 0
        assert not (root / "big.bin").exists()
        assert (root / "sub").exists()
        assert "Files scanned: 2" in result.stdout
