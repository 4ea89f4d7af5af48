"""Tests for configuration loading."""

import json

from diskscope.config import Settings, load_settings, save_settings
from diskscope.scanner import DEFAULT_MAX_DEPTH


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "config.json")
        assert settings == Settings()
        assert settings.demo_fallback is False
        assert settings.switch_delay == 0.15
        assert settings.scan_max_depth == DEFAULT_MAX_DEPTH

    def test_reads_values(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"demo_fallback": True, "default_scan_path": "/data"}))
        settings = load_settings(config_file)
        assert settings.demo_fallback is True
        assert settings.default_scan_path == "/data"

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")
        assert load_settings(config_file) == Settings()

    def test_not_an_object(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("[1, 2]")
        assert load_settings(config_file) == Settings()

    def test_invalid_values_dropped(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"switch_delay": -1, "scan_max_files": 10}))
        settings = load_settings(config_file)
        assert settings.switch_delay == 0.15
        assert settings.scan_max_files == 10

    def test_unknown_keys_ignored(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"colour": "blue"}))
        assert load_settings(config_file) == Settings()


class TestSaveSettings:
    def test_save_and_reload(self, tmp_path):
        config_file = tmp_path / "nested" / "config.json"
        assert save_settings(Settings(scan_timeout=30.0), config_file)
        assert load_settings(config_file).scan_timeout == 30.0

    def test_unwritable(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        assert save_settings(Settings(), blocker / "config.json") is False
