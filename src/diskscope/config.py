"""User configuration for diskscope."""

import json
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from diskscope.scanner import DEFAULT_MAX_DEPTH, MAX_FILES, MAX_SCAN_SECONDS, expand_path

CONFIG_DIR = expand_path("~/.diskscope")
CONFIG_FILE = CONFIG_DIR / "config.json"


class Settings(BaseModel):
    """Settings read from ~/.diskscope/config.json."""

    default_scan_path: Optional[str] = Field(
        None, description="Path scanned when none is given (platform default if unset)"
    )
    demo_fallback: bool = Field(
        False, description="Show the demo dataset instead of an error when a scan fails"
    )
    switch_delay: float = Field(0.15, ge=0, description="Seconds between view switch and render")
    scan_max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1, description="Deepest directory level walked")
    scan_max_files: int = Field(MAX_FILES, ge=1, description="Files counted before the scan stops")
    scan_timeout: float = Field(MAX_SCAN_SECONDS, gt=0, description="Seconds before the scan stops")
    log_level: str = Field("WARNING", description="Console log level")


def load_settings(config_file: Optional[Path] = None) -> Settings:
    """
    Load settings from disk.

    A missing or unreadable file gives the defaults. Fields that fail
    validation are dropped and fall back to their defaults.
    """
    config_file = config_file or CONFIG_FILE
    if not config_file.exists():
        return Settings()

    try:
        with open(config_file) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Ignoring unreadable config {config_file}: {e}")
        return Settings()

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {config_file}: expected a JSON object")
        return Settings()

    try:
        return Settings(**data)
    except ValidationError as e:
        bad = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        logger.warning(f"Ignoring invalid config values: {', '.join(sorted(bad))}")
        return Settings(**{k: v for k, v in data.items() if k not in bad})


def save_settings(settings: Settings, config_file: Optional[Path] = None) -> bool:
    """Save settings to disk. Returns False if the file could not be written."""
    config_file = config_file or CONFIG_FILE
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w") as f:
            json.dump(settings.model_dump(), f, indent=2)
        return True
    except OSError:
        return False
