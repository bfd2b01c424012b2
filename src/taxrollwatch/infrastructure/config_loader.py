"""
Configuration loader module.

Loads tracker settings from config/tracker_config.json (or .jsonc) and
validates them against the TrackerSettings model. A missing file means
defaults; anything unreadable or invalid is a ConfigError.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from taxrollwatch.domain.config import TrackerSettings
from taxrollwatch.domain.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tracker_config"


def strip_json_comments(content: str) -> str:
    """Remove // line and /* block */ comments outside of string literals."""
    out: list[str] = []
    i = 0
    in_string = False
    length = len(content)

    while i < length:
        char = content[i]
        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < length:
                out.append(content[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
        elif char == '"':
            in_string = True
            out.append(char)
            i += 1
        elif content.startswith("//", i):
            end = content.find("\n", i)
            i = length if end == -1 else end
        elif content.startswith("/*", i):
            end = content.find("*/", i + 2)
            if end == -1:
                raise ValueError("Unterminated block comment")
            i = end + 2
        else:
            out.append(char)
            i += 1

    return "".join(out)


class ConfigLoader:
    """
    Load and validate the tracker configuration file.

    Usage:
        settings = ConfigLoader("config").load_settings()
    """

    def __init__(self, config_dir: Path | str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing tracker_config.json(c)
        """
        self.config_dir = Path(config_dir)

    def find_config_file(self) -> Path | None:
        """Return the config file to use, preferring .json over .jsonc."""
        for suffix in (".json", ".jsonc"):
            candidate = self.config_dir / f"{CONFIG_FILENAME}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def load_json_file(self, path: Path) -> Dict[str, Any]:
        """
        Load a JSON or JSONC file.

        Raises:
            ConfigError: If the file cannot be read or parsed, or is not an object
        """
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

        try:
            if path.suffix == ".jsonc":
                content = strip_json_comments(content)
            data = json.loads(content)
        except ValueError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        return data

    def load_settings(self, path: Path | str | None = None) -> TrackerSettings:
        """
        Load tracker settings.

        Args:
            path: Explicit config file; when None the config directory is searched

        Returns:
            Validated TrackerSettings (defaults if no file is found)

        Raises:
            ConfigError: If an explicit path is missing or any file is invalid
        """
        if path is not None:
            config_path = Path(path)
            if not config_path.is_file():
                raise ConfigError(f"Config file not found: {config_path}")
        else:
            config_path = self.find_config_file()
            if config_path is None:
                logger.info("No %s found in %s - using defaults", CONFIG_FILENAME, self.config_dir)
                return TrackerSettings()

        data = self.load_json_file(config_path)
        try:
            settings = TrackerSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings in {config_path}: {e}") from e

        logger.info("Loaded tracker settings from %s", config_path)
        return settings
