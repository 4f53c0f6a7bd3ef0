"""
Configuration for content-modeller.

Supports configuration via:
1. Environment variables (highest priority)
2. TOML config file (content-modeller.toml)
3. Default values (lowest priority)

Environment variables:
- CONTENT_MODELLER_CONFIG_DIR: Config export directory holding the form display YAML files
- CONTENT_MODELLER_MODE: Default form mode (default: "default")
- CONTENT_MODELLER_BACKUP: Whether saves keep a backup of the previous file (true/false)
- CONTENT_MODELLER_MAX_BACKUPS: Backups retained per file (0 for unlimited)
- CONTENT_MODELLER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- CONTENT_MODELLER_LOG_FORMAT: "human" or "structured" (JSON lines)
- CONTENT_MODELLER_CONFIG_FILE: Path to TOML config file

Example content-modeller.toml:

    [storage]
    config_dir = "config/sync"
    default_mode = "default"
    backup = true
    max_backups = 10

    [logging]
    level = "INFO"
    format = "human"
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from content_modeller.core.models import DEFAULT_MODE
from content_modeller.core.storage import DEFAULT_MAX_BACKUPS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ("content-modeller.toml", ".content-modeller.toml")

_VALID_LOG_FORMATS = {"human", "structured"}
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _normalize_log_format(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in _VALID_LOG_FORMATS:
        logger.warning(
            "Invalid log format '%s'. Falling back to 'human'. Valid options: %s",
            value,
            ", ".join(sorted(_VALID_LOG_FORMATS)),
        )
        return "human"
    return normalized


def _normalize_log_level(value: Any, current: str) -> str:
    normalized = str(value).strip().upper()
    if normalized not in _VALID_LOG_LEVELS:
        logger.warning(
            "Invalid log level '%s', keeping %s. Valid options: %s",
            value,
            current,
            ", ".join(_VALID_LOG_LEVELS),
        )
        return current
    return normalized


def _parse_max_backups(value: Any, source: str, current: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = -1
    if isinstance(value, bool) or parsed < 0:
        logger.warning("Invalid %s '%s', keeping %d", source, value, current)
        return current
    return parsed


@dataclass
class ModellerConfig:
    """Configuration with support for env vars and TOML overrides."""

    # Storage configuration
    config_dir: Optional[Path] = None
    default_mode: str = DEFAULT_MODE
    backup: bool = True
    max_backups: int = DEFAULT_MAX_BACKUPS

    # Logging configuration
    log_level: str = "WARNING"
    log_format: str = "human"

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ModellerConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. TOML config file
        3. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get("CONTENT_MODELLER_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            for default_path in DEFAULT_CONFIG_FILES:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error("Error loading config file %s: %s", path, e)
            return

        if "storage" in data:
            storage = data["storage"]
            if "config_dir" in storage:
                self.config_dir = Path(storage["config_dir"])
            if "default_mode" in storage:
                self.default_mode = str(storage["default_mode"])
            if "backup" in storage:
                self.backup = _parse_bool(storage["backup"])
            if "max_backups" in storage:
                self.max_backups = _parse_max_backups(
                    storage["max_backups"], "storage.max_backups", self.max_backups
                )

        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.log_level = _normalize_log_level(log["level"], self.log_level)
            if "format" in log:
                self.log_format = _normalize_log_format(str(log["format"]))

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if config_dir := os.environ.get("CONTENT_MODELLER_CONFIG_DIR"):
            self.config_dir = Path(config_dir)

        if mode := os.environ.get("CONTENT_MODELLER_MODE"):
            self.default_mode = mode

        if backup := os.environ.get("CONTENT_MODELLER_BACKUP"):
            self.backup = _parse_bool(backup)

        if max_backups := os.environ.get("CONTENT_MODELLER_MAX_BACKUPS"):
            self.max_backups = _parse_max_backups(
                max_backups, "CONTENT_MODELLER_MAX_BACKUPS", self.max_backups
            )

        if level := os.environ.get("CONTENT_MODELLER_LOG_LEVEL"):
            self.log_level = _normalize_log_level(level, self.log_level)

        if log_format := os.environ.get("CONTENT_MODELLER_LOG_FORMAT"):
            self.log_format = _normalize_log_format(log_format)

    def setup_logging(self, level: Optional[str] = None) -> None:
        """Configure logging based on settings; level overrides log_level when given."""
        from content_modeller.core.logging_config import configure_logging

        configure_logging(level=(level or self.log_level).upper(), format=self.log_format)


# Global configuration instance
_config: Optional[ModellerConfig] = None


def get_config() -> ModellerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ModellerConfig.from_env()
    return _config


def set_config(config: Optional[ModellerConfig]) -> None:
    """Set the global configuration instance (None resets it)."""
    global _config
    _config = config
