"""Per-invocation settings for the CLI.

Combines the --config-dir option with ModellerConfig (env, TOML, defaults)
into the values a command actually uses.
"""

from pathlib import Path
from typing import Optional

from content_modeller.config import ModellerConfig, get_config


class CLIContext:
    """Settings of one CLI invocation."""

    def __init__(
        self,
        config_dir: Optional[str] = None,
        config: Optional[ModellerConfig] = None,
    ):
        self._config_dir_option = config_dir
        self._config = config or get_config()

    @property
    def config_dir(self) -> Optional[Path]:
        """Absolute config export directory.

        --config-dir wins over ModellerConfig.config_dir; None when neither
        is set.
        """
        if self._config_dir_option:
            return Path(self._config_dir_option).resolve()
        configured = self._config.config_dir
        return configured.resolve() if configured else None

    @property
    def config(self) -> ModellerConfig:
        return self._config

    def resolve_mode(self, mode: Optional[str]) -> str:
        """Form mode from the command line, falling back to the configured default."""
        return mode or self._config.default_mode


def create_context(
    config_dir: Optional[str] = None, config: Optional[ModellerConfig] = None
) -> CLIContext:
    return CLIContext(config_dir=config_dir, config=config)
