"""
GQG Configuration Management

Resolves file locations and logging settings from the environment and the
optional [settings] table of the TOML store file.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import toml

from .types import StoreError


# Environment overrides
ENV_CONFIG = "GQG_CONFIG"
ENV_HOME = "GQG_HOME"
ENV_LOG_LEVEL = "GQG_LOG_LEVEL"

CONFIG_FILE_NAME = ".gqg.toml"
DATA_DIR_NAME = ".gqg"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_config_path() -> Path:
    """Store file in the user's home directory."""
    return Path.home() / CONFIG_FILE_NAME


def default_data_dir() -> Path:
    """Output directory in the user's home directory."""
    return Path.home() / DATA_DIR_NAME


@dataclass
class Config:
    """
    Complete GQG configuration.
    """
    # Identity/friend store
    config_path: Path = field(default_factory=default_config_path)

    # Decrypted messages and files are written below this directory
    data_dir: Path = field(default_factory=default_data_dir)

    # Logging
    log_level: str = "WARNING"

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Config":
        """
        Load configuration.

        Precedence, lowest first: defaults, [settings] table of the store
        file, environment variables, explicit config_path argument.

        Args:
            config_path: Path to the store file (default: ~/.gqg.toml)
            environ: Environment mapping (default: os.environ)

        Returns:
            Loaded configuration

        Raises:
            StoreError: If the store file exists but cannot be parsed
        """
        env = os.environ if environ is None else environ
        config = cls()

        if config_path is not None:
            config.config_path = Path(config_path)
        elif env.get(ENV_CONFIG):
            config.config_path = Path(env[ENV_CONFIG])

        if config.config_path.exists():
            try:
                data = toml.load(config.config_path)
            except (toml.TomlDecodeError, OSError, UnicodeDecodeError) as e:
                raise StoreError(f"Cannot read configuration file {config.config_path}: {e}") from e
            config._apply_dict(data.get("settings", {}))

        if env.get(ENV_HOME):
            config.data_dir = Path(env[ENV_HOME])
        if env.get(ENV_LOG_LEVEL):
            config.log_level = env[ENV_LOG_LEVEL].upper()

        config.validate()
        return config

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply the [settings] table to config."""
        if "data_dir" in data:
            self.data_dir = Path(data["data_dir"]).expanduser()
        if "log_level" in data:
            self.log_level = str(data["log_level"]).upper()

    def validate(self) -> None:
        """
        Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return getattr(logging, self.log_level)

    def messages_dir(self) -> Path:
        """Directory for decrypted messages, created on demand."""
        path = self.data_dir / "messages"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def files_dir(self) -> Path:
        """Directory for decrypted files, created on demand."""
        path = self.data_dir / "files"
        path.mkdir(parents=True, exist_ok=True)
        return path
