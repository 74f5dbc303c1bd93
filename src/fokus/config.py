"""Configuration management for fokus."""

import logging
import tomllib
from pathlib import Path
from typing import Optional

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError

from fokus.models.session import TARGET_MAX_MINUTES, TARGET_MIN_MINUTES

logger = logging.getLogger(__name__)

CONFIG_HEADER = f"""# fokus Configuration File

# Default timer duration (in minutes)
# Must be between {TARGET_MIN_MINUTES} and {TARGET_MAX_MINUTES}
"""


class Config(BaseModel):
    """Main configuration."""

    default_timer_duration: int = Field(
        default=25, ge=TARGET_MIN_MINUTES, le=TARGET_MAX_MINUTES
    )
    tick_interval_ms: int = Field(default=100, ge=10, le=1000)

    def to_toml(self) -> str:
        """Serialize to the commented TOML layout written on first run."""
        return (
            CONFIG_HEADER
            + f"default_timer_duration = {self.default_timer_duration}\n"
            + "\n# Screen refresh interval (in milliseconds)\n"
            + f"tick_interval_ms = {self.tick_interval_ms}\n"
        )


class ConfigManager:
    """Manages the fokus config file and data directory."""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or Path(user_config_dir("fokus"))
        self.config_file = self.config_dir / "config.toml"
        self.history_file = self.config_dir / "history.json"
        self.lock_file = self.config_dir / "fokus.lock"

        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> Config:
        """
        Load configuration from file.

        A missing file is created with defaults. A file that does not parse or
        holds out-of-range values is overwritten with defaults.
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)

        if not self.config_file.exists():
            config = Config()
            self.save_config(config)
            return config

        try:
            with open(self.config_file, "rb") as f:
                data = tomllib.load(f)
            return Config(**data)
        except (tomllib.TOMLDecodeError, ValidationError) as e:
            logger.warning("Invalid config %s, restoring defaults: %s", self.config_file, e)
            config = Config()
            self.save_config(config)
            return config

    def save_config(self, config: Optional[Config] = None) -> None:
        """Save configuration to file."""
        if config is None:
            config = self.config

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(config.to_toml(), encoding="utf-8")


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
