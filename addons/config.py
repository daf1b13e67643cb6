"""Configuration management for the add-on catalog.

Loads configuration from:
1. addons.toml (defaults)
2. Environment variables (overrides)
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dotenv import load_dotenv

from addons.paths import DEFAULT_USER_EXTENSIONS_DIR, ResourceFinder
from addons.settings import IniSettingsStore

# Load .env file if present
load_dotenv()

CONFIG_FILENAME = "addons.toml"


@dataclass
class ExtensionsConfig:
    """Where add-ons are installed and looked up."""

    # User-writable extensions directory (default: ~/.addons/extensions)
    user_dir: str = ""

    # Built-in extensions directories shipped with the host application
    data_dirs: list[str] = field(default_factory=list)


@dataclass
class SettingsConfig:
    """Persistent settings file (enabled flags, selected theme)."""

    file: str = ""  # default: ~/.addons/settings.ini


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class Config:
    """Main configuration container."""

    extensions: ExtensionsConfig = field(default_factory=ExtensionsConfig)
    settings: SettingsConfig = field(default_factory=SettingsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        return cls(
            extensions=ExtensionsConfig(**data.get("extensions", {})),
            settings=SettingsConfig(**data.get("settings", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    @property
    def user_extensions_dir(self) -> Path:
        if self.extensions.user_dir:
            return Path(self.extensions.user_dir).expanduser()
        return DEFAULT_USER_EXTENSIONS_DIR

    @property
    def settings_file(self) -> Path:
        if self.settings.file:
            return Path(self.settings.file).expanduser()
        return self.user_extensions_dir.parent / "settings.ini"

    def search_paths(self) -> ResourceFinder:
        """Build the search paths described by this configuration."""
        return ResourceFinder(self.user_extensions_dir, self.extensions.data_dirs)

    def settings_store(self) -> IniSettingsStore:
        """Open the settings file described by this configuration."""
        return IniSettingsStore(self.settings_file)


def find_config_file() -> Path | None:
    """Find addons.toml in current or parent directories.

    Returns:
        Path to addons.toml or None if not found.
    """
    current = Path.cwd()

    for directory in [current, *current.parents]:
        config_path = directory / CONFIG_FILENAME
        if config_path.exists():
            return config_path

    return None


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Optional explicit path to addons.toml

    Returns:
        Config object with merged settings.
    """
    config_data: dict[str, Any] = {}

    if config_path is None:
        config_path = find_config_file()

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path, "rb") as f:
                config_data = tomllib.load(f)

    data_dirs = os.getenv("ADDONS_DATA_DIRS")
    env_overrides = {
        "extensions": {
            "user_dir": os.getenv("ADDONS_USER_DIR"),
            "data_dirs": [d for d in data_dirs.split(os.pathsep) if d] if data_dirs else None,
        },
        "settings": {
            "file": os.getenv("ADDONS_SETTINGS_FILE"),
        },
        "logging": {
            "level": os.getenv("LOG_LEVEL"),
        },
    }

    # Merge env overrides (only non-None values)
    for section, values in env_overrides.items():
        if section not in config_data:
            config_data[section] = {}
        for key, value in values.items():
            if value is not None:
                config_data[section][key] = value

    return Config.from_dict(config_data)


# Global config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config object (loaded once, cached).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Path | str | None = None) -> Config:
    """Force reload of configuration.

    Returns:
        Fresh Config object.
    """
    global _config
    _config = load_config(config_path)
    return _config
