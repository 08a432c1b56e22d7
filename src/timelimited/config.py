#!/usr/bin/env python3
"""
Centralized configuration management for timelimited.

This module provides a single source of truth for all configuration values,
supporting environment variables, default values, and optional config files.
"""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

from timelimited.util.datetime_utils import parse_time_offset

# Marker syntax defaults: /* < time-limited ... > */
DEFAULT_DELIMITER_START = "/*"
DEFAULT_DELIMITER_END = "*/"
DEFAULT_TAG_NAME = "time-limited"


@dataclass
class MarkerConfig:
    """How markers are written in the source text."""

    delimiter_start: str = DEFAULT_DELIMITER_START
    delimiter_end: str = DEFAULT_DELIMITER_END
    tag_name: str = DEFAULT_TAG_NAME
    # Offset the to="..." timestamps are written in
    time_offset: str = "+00:00"

    @classmethod
    def from_env(cls) -> "MarkerConfig":
        """Load values from environment variables, falling back to the defaults."""
        defaults = cls()
        return cls(
            delimiter_start=os.getenv('TIMELIMITED_DELIMITER_START', defaults.delimiter_start),
            delimiter_end=os.getenv('TIMELIMITED_DELIMITER_END', defaults.delimiter_end),
            tag_name=os.getenv('TIMELIMITED_TAG_NAME', defaults.tag_name),
            time_offset=os.getenv('TIMELIMITED_TIME_OFFSET', defaults.time_offset),
        )


@dataclass
class OutputConfig:
    """Configuration for reading and writing files."""

    encoding: str = "utf-8"
    default_verbose: bool = False


@dataclass
class Config:
    """Main configuration class that aggregates all configuration sections."""

    markers: MarkerConfig = field(default_factory=MarkerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Config: Configured instance with values from environment

        Example:
            >>> config = Config.from_env()
            >>> print(config.markers.delimiter_start)
        """
        return cls(
            markers=MarkerConfig.from_env(),
            output=OutputConfig(),
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """
        Create configuration from dictionary.

        Unknown keys are ignored so config files can carry settings for other tools.

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            Config: Configured instance

        Example:
            >>> config = Config.from_dict({"markers": {"delimiter_start": "<!--"}})
        """
        return cls(
            markers=MarkerConfig(**_known_keys(MarkerConfig, config_dict.get('markers') or {})),
            output=OutputConfig(**_known_keys(OutputConfig, config_dict.get('output') or {})),
        )

    def validate(self) -> list:
        """
        Validate configuration and return list of warnings.

        Returns:
            list: List of warning messages
        """
        warnings = []

        if not self.markers.delimiter_start or not self.markers.delimiter_end:
            warnings.append("Comment delimiters must not be empty")
        elif self.markers.delimiter_start == self.markers.delimiter_end:
            warnings.append(
                f"Start and end delimiter are both {self.markers.delimiter_start!r} - comments cannot nest or be told apart"
            )

        if not self.markers.tag_name.strip():
            warnings.append("Tag name must not be empty")

        try:
            parse_time_offset(self.markers.time_offset)
        except ValueError as e:
            warnings.append(str(e))

        return warnings

    def __str__(self) -> str:
        """Return string representation of configuration (safe for logging)."""
        return f"""Config(
  Markers:
    - delimiters: {self.markers.delimiter_start} ... {self.markers.delimiter_end}
    - tag_name: {self.markers.tag_name}
    - time_offset: {self.markers.time_offset}
  Output:
    - encoding: {self.output.encoding}
)"""


def _known_keys(section, values: dict) -> dict:
    names = {f.name for f in fields(section)}
    return {key: value for key, value in values.items() if key in names}


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Creates the configuration from environment variables on first call,
    then returns the cached instance on subsequent calls.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config():
    """
    Reset the global configuration instance.

    Useful for testing or when environment variables have changed.
    """
    global _config
    _config = None


def load_config_from_file(config_file: Path) -> Config:
    """
    Load configuration from a YAML or JSON file.

    Args:
        config_file: Path to configuration file

    Returns:
        Config: Configuration loaded from file

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file format is invalid

    Example:
        >>> config = load_config_from_file(Path("timelimited.yaml"))
    """
    import yaml

    config_file = Path(config_file)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    suffix = config_file.suffix.lower()

    with open(config_file, 'r', encoding='utf-8') as f:
        if suffix == '.json':
            try:
                config_dict = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {config_file}: {e}") from e
        elif suffix in ['.yaml', '.yml']:
            try:
                config_dict = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        else:
            raise ValueError(f"Unsupported config file format: {suffix}")

    if config_dict is None:
        config_dict = {}
    if not isinstance(config_dict, dict):
        raise ValueError(f"Config file {config_file} must contain a mapping")

    return Config.from_dict(config_dict)
