"""
Configuration management for CompositeClock.
Handles loading, validation, and defaults for all settings.
"""

import os
import yaml
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
import logging

from .faces.digital import is_valid_time_text, text_to_timestamp

logger = logging.getLogger(__name__)

# Default paths
DEFAULT_CONFIG_PATHS = [
    "/etc/compositeclock/config.yaml",
    os.path.expanduser("~/.config/compositeclock/config.yaml"),
    "./config.yaml",
]

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class ClockConfig:
    """Clock settings."""
    tick_interval_ms: int = 100
    # Start at a fixed time of day ("HH:MM:SS", today) or timestamp (ms).
    # Neither set means wall-clock now.
    start_time: Optional[str] = None
    start_timestamp: Optional[int] = None


@dataclass
class DisplayConfig:
    """Console display settings."""
    show_angles: bool = False
    angle_units: str = "degrees"  # degrees, radians


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    directory: Optional[str] = None


@dataclass
class CompositeClockConfig:
    """Main configuration class."""
    clock: ClockConfig = field(default_factory=ClockConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Runtime state (not persisted)
    config_path: Optional[str] = None


def _dict_to_dataclass(data: Dict[str, Any], cls: type) -> Any:
    """Convert a dictionary to a dataclass instance, handling nested dataclasses."""
    if data is None:
        return cls()

    field_types = {f.name: f.type for f in cls.__dataclass_fields__.values()}
    kwargs = {}

    for key, value in data.items():
        if key not in field_types:
            logger.warning(f"Ignoring unknown {cls.__name__} setting: {key}")
            continue

        field_type = field_types[key]

        # Handle nested dataclasses
        if hasattr(field_type, '__dataclass_fields__'):
            kwargs[key] = _dict_to_dataclass(value, field_type)
        else:
            kwargs[key] = value

    return cls(**kwargs)


def load_config(config_path: Optional[str] = None) -> CompositeClockConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config file. If None, searches default locations.

    Returns:
        CompositeClockConfig instance with loaded or default values.
    """
    # Find config file
    if config_path:
        paths_to_try = [config_path]
    else:
        paths_to_try = DEFAULT_CONFIG_PATHS

    config_data = {}
    found_path = None

    for path in paths_to_try:
        expanded_path = os.path.expanduser(path)
        if os.path.exists(expanded_path):
            try:
                with open(expanded_path, 'r') as f:
                    config_data = yaml.safe_load(f) or {}
                found_path = expanded_path
                logger.info(f"Loaded config from {expanded_path}")
                break
            except Exception as e:
                logger.warning(f"Failed to load config from {expanded_path}: {e}")

    if not found_path:
        logger.info("No config file found, using defaults")

    config = CompositeClockConfig(
        clock=_dict_to_dataclass(config_data.get('clock'), ClockConfig),
        display=_dict_to_dataclass(config_data.get('display'), DisplayConfig),
        logging=_dict_to_dataclass(config_data.get('logging'), LoggingConfig),
        config_path=found_path,
    )

    # YAML reads an unquoted 13:05:00 as a base-60 integer
    if isinstance(config.clock.start_time, int):
        minutes, seconds = divmod(config.clock.start_time, 60)
        hours, minutes = divmod(minutes, 60)
        config.clock.start_time = f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    if config.logging.directory:
        config.logging.directory = os.path.expanduser(config.logging.directory)

    return config


def validate_config(config: CompositeClockConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Returns:
        List of error messages. Empty if valid.
    """
    errors = []

    # Check clock settings
    if not isinstance(config.clock.tick_interval_ms, int) or config.clock.tick_interval_ms <= 0:
        errors.append("Clock tick_interval_ms must be a positive integer")

    if config.clock.start_time is not None and config.clock.start_timestamp is not None:
        errors.append("Set at most one of clock start_time and start_timestamp")

    if config.clock.start_time is not None and not is_valid_time_text(config.clock.start_time):
        errors.append("Clock start_time must be in HH:MM:SS format")

    if config.clock.start_timestamp is not None and not isinstance(config.clock.start_timestamp, int):
        errors.append("Clock start_timestamp must be an integer (milliseconds)")

    # Check display settings
    if config.display.angle_units not in ['degrees', 'radians']:
        errors.append("Display angle_units must be 'degrees' or 'radians'")

    # Check logging settings
    if str(config.logging.level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Logging level must be one of: {VALID_LOG_LEVELS}")

    return errors


def resolve_start_timestamp(clock_config: ClockConfig, now: int) -> int:
    """
    Work out the starting timestamp for a clock.

    Args:
        clock_config: Clock settings.
        now: Current wall-clock time in ms.

    Returns:
        start_timestamp if set, else today's date at start_time if set,
        else now.
    """
    if clock_config.start_timestamp is not None:
        return int(clock_config.start_timestamp)
    if clock_config.start_time:
        return text_to_timestamp(clock_config.start_time, now)
    return now
