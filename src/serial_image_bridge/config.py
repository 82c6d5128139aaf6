"""
Serial Image Bridge Configuration
=================================

This module handles configuration loading for the bridge.

Configuration Sources (in order of precedence):
    1. Command-line flags (highest priority, passed as overrides)
    2. Environment variables
    3. config.yaml file
    4. Default values (lowest priority)

Environment Variable Mapping:
    BRIDGE_DEVICE_PATH     -> link.device_path
    BRIDGE_BAUD_RATE       -> link.baud_rate
    BRIDGE_IMAGE_DIR       -> images.directory
    BRIDGE_IMAGE_WIDTH     -> images.image_width
    BRIDGE_IMAGE_COUNT     -> images.image_count
    BRIDGE_PACING_SECONDS  -> sequencer.pacing_seconds
    BRIDGE_LOG_LEVEL       -> logging.level

Example:
    from serial_image_bridge.config import load_config

    settings = load_config()
    print(settings.link.device_path)
    print(settings.images.image_width)
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from serial_image_bridge.errors import SettingsError


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class LinkConfig(BaseModel):
    """Serial link configuration."""

    device_path: str = Field(
        default="/dev/ttyACM0",
        min_length=1,
        description="Serial device node or pyserial URL",
    )
    baud_rate: int = Field(default=115200, gt=0, description="Line speed")
    read_timeout_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Seconds a read waits before returning what arrived",
    )
    write_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds a write may block (None = no limit)",
    )


class ImagesConfig(BaseModel):
    """Encoded image source configuration."""

    directory: str = Field(default="images", description="Directory of encoded images")
    file_template: str = Field(
        default="img{index}.raw",
        description="File name template, formatted with the 1-based index",
    )
    image_width: int = Field(default=16, ge=1, description="Image side length in samples")
    image_count: int = Field(default=10, ge=1, description="Number of images to send")

    @field_validator("file_template")
    @classmethod
    def _template_has_index(cls, value: str) -> str:
        if "{index}" not in value:
            raise ValueError("file_template must contain '{index}'")
        try:
            value.format(index=1)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"file_template is not formattable with index only: {e}") from e
        return value


class SequencerConfig(BaseModel):
    """Transmission loop configuration."""

    pacing_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Wait after each frame before the next is sent",
    )
    render_grid: bool = Field(
        default=True,
        description="Print each decoded image as a hex grid",
    )
    log_device_output: bool = Field(
        default=False,
        description="Read and log whatever the device sends after each frame",
    )


class ObservabilityConfig(BaseModel):
    """Diagnostic artifact configuration."""

    preview_dir: Optional[str] = Field(
        default=None,
        description="Directory for PNG previews of decoded images (None = disabled)",
    )
    preview_scale: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Nearest-neighbour upscaling factor for previews",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the bridge.

    Loads configuration from YAML file, environment variables and
    command-line overrides.
    """

    link: LinkConfig = Field(default_factory=LinkConfig)
    images: ImagesConfig = Field(default_factory=ImagesConfig)
    sequencer: SequencerConfig = Field(default_factory=SequencerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Settings:
    """
    Load configuration from YAML file, environment and overrides.

    Priority (highest to lowest):
        1. overrides (command-line flags)
        2. Environment variables
        3. YAML config file
        4. Default values

    Args:
        config_path: Path to config.yaml. If None, searches the working directory.
        overrides: Section -> {field: value} mapping applied last

    Returns:
        Settings: Loaded configuration

    Raises:
        SettingsError: Explicit file missing, unreadable YAML, or invalid values
    """
    if config_path is None:
        for path in (Path("config.yaml"), Path("config.yml")):
            if path.exists():
                config_path = str(path)
                break
    elif not Path(config_path).exists():
        raise SettingsError(f"Config file not found: {config_path}")

    config_data: Dict[str, Any] = {}
    if config_path:
        logger.debug(f"Loading config from: {config_path}")
        try:
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise SettingsError(f"Cannot read config file {config_path}: {e}") from e
        if not isinstance(config_data, dict):
            raise SettingsError(f"Config file {config_path} must contain a mapping")
        for section, values in list(config_data.items()):
            # "link:" with every key commented out loads as None
            if values is None:
                config_data[section] = {}
            elif not isinstance(values, dict):
                raise SettingsError(
                    f"Section '{section}' in {config_path} must be a mapping"
                )
    else:
        logger.debug("No config file found, using defaults and environment variables")

    try:
        _apply_env_overrides(config_data)
    except ValueError as e:
        raise SettingsError(f"Invalid environment override: {e}") from e

    for section, values in (overrides or {}).items():
        for key, value in values.items():
            if value is not None:
                config_data.setdefault(section, {})[key] = value

    try:
        return Settings.model_validate(config_data)
    except ValidationError as e:
        raise SettingsError(f"Invalid configuration: {e}") from e


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Link settings
    if env_device := os.environ.get("BRIDGE_DEVICE_PATH"):
        config_data.setdefault("link", {})["device_path"] = env_device
    if env_baud := os.environ.get("BRIDGE_BAUD_RATE"):
        config_data.setdefault("link", {})["baud_rate"] = int(env_baud)

    # Image settings
    if env_dir := os.environ.get("BRIDGE_IMAGE_DIR"):
        config_data.setdefault("images", {})["directory"] = env_dir
    if env_width := os.environ.get("BRIDGE_IMAGE_WIDTH"):
        config_data.setdefault("images", {})["image_width"] = int(env_width)
    if env_count := os.environ.get("BRIDGE_IMAGE_COUNT"):
        config_data.setdefault("images", {})["image_count"] = int(env_count)

    # Sequencer settings
    if env_pacing := os.environ.get("BRIDGE_PACING_SECONDS"):
        config_data.setdefault("sequencer", {})["pacing_seconds"] = float(env_pacing)

    # Logging settings
    if env_log := os.environ.get("BRIDGE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
