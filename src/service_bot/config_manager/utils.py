"""Loading and validation of the YAML configuration file."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml
from loguru import logger
from pydantic import ValidationError

from .main import Config


def read_yaml(config_path: str | Path) -> Dict[str, Any]:
    """
    Read a YAML configuration file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Parsed mapping (empty if the file is empty)

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file is not valid YAML
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    content = config_path.read_text(encoding="utf-8")
    data = yaml.safe_load(content) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"Top level of {config_path} must be a mapping")
    return data


def validate_config(config_data: Dict[str, Any]) -> Config:
    """
    Validate configuration data against the Config model.

    Raises:
        ValidationError: If the data does not match the model
    """
    try:
        return Config(**config_data)
    except ValidationError as e:
        logger.error(f"Error validating configuration: {e}")
        raise


def load_config(config_path: str | Path | None = None) -> Config:
    """Load the configuration file, or defaults when no file exists."""
    if config_path is None or not Path(config_path).exists():
        if config_path is not None:
            logger.warning(f"Config file '{config_path}' not found, using defaults")
        return Config()
    return validate_config(read_yaml(config_path))
