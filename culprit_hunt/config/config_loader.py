"""
Configuration loader for YAML-based game configurations.
"""

import logging
import os
from dataclasses import fields
from pathlib import Path
from typing import Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from .game_config import GameConfig, default_config

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CULPRIT_HUNT_CONFIG"


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load game configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        GameConfig instance with values from YAML file

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValueError: If a value fails GameConfig validation
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return default_config

    known = {f.name for f in fields(GameConfig)}
    values = {}
    for key, value in config_dict.items():
        if key in known:
            values[key] = value
        else:
            # Warn about unknown keys but don't fail
            logger.warning("Unknown config key '%s' in %s", key, config_path)

    # Validation runs in GameConfig.__post_init__
    return GameConfig(**values)


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load configuration from YAML file or return default.

    Args:
        config_path: Optional path to YAML config file. If None, the
            CULPRIT_HUNT_CONFIG environment variable (or .env entry) is used.

    Returns:
        GameConfig instance
    """
    if config_path is None:
        load_dotenv(find_dotenv(usecwd=True))
        config_path = os.environ.get(CONFIG_ENV_VAR)

    if not config_path:
        return default_config

    return load_config_from_yaml(config_path)
