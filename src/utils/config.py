"""
Configuration Management Module

Handles loading and updating application configuration from config.json
Supports merging with defaults so new keys appear in old config files
"""

import json
from pathlib import Path
from typing import Optional
import logging

from . import constants

logger = logging.getLogger("reading_tracker")


def default_config() -> dict:
    """Build the default configuration from constants.py"""
    return {
        "general": {
            "total_parts": constants.TOTAL_PARTS,
            "part_delimiter": constants.PART_DELIMITER,
            "content_file": str(constants.CONTENT_FILE),
            "families_file": str(constants.FAMILIES_FILE),
        },
        "default_family": {
            "enabled": True,
            "name": constants.DEFAULT_FAMILY_NAME,
            "admin_password": constants.DEFAULT_FAMILY_PASSWORD,
        },
        "legacy_family": {
            "enabled": True,
            "name": constants.LEGACY_FAMILY_NAME,
            "admin_password": constants.LEGACY_FAMILY_PASSWORD,
        },
        "scheduler": {
            "enabled": True,
            "reset_time": constants.DEFAULT_RESET_TIME,
        },
        "auto_completers": list(constants.AUTO_COMPLETERS),
        "server": {
            "host": constants.SERVER_HOST,
            "port": constants.SERVER_PORT,
        },
    }


def load_config(config_file: Optional[Path] = None) -> dict:
    """
    Load configuration from config.json with sensible defaults

    Args:
        config_file: Override for constants.CONFIG_FILE

    Returns:
        dict: Configuration dictionary
    """
    if config_file is None:
        config_file = constants.CONFIG_FILE

    defaults = default_config()

    if not config_file.exists():
        _save_config(config_file, defaults)
        return defaults

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = json.load(f)

        # Merge with defaults to ensure all keys exist
        merged = _deep_merge(defaults, config)

        # Save merged config back if anything was added
        if merged != config:
            _save_config(config_file, merged)

        return merged
    except json.JSONDecodeError as e:
        logger.error(f"Config file corrupted: {e}. Using defaults.")
        return defaults
    except OSError as e:
        logger.error(f"Error loading config: {e}. Using defaults.")
        return defaults


def _deep_merge(defaults: dict, override: dict) -> dict:
    """
    Deep merge override config into defaults, preserving new defaults

    Args:
        defaults: Default configuration
        override: User-provided configuration

    Returns:
        dict: Merged configuration
    """
    result = defaults.copy()
    for key, value in override.items():
        if key in defaults and isinstance(defaults[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(defaults[key], value)
        else:
            result[key] = value
    return result


def _save_config(config_file: Path, config: dict):
    """
    Save configuration to file

    Args:
        config_file: Path to config file
        config: Configuration dictionary
    """
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=4, ensure_ascii=False)
    except OSError as e:
        logger.error(f"Failed to save config: {e}")
