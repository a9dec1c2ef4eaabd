"""
Configuration import/export for player settings.

Player settings are stored as YAML files next to the presentation, so a
kiosk or presenter setup can be reproduced.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from slideplay.player.config.settings import PlayerConfig
from slideplay.shared.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


def save_config(config: PlayerConfig, path: str | Path) -> Path:
    """
    Export player configuration to a YAML file.

    Parameters
    ----------
    config : PlayerConfig
        Configuration to export
    path : str | Path
        Destination file

    Returns
    -------
    Path
        Path of the written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Exported player config to {path}")
    return path


def load_config(path: str | Path) -> PlayerConfig:
    """
    Import player configuration from a YAML file.

    Raises
    ------
    ConfigurationError
        If the file is missing, unparsable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError("Config file not found", config_path=str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse config: {e}", config_path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Config must be a mapping", config_path=str(path))

    try:
        config = PlayerConfig.from_dict(data)
    except ConfigurationError as e:
        raise ConfigurationError(
            "Invalid player configuration", config_path=str(path), field_name=e.field_name
        ) from e

    logger.info(f"Imported player config from {path}")
    return config


__all__ = ["load_config", "save_config"]
