"""Player configuration."""

from .io import load_config, save_config
from .settings import InteractionSettings, PlaybackSettings, PlayerConfig


__all__ = ["InteractionSettings", "PlaybackSettings", "PlayerConfig", "load_config", "save_config"]
