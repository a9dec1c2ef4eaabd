"""
Configuration dataclasses for the SlidePlay player.

Interaction constants (drag threshold, zoom step, ...) are fixed for a
session; they are read by the UI controller and the viewport at
construction.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from typing import Any

from slideplay.shared.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


@dataclass
class InteractionSettings:
    """Gesture recognition constants."""

    scale_factor: float = 1.05  # Zoom step for keyboard and wheel
    rotate_step_deg: float = 5.0  # Rotation step for keyboard and wheel
    drag_button: int = 0  # Left button
    drag_threshold_px: float = 5.0  # Displacement that confirms a drag
    wheel_timeout_ms: float = 200.0  # Inactivity that ends a wheel gesture
    snap_angle_deg: float = 10.0  # Rotation snap while the snap modifier is held
    clip_border_px: float = 5.0  # Edge grab distance for clip editing

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.scale_factor <= 1.0:
            raise ConfigurationError("scale_factor must be greater than 1", field_name="scale_factor")
        for name in ("drag_threshold_px", "wheel_timeout_ms", "clip_border_px"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be non-negative", field_name=name)
        if self.snap_angle_deg <= 0:
            raise ConfigurationError("snap_angle_deg must be positive", field_name="snap_angle_deg")

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for easy serialization."""
        return asdict(self)


@dataclass
class PlaybackSettings:
    """Player state machine settings."""

    history_limit: int = 100  # Navigation history entries kept for "previous"
    frame_interval_ms: float = 1000.0 / 60.0  # Tick period of the real-time loop
    start_with_blank_screen: bool = True  # Cover the viewport until the first paint

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.history_limit < 1:
            raise ConfigurationError("history_limit must be at least 1", field_name="history_limit")
        if self.frame_interval_ms <= 0:
            raise ConfigurationError("frame_interval_ms must be positive", field_name="frame_interval_ms")

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for easy serialization."""
        return asdict(self)


@dataclass
class PlayerConfig:
    """Main player configuration."""

    # Viewport geometry
    viewport_width: float = 1280.0
    viewport_height: float = 720.0

    # Authoring tool mode: full manipulation rights, no navigation bindings
    edit_mode: bool = False

    # Sub-configurations
    interaction: InteractionSettings = field(default_factory=InteractionSettings)
    playback: PlaybackSettings = field(default_factory=PlaybackSettings)

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ConfigurationError("Viewport size must be positive", field_name="viewport_width/height")

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        return {
            "viewport_width": self.viewport_width,
            "viewport_height": self.viewport_height,
            "edit_mode": self.edit_mode,
            "interaction": self.interaction.to_dict(),
            "playback": self.playback.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlayerConfig:
        """
        Build a config from a dictionary, ignoring unknown keys.

        Raises
        ------
        ConfigurationError
            If a value has the wrong type or fails validation
        """

        def _pick(target: type, values: dict[str, Any] | None) -> dict[str, Any]:
            values = values or {}
            known = {f.name for f in fields(target)}
            unknown = set(values) - known
            if unknown:
                logger.warning(f"Ignoring unknown {target.__name__} keys: {sorted(unknown)}")
            return {k: v for k, v in values.items() if k in known}

        try:
            top = _pick(cls, {k: v for k, v in data.items() if k not in ("interaction", "playback")})
            return cls(
                interaction=InteractionSettings(**_pick(InteractionSettings, data.get("interaction"))),
                playback=PlaybackSettings(**_pick(PlaybackSettings, data.get("playback"))),
                **top,
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


__all__ = ["InteractionSettings", "PlaybackSettings", "PlayerConfig"]
