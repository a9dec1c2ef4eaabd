"""
Main player application class.

This module provides the SlidePlayApp class that wires the viewport, the
player and the UI controller around one event bus and one scheduler.
"""

from __future__ import annotations

import logging
from pathlib import Path

from slideplay.domain.presentation import Presentation
from slideplay.infrastructure.presentation_io import load_presentation
from slideplay.infrastructure.scheduler import Clock, Scheduler
from slideplay.player.config.io import load_config
from slideplay.player.config.settings import PlayerConfig
from slideplay.player.interaction.controller import UIController
from slideplay.player.interaction.events import EventBus
from slideplay.player.interaction.playback import Player
from slideplay.player.rendering.surface import RenderSurface
from slideplay.player.rendering.viewport import Viewport
from slideplay.player.ui.chrome import PlayerChrome
from slideplay.player.ui.frame_navigation import frame_from_url_hash


logger = logging.getLogger(__name__)


class SlidePlayApp:
    """
    Main player application.

    Orchestrates the playback core for one presentation:
    - Scheduler: timers and animation frames on a single thread
    - Viewport: per-layer camera state and transitions
    - Player: frame navigation and auto-advance
    - UIController: gesture recognition over raw input
    - PlayerChrome: title, frame number and blank screen state
    """

    def __init__(
        self,
        config: PlayerConfig,
        presentation: Presentation,
        surface: RenderSurface | None = None,
        clock: Clock | None = None,
    ):
        """
        Initialize the application.

        Parameters
        ----------
        config : PlayerConfig
            Player configuration
        presentation : Presentation
            Presentation to play
        surface : RenderSurface | None
            Receiver of the per-layer transforms (discarded when None)
        clock : Clock | None
            Time source; a monotonic clock when None
        """
        self.config = config
        self.presentation = presentation

        # Event bus for component communication
        self.event_bus = EventBus(name="player")
        self.scheduler = Scheduler(clock, name="player")

        self.viewport = Viewport(
            presentation,
            self.scheduler,
            surface=surface,
            width=config.viewport_width,
            height=config.viewport_height,
            clip_border_px=config.interaction.clip_border_px,
        )
        self.player = Player(self.viewport, presentation, self.scheduler, self.event_bus, config.playback)
        self.controller = UIController(
            self.player, self.event_bus, config.interaction, edit_mode=config.edit_mode
        )
        self.chrome = PlayerChrome(self.player, self.event_bus)

        logger.info(
            f"SlidePlay ready: '{presentation.title}' "
            f"({len(presentation)} frames, {len(presentation.layers)} layers)"
        )

    @classmethod
    def from_files(
        cls,
        presentation_path: str | Path,
        config_path: str | Path | None = None,
        surface: RenderSurface | None = None,
        clock: Clock | None = None,
    ) -> SlidePlayApp:
        """Load a presentation (and optionally a player config) from disk."""
        config = load_config(config_path) if config_path is not None else PlayerConfig()
        presentation = load_presentation(presentation_path)
        return cls(config, presentation, surface=surface, clock=clock)

    def start(self, url_hash: str | None = None) -> None:
        """
        Show the first frame (or the one named by ``url_hash``) and start playing.
        """
        frame = frame_from_url_hash(self.presentation, url_hash)
        if frame is not None:
            self.player.play_from_frame(frame)
        else:
            logger.warning("Presentation has no frames")

        self.viewport.repaint()
        self.player.disable_blank_screen()

    def resize(self, width: float, height: float, x: float | None = None, y: float | None = None) -> None:
        """Host window resize."""
        self.viewport.resize(width, height, x, y)

    def run(self, timeout_s: float | None = None) -> None:
        """Run in real time until nothing is pending, or ``timeout_s`` elapses."""
        self.scheduler.run(self.config.playback.frame_interval_ms, until_idle=True, timeout_s=timeout_s)

    def simulate(self, duration_ms: float) -> None:
        """Advance a manual clock by ``duration_ms``, running due callbacks."""
        self.scheduler.advance(duration_ms, self.config.playback.frame_interval_ms)

    def stop(self) -> None:
        self.scheduler.stop()
        self.chrome.cleanup()


__all__ = ["SlidePlayApp"]
