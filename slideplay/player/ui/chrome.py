"""
Player chrome: window title, frame number, URL fragment and blank screen
cover, kept in sync with player events.

This module decouples the host window decorations from the player,
subscribing to events and updating a plain state object the host reads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from slideplay.player.interaction.events import Event, EventBus, EventType
from slideplay.player.interaction.playback import Player
from slideplay.player.ui.frame_navigation import frame_number_label, url_hash_for_frame


logger = logging.getLogger(__name__)


@dataclass
class ChromeState:
    """What the host window shows around the viewport."""

    title: str = ""
    frame_number: str = "0 / 0"
    url_hash: str = ""
    blank_screen_visible: bool = True


class PlayerChrome:
    """
    Controller for updating the host window in response to player events.
    """

    def __init__(self, player: Player, event_bus: EventBus):
        """
        Initialize the chrome controller.

        Parameters
        ----------
        player : Player
            Player whose state is shown
        event_bus : EventBus
            Event bus to subscribe to
        """
        self.player = player
        self.event_bus = event_bus
        self.state = ChromeState(
            title=player.presentation.title,
            blank_screen_visible=player.blank_screen_visible,
        )
        self._setup_subscriptions()
        logger.debug("PlayerChrome initialized")

    def _setup_subscriptions(self) -> None:
        self._subscriptions = [
            (EventType.STATE_CHANGE, self._on_state_change),
            (EventType.FRAME_CHANGE, self._on_frame_change),
            (EventType.BLANK_SCREEN_CHANGE, self._on_blank_screen_change),
        ]
        for event_type, callback in self._subscriptions:
            self.event_bus.subscribe(event_type, callback)

    def _on_state_change(self, event: Event) -> None:
        title = self.player.presentation.title
        self.state.title = title if event.payload.playing else f"{title} (Paused)"

    def _on_frame_change(self, event: Event) -> None:
        self.state.frame_number = frame_number_label(self.player)
        frame = self.player.current_frame
        if frame is not None:
            self.state.url_hash = url_hash_for_frame(frame)
        logger.info(f"Frame {self.state.frame_number}: {frame.title if frame else ''}")

    def _on_blank_screen_change(self, event: Event) -> None:
        self.state.blank_screen_visible = event.payload.visible

    def cleanup(self) -> None:
        """Unsubscribe from all events."""
        for event_type, callback in self._subscriptions:
            self.event_bus.unsubscribe(event_type, callback)


__all__ = ["ChromeState", "PlayerChrome"]
