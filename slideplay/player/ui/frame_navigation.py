"""
Frame navigation helpers for player chrome: deep links, frame number label
and frame list.
"""

from __future__ import annotations

import logging

from slideplay.domain.presentation import Frame, Presentation
from slideplay.player.interaction.playback import Player
from slideplay.shared.exceptions import FrameNotFoundError


logger = logging.getLogger(__name__)


def frame_from_url_hash(presentation: Presentation, url_hash: str | None) -> Frame | None:
    """
    Resolve a URL fragment to a frame.

    ``"#3"`` is the third frame (1-based), ``"#intro"`` the frame with id
    "intro". Frame ids take precedence over numbers. A missing or unknown
    fragment selects the first frame.

    Returns
    -------
    Frame | None
        None only when the presentation has no frames
    """
    if not len(presentation):
        return None
    first = presentation.frames[0]

    ref = (url_hash or "").removeprefix("#").strip()
    if not ref:
        return first

    try:
        return presentation.frame_by_id(ref)
    except FrameNotFoundError:
        pass

    if ref.isdigit():
        number = int(ref)
        if 1 <= number <= len(presentation):
            return presentation.frames[number - 1]

    logger.warning(f"Unknown frame reference '#{ref}', starting from the first frame")
    return first


def url_hash_for_frame(frame: Frame) -> str:
    return f"#{frame.frame_id}"


def frame_number_label(player: Player) -> str:
    """Label like "3 / 12"."""
    total = len(player.presentation)
    if not total:
        return "0 / 0"
    return f"{player.current_frame_index + 1} / {total}"


def frame_list_entries(presentation: Presentation) -> list[tuple[int, str]]:
    """(index, title) of the frames shown in the frame list."""
    return [(frame.index, frame.title) for frame in presentation.iter_listed_frames()]


__all__ = ["frame_from_url_hash", "frame_list_entries", "frame_number_label", "url_hash_for_frame"]
