"""
Presentation and frame entities.

A presentation is an ordered sequence of frames over a fixed SVG document
split into layers. Frames are authored elsewhere; during playback they are
read-only.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from slideplay.domain.camera import CameraState
from slideplay.domain.timing import TimingFunction
from slideplay.shared.exceptions import FrameNotFoundError, InvalidArgumentError


logger = logging.getLogger(__name__)

DEFAULT_LAYER = "default"


@dataclass
class Frame:
    """
    One stop of the presentation: a camera pose per layer plus transition metadata.

    Attributes
    ----------
    frame_id : str
        Stable identifier (used by deep links)
    title : str
        Human-readable title (frame list, window title)
    camera_states : dict[str, CameraState]
        Authored camera state per layer id
    layer_follows_previous : dict[str, bool]
        Per layer: inherit the previous frame's camera state instead of the
        authored one
    duration_ms : float
        Transition duration when arriving at this frame
    timing_function : TimingFunction
        Transition easing when arriving at this frame
    timeout_enabled : bool
        Auto-advance to the next frame after ``timeout_seconds``
    timeout_seconds : float
        Auto-advance delay
    show_in_frame_list : bool
        Whether the frame appears in the table of contents
    index : int
        Position in the presentation (assigned by Presentation)
    """

    frame_id: str
    title: str = ""
    camera_states: dict[str, CameraState] = field(default_factory=dict)
    layer_follows_previous: dict[str, bool] = field(default_factory=dict)
    duration_ms: float = 1000.0
    timing_function: TimingFunction = TimingFunction.EASE
    timeout_enabled: bool = False
    timeout_seconds: float = 5.0
    show_in_frame_list: bool = True
    index: int = -1

    def __post_init__(self):
        """Validate transition settings."""
        self.timing_function = TimingFunction.from_name(self.timing_function)
        if self.duration_ms < 0:
            raise InvalidArgumentError(
                "Transition duration must be non-negative", argument="duration_ms", value=self.duration_ms
            )
        if self.timeout_seconds < 0:
            raise InvalidArgumentError(
                "Timeout must be non-negative", argument="timeout_seconds", value=self.timeout_seconds
            )

    @property
    def timeout_ms(self) -> float:
        return self.timeout_seconds * 1000.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a storable dictionary."""
        return {
            "id": self.frame_id,
            "title": self.title,
            "duration_ms": self.duration_ms,
            "timing_function": self.timing_function.value,
            "timeout_enabled": self.timeout_enabled,
            "timeout_seconds": self.timeout_seconds,
            "show_in_frame_list": self.show_in_frame_list,
            "layers": {
                layer: {
                    "camera": state.to_dict(),
                    "follows_previous": self.layer_follows_previous.get(layer, False),
                }
                for layer, state in self.camera_states.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Frame:
        """Build a frame from its storable dictionary."""
        camera_states: dict[str, CameraState] = {}
        follows: dict[str, bool] = {}
        for layer, layer_data in (data.get("layers") or {}).items():
            layer_data = layer_data or {}
            camera_states[layer] = CameraState.from_dict(layer_data.get("camera") or {})
            follows[layer] = bool(layer_data.get("follows_previous", False))

        return cls(
            frame_id=str(data["id"]),
            title=str(data.get("title", "")),
            camera_states=camera_states,
            layer_follows_previous=follows,
            duration_ms=float(data.get("duration_ms", 1000.0)),
            timing_function=TimingFunction.from_name(data.get("timing_function", "ease")),
            timeout_enabled=bool(data.get("timeout_enabled", False)),
            timeout_seconds=float(data.get("timeout_seconds", 5.0)),
            show_in_frame_list=bool(data.get("show_in_frame_list", True)),
        )


_CAPABILITY_FLAGS = (
    "enable_mouse_translation",
    "enable_mouse_zoom",
    "enable_mouse_rotation",
    "enable_mouse_navigation",
    "enable_keyboard_navigation",
    "enable_keyboard_zoom",
    "enable_keyboard_rotation",
)


@dataclass
class Presentation:
    """
    Ordered frames plus global interaction toggles.

    The capability flags are read by the UI controller as gates; they are
    never mutated during playback.
    """

    frames: list[Frame] = field(default_factory=list)
    layers: list[str] = field(default_factory=lambda: [DEFAULT_LAYER])
    title: str = "Untitled"

    enable_mouse_translation: bool = True
    enable_mouse_zoom: bool = True
    enable_mouse_rotation: bool = True
    enable_mouse_navigation: bool = True
    enable_keyboard_navigation: bool = True
    enable_keyboard_zoom: bool = True
    enable_keyboard_rotation: bool = True

    def __post_init__(self):
        """Assign frame indices and make sure every frame layer is declared."""
        ids = set()
        for index, frame in enumerate(self.frames):
            frame.index = index
            if frame.frame_id in ids:
                raise InvalidArgumentError("Duplicate frame id", argument="frame_id", value=frame.frame_id)
            ids.add(frame.frame_id)
            for layer in frame.camera_states:
                if layer not in self.layers:
                    self.layers.append(layer)

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def last_index(self) -> int:
        return len(self.frames) - 1

    def frame_at(self, index: int) -> Frame:
        """Frame at a 0-based index (no negative indexing)."""
        if 0 <= index < len(self.frames):
            return self.frames[index]
        raise FrameNotFoundError(index, total_frames=len(self.frames))

    def frame_by_id(self, frame_id: str) -> Frame:
        for frame in self.frames:
            if frame.frame_id == frame_id:
                return frame
        raise FrameNotFoundError(frame_id, total_frames=len(self.frames))

    def find_frame(self, ref: Frame | int | str) -> Frame:
        """
        Resolve a frame by object, index, or id.

        Strings are first matched as ids; a purely numeric string that is not
        an id is read as an index.

        Raises
        ------
        FrameNotFoundError
            If nothing matches
        """
        if isinstance(ref, Frame):
            if 0 <= ref.index < len(self.frames) and self.frames[ref.index] is ref:
                return ref
            raise FrameNotFoundError(ref.frame_id, total_frames=len(self.frames))

        if isinstance(ref, bool):
            raise FrameNotFoundError(ref, total_frames=len(self.frames))

        if isinstance(ref, int):
            return self.frame_at(ref)

        if isinstance(ref, str):
            try:
                return self.frame_by_id(ref)
            except FrameNotFoundError:
                if ref.strip().isdigit():
                    return self.frame_at(int(ref))
                raise

        raise FrameNotFoundError(ref, total_frames=len(self.frames))

    def camera_states_for(self, frame: Frame) -> dict[str, CameraState]:
        """
        Effective camera state of every layer at ``frame``.

        Layers flagged ``layer_follows_previous`` (or not authored at all)
        inherit the state resolved for the previous frame; the first frame
        falls back to the identity camera.
        """
        resolved: dict[str, CameraState] = {}
        for layer in self.layers:
            resolved[layer] = self._resolve_layer(frame.index, layer)
        return resolved

    def _resolve_layer(self, index: int, layer: str) -> CameraState:
        for i in range(index, -1, -1):
            candidate = self.frames[i]
            follows = candidate.layer_follows_previous.get(layer, False)
            if layer in candidate.camera_states and not (follows and i > 0):
                return candidate.camera_states[layer]
        return CameraState()

    def capabilities(self) -> dict[str, bool]:
        return {name: getattr(self, name) for name in _CAPABILITY_FLAGS}

    def to_dict(self) -> dict[str, Any]:
        """Convert to the storable dictionary consumed by ``from_dict``."""
        data: dict[str, Any] = {
            "title": self.title,
            "layers": list(self.layers),
            "frames": [frame.to_dict() for frame in self.frames],
        }
        data.update(self.capabilities())
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Presentation:
        """Build a presentation from its storable dictionary."""
        frames = [Frame.from_dict(item) for item in data.get("frames") or []]
        flags = {name: bool(data[name]) for name in _CAPABILITY_FLAGS if name in data}
        layers = list(data.get("layers") or [DEFAULT_LAYER])
        presentation = cls(
            frames=frames,
            layers=layers,
            title=str(data.get("title", "Untitled")),
            **flags,
        )
        logger.debug(
            f"Presentation '{presentation.title}' built with "
            f"{len(presentation.frames)} frames and {len(presentation.layers)} layers"
        )
        return presentation

    def iter_listed_frames(self) -> Iterable[Frame]:
        return (frame for frame in self.frames if frame.show_in_frame_list)


__all__ = ["DEFAULT_LAYER", "Frame", "Presentation"]
