"""
Custom exceptions for SlidePlay.

This module provides domain-specific exceptions for better error handling
and clearer error messages throughout the player.

Clean Architecture Note:
- This file belongs to the Shared layer (cross-cutting concerns)
- Can be imported by any layer (domain, infrastructure, player)
"""

from __future__ import annotations

from typing import Any


class SlidePlayError(Exception):
    """Base exception for all player-related errors."""

    pass


class InvalidArgumentError(SlidePlayError, ValueError):
    """Raised when an operation is called with an argument outside its contract.

    The call fails, but the playback session must survive it.
    """

    def __init__(self, message: str, argument: str | None = None, value: Any = None):
        """
        Initialize InvalidArgumentError.

        Parameters
        ----------
        message : str
            Error message
        argument : str | None
            Name of the offending argument
        value : Any
            The rejected value
        """
        self.argument = argument
        self.value = value

        full_message = message
        if argument:
            full_message = f"{full_message} ({argument}={value!r})"

        super().__init__(full_message)


class FrameNotFoundError(SlidePlayError, LookupError):
    """Raised when a frame reference cannot be resolved.

    Callers treat this as a no-op navigation: stale references (e.g. from a
    malformed deep link) are expected.
    """

    def __init__(self, ref: Any, total_frames: int | None = None):
        """
        Initialize FrameNotFoundError.

        Parameters
        ----------
        ref : Any
            The frame reference that failed to resolve (id, index or Frame)
        total_frames : int | None
            Number of frames in the presentation
        """
        self.ref = ref
        self.total_frames = total_frames

        full_message = f"No frame matches reference {ref!r}"
        if total_frames is not None:
            full_message = f"{full_message} (total: {total_frames})"

        super().__init__(full_message)


class PresentationLoadError(SlidePlayError):
    """Raised when a presentation document cannot be read or is malformed."""

    def __init__(self, message: str, path: str | None = None, field_name: str | None = None):
        """
        Initialize PresentationLoadError.

        Parameters
        ----------
        message : str
            Error message
        path : str | None
            Path of the presentation document
        field_name : str | None
            Name of the malformed field
        """
        self.path = path
        self.field_name = field_name

        full_message = message
        if field_name:
            full_message = f"{full_message} (field: {field_name})"
        if path:
            full_message = f"{full_message} (path: {path})"

        super().__init__(full_message)


class ConfigurationError(SlidePlayError):
    """Raised when player configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        field_name: str | None = None,
    ):
        """
        Initialize ConfigurationError.

        Parameters
        ----------
        message : str
            Error message
        config_path : str | None
            Path to the config file
        field_name : str | None
            Name of the invalid/missing config field
        """
        self.config_path = config_path
        self.field_name = field_name

        full_message = message
        if field_name:
            full_message = f"{full_message} (field: {field_name})"
        if config_path:
            full_message = f"{full_message} (config: {config_path})"

        super().__init__(full_message)


__all__ = [
    "SlidePlayError",
    "InvalidArgumentError",
    "FrameNotFoundError",
    "PresentationLoadError",
    "ConfigurationError",
]
