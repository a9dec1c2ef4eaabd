"""Cross-cutting helpers: exceptions and geometry."""

from .exceptions import (
    ConfigurationError,
    FrameNotFoundError,
    InvalidArgumentError,
    PresentationLoadError,
    SlidePlayError,
)


__all__ = [
    "ConfigurationError",
    "FrameNotFoundError",
    "InvalidArgumentError",
    "PresentationLoadError",
    "SlidePlayError",
]
