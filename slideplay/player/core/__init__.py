"""Application wiring and command-line entry point."""

from .app import SlidePlayApp


__all__ = ["SlidePlayApp"]
