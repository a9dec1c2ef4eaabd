"""SlidePlay: playback core for zooming SVG presentations."""

__version__ = "0.1.0"
