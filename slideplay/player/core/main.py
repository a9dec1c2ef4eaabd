"""
SlidePlay - Main Entry Point.

This is the CLI entry point that uses tyro for argument parsing. It plays a
presentation headless, logging frame changes and the per-layer transforms
a renderer would receive.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import tyro

from slideplay.infrastructure.scheduler import ManualClock
from slideplay.player.core.app import SlidePlayApp
from slideplay.player.rendering.surface import LoggingSurface
from slideplay.shared.exceptions import SlidePlayError


logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """
    Setup logging configuration.

    Parameters
    ----------
    level : str
        Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(
    presentation: Annotated[Path, tyro.conf.Positional],
    frame: str | None = None,
    config: Path | None = None,
    log_level: str = "INFO",
    simulate: float | None = None,
    timeout: float | None = None,
) -> None:
    """
    Play an SVG presentation headless.

    Parameters
    ----------
    presentation : Path
        Presentation file (YAML or JSON)
    frame : str | None
        Start frame as a URL fragment: "#3" (1-based number) or "#intro" (frame id)
    config : Path | None
        Player configuration YAML file
    log_level : str
        Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)
    simulate : float | None
        Run on a simulated clock for this many milliseconds instead of real time
    timeout : float | None
        Stop the real-time loop after this many seconds

    Examples
    --------
    Play until the last auto-advancing frame:
        slideplay talk.yaml

    Start at a frame and fast-forward one minute:
        slideplay talk.yaml --frame "#conclusion" --simulate 60000

    Debug logging:
        slideplay talk.yaml --log-level DEBUG
    """
    setup_logging(log_level)

    logger.info("=== SlidePlay ===")
    logger.info(f"Presentation: {presentation}")
    if config is not None:
        logger.info(f"Config: {config}")

    clock = ManualClock() if simulate is not None else None
    try:
        app = SlidePlayApp.from_files(presentation, config, surface=LoggingSurface(), clock=clock)
    except SlidePlayError as e:
        logger.error(f"Cannot start: {e}")
        raise SystemExit(1) from e

    app.start(frame)
    try:
        if simulate is not None:
            app.simulate(simulate)
        else:
            app.run(timeout_s=timeout)
    finally:
        app.stop()

    logger.info(f"Stopped at frame {app.chrome.state.frame_number} ({app.player.state.value})")


def cli() -> None:
    """Entry point for the installed script."""
    tyro.cli(main)


if __name__ == "__main__":
    cli()
