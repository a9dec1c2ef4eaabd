"""
Presentation document loading.

Reads the storable form of a presentation (see ``Presentation.from_dict``)
from a YAML or JSON file. Document sanitization and SVG handling belong to
the host; this module only turns the frame data into domain objects.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from slideplay.domain.presentation import Presentation
from slideplay.shared.exceptions import PresentationLoadError, SlidePlayError


logger = logging.getLogger(__name__)

_YAML_SUFFIXES = (".yaml", ".yml")


def _read_document(path: Path) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in _YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except FileNotFoundError:
        raise PresentationLoadError("Presentation file not found", path=str(path)) from None
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PresentationLoadError(f"Cannot parse presentation: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise PresentationLoadError("Presentation document must be a mapping", path=str(path))
    return data


def load_presentation(path: str | Path) -> Presentation:
    """
    Load a presentation from a YAML or JSON document.

    Parameters
    ----------
    path : str | Path
        Document path; ``.yaml``/``.yml`` are parsed as YAML, anything else as JSON

    Returns
    -------
    Presentation
        The loaded presentation

    Raises
    ------
    PresentationLoadError
        If the file is missing, unparsable, or has malformed frame data
    """
    path = Path(path)
    data = _read_document(path)

    # Documents exported by the editor wrap the payload
    if "presentation" in data and isinstance(data["presentation"], dict):
        data = data["presentation"]

    try:
        presentation = Presentation.from_dict(data)
    except KeyError as e:
        raise PresentationLoadError("Missing required field", path=str(path), field_name=str(e)) from e
    except (SlidePlayError, AttributeError, TypeError, ValueError) as e:
        raise PresentationLoadError(f"Invalid presentation data: {e}", path=str(path)) from e

    logger.info(f"Loaded presentation '{presentation.title}' ({len(presentation)} frames) from {path}")
    return presentation


def save_presentation(presentation: Presentation, path: str | Path) -> Path:
    """Write the storable form of ``presentation`` as YAML or JSON (by suffix)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = presentation.to_dict()

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in _YAML_SUFFIXES:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)

    logger.info(f"Saved presentation '{presentation.title}' to {path}")
    return path


__all__ = ["load_presentation", "save_presentation"]
