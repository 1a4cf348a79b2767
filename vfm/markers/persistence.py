"""Durable JSON storage for markers.

The file is an ordered list of ``{"name": ..., "path": ...}`` objects. Loading
is defensive; saving writes a temp file and renames it over the old one.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from platformdirs import user_config_dir

from .types import Marker

LOGGER = logging.getLogger(__name__)

APP_NAME = "vfm"
MARKERS_FILENAME = "markers.json"
DEFAULT_MARKERS_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / MARKERS_FILENAME
MARKERS_PATH = DEFAULT_MARKERS_PATH


def load_markers(path: Path | None = None) -> tuple[list[Marker], str | None]:
    """Load markers in stored order.

    Returns ``(markers, warning)``. A missing file is an empty store without a
    warning; an unreadable or malformed file is an empty store with one.
    Malformed items and duplicate names are dropped.
    """
    marker_path = MARKERS_PATH if path is None else path
    if not marker_path.exists():
        return [], None
    try:
        data = json.loads(marker_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        LOGGER.warning("could not load markers from %s: %s", marker_path, exc)
        return [], f"markers not loaded: {exc}"
    if not isinstance(data, list):
        LOGGER.warning("markers file %s is not a list", marker_path)
        return [], "markers not loaded: unexpected file format"

    markers: list[Marker] = []
    seen: set[str] = set()
    for item in data:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        raw_path = item.get("path")
        if not isinstance(name, str) or not name.strip() or not isinstance(raw_path, str) or not raw_path:
            continue
        name = name.strip()
        if name in seen:
            continue
        seen.add(name)
        markers.append(Marker(name=name, path=Path(raw_path)))
    return markers, None


def save_markers(markers: list[Marker] | tuple[Marker, ...], path: Path | None = None) -> None:
    """Write the full marker list atomically. Raises ``OSError`` on failure."""
    marker_path = MARKERS_PATH if path is None else path
    serialized = [{"name": marker.name, "path": str(marker.path)} for marker in markers]
    marker_path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=".markers-", suffix=".tmp", dir=marker_path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(json.dumps(serialized, indent=2) + "\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, marker_path)
    except OSError:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        raise
