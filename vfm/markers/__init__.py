"""Marker store, scope-prefixed search, and JSON persistence."""

from __future__ import annotations

from .filter import SCOPE_BOTH, SCOPE_NAME, SCOPE_PATH, parse_scope, search_markers
from .persistence import load_markers, save_markers
from .store import MarkerStore
from .types import Marker, normalize_marker_path

__all__ = [
    "Marker",
    "MarkerStore",
    "SCOPE_BOTH",
    "SCOPE_NAME",
    "SCOPE_PATH",
    "load_markers",
    "normalize_marker_path",
    "parse_scope",
    "save_markers",
    "search_markers",
]
