"""Marker value type."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Marker:
    """A named bookmark; ``path`` need not exist."""

    name: str
    path: Path


def normalize_marker_path(raw_path: str | Path) -> Path:
    """Expand ``~`` and make ``raw_path`` absolute without resolving symlinks."""
    return Path(os.path.abspath(os.path.expanduser(str(raw_path).strip())))
