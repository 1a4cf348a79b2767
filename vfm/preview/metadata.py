"""Metadata bar fields for the selected entry."""

from __future__ import annotations

import stat as stat_module
import time
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ..file_model import owner_label

TIME_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True)
class EntryMetadata:
    permissions: str
    owner: str
    created: float | None
    modified: float
    accessed: float


def permission_string(mode: int) -> str:
    """Return ``rwxr-xr-x`` style permission bits without the type letter."""
    return stat_module.filemode(mode)[1:]


def format_timestamp(value: float | None) -> str:
    if value is None:
        return "-"
    return time.strftime(TIME_FORMAT, time.localtime(value))


def read_metadata(path: Path) -> EntryMetadata | None:
    """Stat ``path`` without following symlinks; ``None`` when it vanished."""
    try:
        stat = path.lstat()
    except OSError:
        return None
    return EntryMetadata(
        permissions=permission_string(stat.st_mode),
        owner=owner_label(stat.st_uid, stat.st_gid),
        created=getattr(stat, "st_birthtime", None),
        modified=stat.st_mtime,
        accessed=stat.st_atime,
    )


def describe_metadata(
    metadata: EntryMetadata,
    show_permissions: bool = True,
    show_dates: bool = True,
    show_owner: bool = True,
    labels: Mapping[str, str] | None = None,
) -> str:
    """Join the enabled fields with two spaces.

    ``labels`` maps a field name to a glyph drawn before its value; a date
    with a glyph drops its word label.
    """
    glyphs = labels or {}

    def field(name: str, value: str) -> str:
        glyph = glyphs.get(name, "")
        return f"{glyph} {value}" if glyph else value

    parts: list[str] = []
    if show_permissions:
        parts.append(field("permissions", metadata.permissions))
    if show_owner:
        parts.append(field("owner", metadata.owner))
    if show_dates:
        for name, value in (
            ("created", metadata.created),
            ("modified", metadata.modified),
            ("accessed", metadata.accessed),
        ):
            stamp = format_timestamp(value)
            parts.append(field(name, stamp) if glyphs.get(name) else f"{name} {stamp}")
    return "  ".join(parts)
