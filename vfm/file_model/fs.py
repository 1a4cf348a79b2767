"""Filesystem scanning into sorted ``Entry`` snapshots."""

from __future__ import annotations

import grp
import os
import pwd
from pathlib import Path

from .types import KIND_DIRECTORY, KIND_SYMLINK, Entry, kind_from_mode


def owner_label(uid: int, gid: int) -> str:
    """Return ``user:group`` using account names when they resolve."""
    user = str(uid)
    group = str(gid)
    try:
        user = pwd.getpwuid(uid).pw_name
    except (KeyError, OverflowError):
        pass
    try:
        group = grp.getgrgid(gid).gr_name
    except (KeyError, OverflowError):
        pass
    return f"{user}:{group}"


def entry_from_path(path: Path) -> Entry | None:
    """Build an ``Entry`` for ``path`` or ``None`` when it vanished."""
    try:
        stat = path.lstat()
    except OSError:
        return None
    return _entry_from_stat(path.name or str(path), path, stat)


def _entry_from_stat(name: str, path: Path, stat: os.stat_result) -> Entry:
    kind = kind_from_mode(stat.st_mode)
    target_is_dir = False
    if kind == KIND_SYMLINK:
        try:
            target_is_dir = path.is_dir()
        except OSError:
            target_is_dir = False
    return Entry(
        name=name,
        path=path,
        kind=kind,
        size_bytes=None if kind == KIND_DIRECTORY else int(stat.st_size),
        permissions=int(stat.st_mode),
        modified_time=float(stat.st_mtime),
        owner=owner_label(stat.st_uid, stat.st_gid),
        target_is_dir=target_is_dir,
    )


def sort_entries(entries: list[Entry]) -> list[Entry]:
    """Sort directories first, then names case-insensitively."""
    return sorted(entries, key=lambda item: (not item.is_dir, item.name.casefold(), item.name))


def list_directory(directory: Path, show_hidden: bool) -> tuple[list[Entry], OSError | None]:
    """List ``directory`` into sorted entries.

    Returns ``(entries, scan_error)``. ``scan_error`` is set when the directory
    itself cannot be scanned. Children that vanish between scan and stat are
    skipped.
    """
    entries: list[Entry] = []
    try:
        with os.scandir(directory) as children:
            for child in children:
                name = child.name
                if not show_hidden and name.startswith("."):
                    continue
                try:
                    stat = child.stat(follow_symlinks=False)
                except OSError:
                    continue
                entries.append(_entry_from_stat(name, Path(child.path), stat))
    except OSError as exc:
        return [], exc

    return sort_entries(entries), None


def count_directory_entries(directory: Path, show_hidden: bool = True) -> int:
    """Count direct children of ``directory`` without building entries."""
    count = 0
    with os.scandir(directory) as children:
        for child in children:
            if not show_hidden and child.name.startswith("."):
                continue
            count += 1
    return count


def nearest_existing_directory(path: Path) -> Path | None:
    """Walk up from ``path`` to the nearest ancestor that is a listable directory."""
    candidate = path
    while True:
        if candidate.is_dir() and os.access(candidate, os.R_OK | os.X_OK):
            return candidate
        parent = candidate.parent
        if parent == candidate:
            return None
        candidate = parent
