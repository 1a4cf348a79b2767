"""Immutable entry snapshot types for one directory listing."""

from __future__ import annotations

import stat as stat_module
from dataclasses import dataclass
from pathlib import Path

KIND_FILE = "file"
KIND_DIRECTORY = "directory"
KIND_SYMLINK = "symlink"
KIND_OTHER = "other"


@dataclass(frozen=True)
class Entry:
    """One filesystem object as seen when its directory was listed.

    ``permissions`` holds raw ``st_mode`` bits. ``target_is_dir`` is only
    meaningful for symlinks and tells whether the link points at a directory.
    """

    name: str
    path: Path
    kind: str
    size_bytes: int | None = None
    permissions: int = 0
    modified_time: float | None = None
    owner: str = ""
    target_is_dir: bool = False

    @property
    def is_dir(self) -> bool:
        """Return whether navigation should descend into this entry."""
        return self.kind == KIND_DIRECTORY or (self.kind == KIND_SYMLINK and self.target_is_dir)

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")

    @property
    def is_special(self) -> bool:
        """Return whether the entry is a fifo, socket, or device node."""
        return self.kind == KIND_OTHER


def kind_from_mode(mode: int) -> str:
    """Map ``st_mode`` bits to an entry kind."""
    if stat_module.S_ISLNK(mode):
        return KIND_SYMLINK
    if stat_module.S_ISDIR(mode):
        return KIND_DIRECTORY
    if stat_module.S_ISREG(mode):
        return KIND_FILE
    return KIND_OTHER
