"""Filesystem entry model: immutable per-listing snapshots.

This package contains non-UI primitives:
- the ``Entry`` value and its kind constants
- directory scanning with hidden filtering and stable sort order
"""

from __future__ import annotations

from .types import KIND_DIRECTORY, KIND_FILE, KIND_OTHER, KIND_SYMLINK, Entry
from .fs import (
    count_directory_entries,
    entry_from_path,
    list_directory,
    nearest_existing_directory,
    owner_label,
    sort_entries,
)

__all__ = [
    "Entry",
    "KIND_FILE",
    "KIND_DIRECTORY",
    "KIND_SYMLINK",
    "KIND_OTHER",
    "list_directory",
    "entry_from_path",
    "count_directory_entries",
    "nearest_existing_directory",
    "owner_label",
    "sort_entries",
]
