"""File operation executor and the cut/copy clipboard."""

from __future__ import annotations

from .clipboard import COPY, CUT, Clipboard, copy_mark, cut
from .executor import copy_path_to_clipboard_text, create_dir, create_file, delete, paste, rename
from .names import next_free_copy_target, validate_name

__all__ = [
    "COPY",
    "CUT",
    "Clipboard",
    "copy_mark",
    "copy_path_to_clipboard_text",
    "create_dir",
    "create_file",
    "cut",
    "delete",
    "next_free_copy_target",
    "paste",
    "rename",
    "validate_name",
]
