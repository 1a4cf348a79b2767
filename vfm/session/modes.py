"""Mode variants of the input state machine.

Exactly one mode is active. Every mode that completes later carries the data
it needs to finish or abort, so nothing leaks from one action into the next.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

PREFIX_ADD = "add"
PREFIX_SETTINGS = "settings"
PREFIX_VIEW = "view"
PREFIX_COPY = "copy"
PREFIX_DELETE = "delete"
PREFIX_OPEN_WITH = "open_with_quick"

ADD_FILE = "add_file"
ADD_DIR = "add_dir"
RENAME = "rename"
SEARCH_ENTRIES = "search_entries"
MARKER_RENAME = "marker_rename"
MARKER_EDIT_PATH = "marker_edit_path"
MARKER_ADD = "marker_add"
MARKER_ADD_PATH = "marker_add_path"
MARKER_JUMP = "marker_jump"
MARKER_SEARCH = "marker_search"

PROMPTS: dict[str, str] = {
    ADD_FILE: "new file",
    ADD_DIR: "new directory",
    RENAME: "rename to",
    SEARCH_ENTRIES: "search",
    MARKER_RENAME: "rename marker",
    MARKER_EDIT_PATH: "marker path",
    MARKER_ADD: "marker name",
    MARKER_ADD_PATH: "marker path",
    MARKER_JUMP: "jump to marker",
    MARKER_SEARCH: "search markers",
}


@dataclass(frozen=True)
class Normal:
    pass


@dataclass(frozen=True)
class PendingPrefix:
    kind: str


@dataclass(frozen=True)
class MarkerList:
    cursor_index: int = 0
    search_buffer: str | None = None


@dataclass(frozen=True)
class TextInput:
    """Line editor state.

    ``target_name`` names the marker being edited, ``target_path`` the entry
    being renamed. ``resume`` is the marker list to return to, if any.
    ``previous_filter`` restores the pane filter when a search is aborted.
    """

    purpose: str
    buffer: str = ""
    origin_pane: int = 0
    target_name: str | None = None
    target_path: Path | None = None
    resume: MarkerList | None = None
    previous_filter: str = ""

    @property
    def prompt(self) -> str:
        return PROMPTS.get(self.purpose, self.purpose)


@dataclass(frozen=True)
class ConfirmDelete:
    target_paths: tuple[Path, ...]
    origin_pane: int = 0


@dataclass(frozen=True)
class OpenWithPicker:
    target: Path
    cwd: Path
    filter_buffer: str = ""
    cursor_index: int = 0


@dataclass(frozen=True)
class ShellSuspended:
    cwd: Path


Mode = Normal | PendingPrefix | TextInput | ConfirmDelete | MarkerList | OpenWithPicker | ShellSuspended
