"""One side of the dual-pane view: directory snapshot, cursor, and view flags.

The cursor always refers to a visible entry or is ``None`` when the pane has
nothing to show. Every mutation that changes ``entries`` re-clamps it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .file_model import Entry, list_directory, nearest_existing_directory
from .search import CompileError, Matcher, compile_matcher, filter_candidates

LOGGER = logging.getLogger(__name__)

COLUMN_PERMISSIONS = "permissions"
COLUMN_OWNER = "owner"


class Pane:
    """Listing state for one directory plus cursor, marks, and filter."""

    def __init__(self, directory: Path, show_hidden: bool = True) -> None:
        self.current_directory = Path(directory).expanduser().absolute()
        self.show_hidden = show_hidden
        self.show_permissions_column = False
        self.show_owner_column = False
        self.listing: list[Entry] = []
        self.entries: list[Entry] = []
        self.cursor_index: int | None = None
        self.marked: set[Path] = set()
        self.error: OSError | None = None
        self.filter_matcher: Matcher | CompileError | None = None
        self.refresh()

    @property
    def selected_entry(self) -> Entry | None:
        if self.cursor_index is None:
            return None
        return self.entries[self.cursor_index]

    @property
    def filter_pattern(self) -> str:
        if self.filter_matcher is None:
            return ""
        return self.filter_matcher.pattern

    def _apply_filter(self) -> None:
        if self.filter_matcher is None:
            self.entries = list(self.listing)
        else:
            self.entries = filter_candidates(self.filter_matcher, self.listing, key=lambda entry: entry.name)

    def _place_cursor(self, name: str | None, fallback_index: int | None) -> None:
        if not self.entries:
            self.cursor_index = None
            return
        if name is not None:
            for idx, entry in enumerate(self.entries):
                if entry.name == name:
                    self.cursor_index = idx
                    return
        if fallback_index is None:
            self.cursor_index = 0
            return
        self.cursor_index = max(0, min(fallback_index, len(self.entries) - 1))

    def refresh(self, select_name: str | None = None) -> None:
        """Re-list the current directory.

        The cursor stays on ``select_name`` (default: the entry under the
        cursor) when it is still listed, otherwise it is clamped.
        """
        previous = self.selected_entry
        previous_index = self.cursor_index
        if select_name is None and previous is not None:
            select_name = previous.name

        listing, error = list_directory(self.current_directory, self.show_hidden)
        if error is not None:
            LOGGER.debug("listing %s failed: %s", self.current_directory, error)
        self.listing = listing
        self.error = error
        self.marked &= {entry.path for entry in listing}
        self._apply_filter()
        self._place_cursor(select_name, previous_index)

    def change_directory(self, directory: Path, select_name: str | None = None) -> None:
        """Switch to ``directory``, dropping marks and any search filter."""
        self.current_directory = Path(directory).expanduser().absolute()
        self.marked.clear()
        self.filter_matcher = None
        self.cursor_index = None
        self.refresh(select_name=select_name)

    def enter_directory(self, path: Path | None = None) -> Path | None:
        """Descend into ``path`` (default: the cursor entry).

        Returns the path to hand to the system default opener when the target
        is not a directory, otherwise ``None``.
        """
        if path is None:
            entry = self.selected_entry
            if entry is None:
                return None
            if not entry.is_dir:
                return entry.path
            path = entry.path
        elif not Path(path).is_dir():
            return Path(path)
        self.change_directory(path)
        return None

    def go_to_parent(self) -> bool:
        """Move to the parent directory with the cursor on the directory just left."""
        parent = self.current_directory.parent
        if parent == self.current_directory:
            return False
        left_name = self.current_directory.name
        self.change_directory(parent, select_name=left_name)
        return True

    def move_cursor(self, delta: int) -> None:
        if self.cursor_index is None:
            return
        self.cursor_index = max(0, min(self.cursor_index + delta, len(self.entries) - 1))

    def select_name(self, name: str) -> bool:
        for idx, entry in enumerate(self.entries):
            if entry.name == name:
                self.cursor_index = idx
                return True
        return False

    def toggle_hidden(self) -> None:
        self.show_hidden = not self.show_hidden
        self.refresh()

    def toggle_column(self, column: str) -> None:
        if column == COLUMN_PERMISSIONS:
            self.show_permissions_column = not self.show_permissions_column
        elif column == COLUMN_OWNER:
            self.show_owner_column = not self.show_owner_column
        else:
            raise ValueError(f"unknown column: {column}")

    def set_filter(self, pattern: str) -> Matcher | CompileError:
        """Filter visible entries by a case-insensitive pattern on names."""
        selected = self.selected_entry
        matcher = compile_matcher(pattern)
        self.filter_matcher = matcher if pattern else None
        self._apply_filter()
        self._place_cursor(selected.name if selected is not None else None, None)
        return matcher

    def clear_filter(self) -> bool:
        if self.filter_matcher is None:
            return False
        self.set_filter("")
        return True

    def toggle_mark(self) -> None:
        entry = self.selected_entry
        if entry is None:
            return
        if entry.path in self.marked:
            self.marked.discard(entry.path)
        else:
            self.marked.add(entry.path)

    def clear_marks(self) -> None:
        self.marked.clear()

    def target_paths(self) -> list[Path]:
        """Return visible marked paths in listing order, else the cursor entry.

        Marks hidden by the active filter are never targeted.
        """
        marked = [entry.path for entry in self.entries if entry.path in self.marked]
        if marked:
            return marked
        entry = self.selected_entry
        if entry is None:
            return []
        return [entry.path]

    def relist_or_fallback(self) -> bool:
        """Re-list after the filesystem may have changed underneath the pane.

        When the current directory is gone the pane moves to the nearest
        existing ancestor. Returns whether the directory changed.
        """
        fallback = nearest_existing_directory(self.current_directory)
        if fallback is None or fallback == self.current_directory:
            self.refresh()
            return False
        LOGGER.info("%s vanished, falling back to %s", self.current_directory, fallback)
        self.change_directory(fallback)
        return True
