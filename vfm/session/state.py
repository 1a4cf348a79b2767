"""Session state machine: two panes, markers, clipboard, and the active mode.

``Session.handle_key`` is the single entry point. Dispatch is keyed on the
mode type; any key a mode does not recognize leaves all state untouched.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

from .. import operations
from ..config import AppConfig, MetadataBarConfig
from ..errors import NOT_FOUND, BatchResult, Failure
from ..file_model import Entry
from ..input import ActionRegistry
from ..markers import Marker, MarkerStore, parse_scope
from ..open_with import QUICK_SLOT_KEYS, Candidate, OpenWithResolver
from ..operations import Clipboard
from ..pane import COLUMN_OWNER, COLUMN_PERMISSIONS, Pane
from ..preview import PreviewContent, resolve
from ..search import CompileError
from .modes import (
    ADD_DIR,
    ADD_FILE,
    MARKER_ADD,
    MARKER_ADD_PATH,
    MARKER_EDIT_PATH,
    MARKER_JUMP,
    MARKER_RENAME,
    MARKER_SEARCH,
    PREFIX_ADD,
    PREFIX_COPY,
    PREFIX_DELETE,
    PREFIX_OPEN_WITH,
    PREFIX_SETTINGS,
    PREFIX_VIEW,
    RENAME,
    SEARCH_ENTRIES,
    ConfirmDelete,
    MarkerList,
    Mode,
    Normal,
    OpenWithPicker,
    PendingPrefix,
    ShellSuspended,
    TextInput,
)
from .request import LaunchRequest, RenderRequest, ShellRequest, StatusMessage

LOGGER = logging.getLogger(__name__)

NOOP = RenderRequest(redraw=False)


def _is_text_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class Session:
    """Owns both panes, the marker store, the clipboard, and the mode."""

    def __init__(
        self,
        left: Path,
        right: Path,
        config: AppConfig | None = None,
        markers: MarkerStore | None = None,
        open_with: OpenWithResolver | None = None,
    ) -> None:
        self.config = config if config is not None else AppConfig()
        self.panes: tuple[Pane, Pane] = (
            Pane(left, show_hidden=self.config.show_hidden),
            Pane(right, show_hidden=self.config.show_hidden),
        )
        self.active_index = 0
        self.markers = markers if markers is not None else MarkerStore()
        self.open_with = open_with if open_with is not None else OpenWithResolver(self.config.quick_slots)
        self.clipboard: Clipboard | None = None
        self.metadata_bar: MetadataBarConfig = self.config.metadata_bar
        self.mode: Mode = Normal()

        keymap = self.config.keymap
        self._normal_actions = ActionRegistry[RenderRequest](keymap, "normal").register_all(
            {
                "quit": lambda: RenderRequest(quit=True),
                "up": lambda: self._move_cursor(-1),
                "down": lambda: self._move_cursor(1),
                "parent": self._go_to_parent,
                "open": self._open_selected,
                "switch_pane": self._switch_pane,
                "toggle_mark": self._toggle_mark,
                "clear_search": self._clear_search,
                "search": self._begin_search,
                "add": lambda: self._enter(PendingPrefix(PREFIX_ADD)),
                "rename": self._begin_rename,
                "delete": lambda: self._enter(PendingPrefix(PREFIX_DELETE)),
                "marker_set": lambda: self._enter(TextInput(MARKER_ADD, origin_pane=self.active_index)),
                "marker_list": lambda: self._enter(MarkerList()),
                "marker_jump": lambda: self._enter(TextInput(MARKER_JUMP, origin_pane=self.active_index)),
                "settings": lambda: self._enter(PendingPrefix(PREFIX_SETTINGS)),
                "view": lambda: self._enter(PendingPrefix(PREFIX_VIEW)),
                "copy": self._mark_copy,
                "cut": self._mark_cut,
                "paste": self._paste,
                "shell": self._begin_shell,
                "open_with": self._begin_open_with,
                "open_with_quick": lambda: self._enter(PendingPrefix(PREFIX_OPEN_WITH)),
            }
        )
        self._prefix_actions: dict[str, ActionRegistry[RenderRequest]] = {
            PREFIX_ADD: ActionRegistry[RenderRequest](keymap, "add").register(
                "add_dir",
                lambda: self._enter(TextInput(ADD_DIR, origin_pane=self.active_index)),
            ),
            PREFIX_SETTINGS: ActionRegistry[RenderRequest](keymap, "settings").register_all(
                {
                    "toggle_permissions": lambda: self._toggle_metadata_field("show_permissions"),
                    "toggle_dates": lambda: self._toggle_metadata_field("show_dates"),
                    "toggle_owner": lambda: self._toggle_metadata_field("show_owner"),
                    "toggle_metadata": self._toggle_metadata_bar,
                    "toggle_hidden": self._toggle_hidden,
                }
            ),
            PREFIX_VIEW: ActionRegistry[RenderRequest](keymap, "view").register_all(
                {
                    "toggle_permissions_column": lambda: self._toggle_column(COLUMN_PERMISSIONS),
                    "toggle_owner_column": lambda: self._toggle_column(COLUMN_OWNER),
                }
            ),
            PREFIX_COPY: ActionRegistry[RenderRequest](keymap, "copy").register("copy_path", self._copy_path),
            PREFIX_DELETE: ActionRegistry[RenderRequest](keymap, "delete").register("confirm", self._confirm_delete),
        }
        self._marker_list_actions = ActionRegistry[RenderRequest](keymap, "marker_list").register_all(
            {
                "close": self._marker_list_close,
                "up": lambda: self._marker_list_move(-1),
                "down": lambda: self._marker_list_move(1),
                "open": self._marker_list_open,
                "rename": self._marker_list_rename,
                "edit_path": self._marker_list_edit_path,
                "delete": self._marker_list_delete,
                "add": self._marker_list_add,
                "search": self._marker_list_search,
            }
        )
        self._open_with_actions = ActionRegistry[RenderRequest](keymap, "open_with").register_all(
            {
                "close": lambda: self._enter(Normal()),
                "up": lambda: self._open_with_move(-1),
                "down": lambda: self._open_with_move(1),
                "open": self._open_with_launch,
                "backspace": self._open_with_backspace,
            }
        )

    # -- queries used by renderers -------------------------------------------------

    @property
    def active_pane(self) -> Pane:
        return self.panes[self.active_index]

    @property
    def inactive_pane(self) -> Pane:
        return self.panes[1 - self.active_index]

    def selected_entry(self) -> Entry | None:
        return self.active_pane.selected_entry

    def preview(self) -> PreviewContent | None:
        """Resolve the preview for the active selection; never cached."""
        entry = self.selected_entry()
        if entry is None:
            return None
        return resolve(
            entry,
            max_lines=self.config.preview.max_lines,
            max_bytes=self.config.preview.max_bytes,
            check_mismatch=self.config.check_mismatch,
        )

    def marker_filter(self) -> str | None:
        """Return the marker filter currently shown, including one being typed."""
        mode = self.mode
        if isinstance(mode, TextInput) and mode.purpose == MARKER_SEARCH:
            return mode.buffer
        if isinstance(mode, TextInput) and mode.resume is not None:
            return mode.resume.search_buffer
        if isinstance(mode, MarkerList):
            return mode.search_buffer
        return None

    def marker_view(self) -> tuple[list[Marker], CompileError | None]:
        """Return the filtered, order-preserving marker list for display."""
        query = self.marker_filter()
        if not query:
            return list(self.markers.markers), None
        scope, pattern = parse_scope(query)
        return self.markers.search(pattern, scope)

    def open_with_candidates(self) -> list[Candidate]:
        if not isinstance(self.mode, OpenWithPicker):
            return []
        return self.open_with.filter(self.mode.filter_buffer)

    # -- entry point -----------------------------------------------------------------

    def handle_key(self, key: str) -> RenderRequest:
        """Interpret one key token in the current mode."""
        mode = self.mode
        if isinstance(mode, Normal):
            result = self._normal_actions.dispatch(key)
        elif isinstance(mode, PendingPrefix):
            result = self._handle_prefix(mode, key)
        elif isinstance(mode, TextInput):
            result = self._handle_text_input(mode, key)
        elif isinstance(mode, ConfirmDelete):
            result = self._handle_confirm_delete(mode, key)
        elif isinstance(mode, MarkerList):
            result = self._marker_list_actions.dispatch(key)
        elif isinstance(mode, OpenWithPicker):
            result = self._handle_open_with(mode, key)
        elif isinstance(mode, ShellSuspended):
            result = None
        else:
            raise AssertionError(f"unhandled mode: {mode!r}")
        return result if result is not None else NOOP

    def resume_from_shell(self) -> RenderRequest:
        """Re-list both panes after the terminal comes back and return to Normal."""
        moved: list[str] = []
        for pane in self.panes:
            if pane.relist_or_fallback():
                moved.append(str(pane.current_directory))
        self._set_mode(Normal())
        if moved:
            return RenderRequest(status=StatusMessage.warning(f"directory vanished, now in {', '.join(moved)}"))
        return RenderRequest()

    # -- helpers -----------------------------------------------------------------------

    def _set_mode(self, mode: Mode) -> None:
        if mode != self.mode:
            LOGGER.debug("mode %s -> %s", type(self.mode).__name__, mode)
        self.mode = mode

    def _enter(self, mode: Mode, status: StatusMessage | None = None) -> RenderRequest:
        self._set_mode(mode)
        return RenderRequest(status=status)

    def _refresh_dirs(self, directories: frozenset[Path] | set[Path]) -> None:
        for pane in self.panes:
            if pane.current_directory in directories:
                pane.refresh()

    def _after_batch(self, result: BatchResult, select_in_active: str | None = None) -> RenderRequest:
        self._refresh_dirs(result.refresh_dirs)
        if select_in_active is not None:
            self.active_pane.select_name(select_in_active)
        self._set_mode(Normal())
        return RenderRequest(status=StatusMessage.from_batch(result))

    # -- normal mode -------------------------------------------------------------------

    def _move_cursor(self, delta: int) -> RenderRequest:
        self.active_pane.move_cursor(delta)
        return RenderRequest()

    def _go_to_parent(self) -> RenderRequest:
        self.active_pane.go_to_parent()
        return RenderRequest(status=self._listing_status(self.active_pane))

    def _open_selected(self) -> RenderRequest:
        pane = self.active_pane
        to_open = pane.enter_directory()
        if to_open is not None:
            return RenderRequest(open_path=to_open)
        return RenderRequest(status=self._listing_status(pane))

    @staticmethod
    def _listing_status(pane: Pane) -> StatusMessage | None:
        if pane.error is None:
            return None
        return StatusMessage.error(f"{pane.current_directory}: {pane.error.strerror or pane.error}")

    def _switch_pane(self) -> RenderRequest:
        self.active_index = 1 - self.active_index
        return RenderRequest()

    def _toggle_mark(self) -> RenderRequest:
        pane = self.active_pane
        pane.toggle_mark()
        pane.move_cursor(1)
        return RenderRequest()

    def _clear_search(self) -> RenderRequest | None:
        if not self.active_pane.clear_filter():
            return None
        return RenderRequest()

    def _begin_search(self) -> RenderRequest:
        pattern = self.active_pane.filter_pattern
        return self._enter(
            TextInput(SEARCH_ENTRIES, buffer=pattern, origin_pane=self.active_index, previous_filter=pattern)
        )

    def _begin_rename(self) -> RenderRequest | None:
        entry = self.selected_entry()
        if entry is None:
            return None
        return self._enter(
            TextInput(RENAME, buffer=entry.name, origin_pane=self.active_index, target_path=entry.path)
        )

    def _mark_copy(self) -> RenderRequest:
        clipboard = operations.copy_mark(self.active_pane.target_paths())
        if clipboard is not None:
            self.clipboard = clipboard
        self._set_mode(PendingPrefix(PREFIX_COPY))
        if clipboard is None:
            return RenderRequest()
        return RenderRequest(status=StatusMessage.info(clipboard.summary()))

    def _mark_cut(self) -> RenderRequest | None:
        clipboard = operations.cut(self.active_pane.target_paths())
        if clipboard is None:
            return None
        self.clipboard = clipboard
        return RenderRequest(status=StatusMessage.info(clipboard.summary()))

    def _paste(self) -> RenderRequest:
        if self.clipboard is None:
            return RenderRequest(status=StatusMessage.warning("clipboard is empty"))
        result, self.clipboard = operations.paste(self.clipboard, self.active_pane.current_directory)
        first = next((outcome.destination for outcome in result.succeeded if outcome.destination), None)
        return self._after_batch(result, select_in_active=first.name if first is not None else None)

    def _begin_shell(self) -> RenderRequest:
        cwd = self.active_pane.current_directory
        self._set_mode(ShellSuspended(cwd))
        return RenderRequest(suspend=ShellRequest(cwd))

    def _begin_open_with(self) -> RenderRequest | None:
        entry = self.selected_entry()
        if entry is None:
            return None
        return self._enter(OpenWithPicker(target=entry.path, cwd=self.active_pane.current_directory))

    # -- prefixes ----------------------------------------------------------------------

    def _handle_prefix(self, mode: PendingPrefix, key: str) -> RenderRequest:
        self._set_mode(Normal())
        if mode.kind == PREFIX_OPEN_WITH:
            return self._launch_quick_slot(key)
        result = self._prefix_actions[mode.kind].dispatch(key)
        if result is not None:
            return result
        if mode.kind == PREFIX_ADD and _is_text_key(key):
            return self._enter(TextInput(ADD_FILE, buffer=key, origin_pane=self.active_index))
        return RenderRequest()

    def _launch_quick_slot(self, key: str) -> RenderRequest:
        if key not in QUICK_SLOT_KEYS:
            return RenderRequest()
        program = self.open_with.quick(key)
        if program is None:
            return RenderRequest(status=StatusMessage.warning(f"no program in quick slot {key}"))
        entry = self.selected_entry()
        if entry is None:
            return RenderRequest(status=StatusMessage.warning("nothing selected"))
        return self._launch(program, entry.path, self.active_pane.current_directory)

    def _launch(self, program: str, target: Path, cwd: Path) -> RenderRequest:
        program, args = self.open_with.command_for(program, target)
        self._set_mode(Normal())
        return RenderRequest(suspend=LaunchRequest(program=program, args=tuple(args), cwd=cwd))

    def _toggle_metadata_field(self, field_name: str) -> RenderRequest:
        current = getattr(self.metadata_bar, field_name)
        self.metadata_bar = dataclasses.replace(self.metadata_bar, enabled=True, **{field_name: not current})
        return RenderRequest()

    def _toggle_metadata_bar(self) -> RenderRequest:
        self.metadata_bar = dataclasses.replace(self.metadata_bar, enabled=not self.metadata_bar.enabled)
        return RenderRequest()

    def _toggle_hidden(self) -> RenderRequest:
        self.active_pane.toggle_hidden()
        return RenderRequest()

    def _toggle_column(self, column: str) -> RenderRequest:
        self.active_pane.toggle_column(column)
        return RenderRequest()

    def _copy_path(self) -> RenderRequest | None:
        entry = self.selected_entry()
        if entry is None:
            return None
        text = operations.copy_path_to_clipboard_text(entry)
        return RenderRequest(clipboard_text=text, status=StatusMessage.info(f"copied {text}"))

    def _confirm_delete(self) -> RenderRequest:
        targets = tuple(self.active_pane.target_paths())
        if not targets:
            return RenderRequest(status=StatusMessage.warning("nothing to delete"))
        return self._enter(ConfirmDelete(target_paths=targets, origin_pane=self.active_index))

    # -- confirm delete ----------------------------------------------------------------

    def _handle_confirm_delete(self, mode: ConfirmDelete, key: str) -> RenderRequest | None:
        if key in {"y", "Y"}:
            result = operations.delete(mode.target_paths)
            self.panes[mode.origin_pane].clear_marks()
            return self._after_batch(result)
        if key in {"n", "N", "ESC"}:
            return self._enter(Normal(), StatusMessage.info("delete cancelled"))
        return None

    # -- text input --------------------------------------------------------------------

    def _handle_text_input(self, mode: TextInput, key: str) -> RenderRequest | None:
        if key == "ENTER":
            return self._commit_text_input(mode)
        if key == "ESC":
            return self._abort_text_input(mode)
        if key == "BACKSPACE":
            if not mode.buffer:
                return None
            return self._update_buffer(mode, mode.buffer[:-1])
        if _is_text_key(key):
            return self._update_buffer(mode, mode.buffer + key)
        return None

    def _update_buffer(self, mode: TextInput, buffer: str) -> RenderRequest:
        self._set_mode(dataclasses.replace(mode, buffer=buffer))
        if mode.purpose == SEARCH_ENTRIES:
            matcher = self.panes[mode.origin_pane].set_filter(buffer)
            if isinstance(matcher, CompileError):
                return RenderRequest(status=StatusMessage.warning(matcher.describe()))
        elif mode.purpose == MARKER_SEARCH:
            _markers, error = self.marker_view()
            if error is not None:
                return RenderRequest(status=StatusMessage.warning(error.describe()))
        return RenderRequest()

    def _abort_text_input(self, mode: TextInput) -> RenderRequest:
        if mode.purpose == SEARCH_ENTRIES:
            self.panes[mode.origin_pane].set_filter(mode.previous_filter)
        if mode.resume is not None:
            return self._enter(mode.resume)
        return self._enter(Normal())

    def _finish(self, mode: TextInput, failure: Failure | None, success: str | None = None) -> RenderRequest:
        """Leave a text input: back to its marker list, else Normal."""
        next_mode: Mode = mode.resume if mode.resume is not None else Normal()
        self._set_mode(next_mode)
        if isinstance(next_mode, MarkerList):
            count = len(self.marker_view()[0])
            self._set_mode(dataclasses.replace(next_mode, cursor_index=max(0, min(next_mode.cursor_index, count - 1))))
        if failure is not None:
            return RenderRequest(status=StatusMessage.from_failure(failure))
        return RenderRequest(status=StatusMessage.info(success) if success else None)

    def _commit_text_input(self, mode: TextInput) -> RenderRequest:
        pane = self.panes[mode.origin_pane]
        purpose = mode.purpose

        if purpose in {ADD_FILE, ADD_DIR}:
            create = operations.create_file if purpose == ADD_FILE else operations.create_dir
            outcome = create(pane.current_directory, mode.buffer)
            if outcome.ok:
                self._refresh_dirs({pane.current_directory})
                pane.select_name(outcome.path.name)
            return self._finish(mode, outcome.failure, f"created {outcome.path.name}")

        if purpose == RENAME:
            if mode.target_path is None:
                return self._finish(mode, None)
            outcome = operations.rename(mode.target_path, mode.buffer)
            if outcome.ok and outcome.destination is not None:
                self._rename_clipboard_path(mode.target_path, outcome.destination)
                self._refresh_dirs({mode.target_path.parent})
                pane.select_name(outcome.destination.name)
            return self._finish(mode, outcome.failure)

        if purpose == SEARCH_ENTRIES:
            matcher = pane.set_filter(mode.buffer)
            self._set_mode(Normal())
            if isinstance(matcher, CompileError):
                return RenderRequest(status=StatusMessage.warning(matcher.describe()))
            return RenderRequest()

        if purpose == MARKER_JUMP:
            return self._jump_to_marker(mode.buffer, pane, mode)

        if purpose == MARKER_SEARCH:
            buffer = mode.buffer or None
            return self._enter(MarkerList(cursor_index=0, search_buffer=buffer))

        if purpose == MARKER_ADD:
            if mode.resume is None:
                failure = self.markers.add(mode.buffer, pane.current_directory)
                return self._finish(mode, failure, f"marker {mode.buffer.strip()} set")
            return self._enter(
                TextInput(
                    MARKER_ADD_PATH,
                    buffer=str(pane.current_directory),
                    origin_pane=mode.origin_pane,
                    target_name=mode.buffer,
                    resume=mode.resume,
                )
            )

        if purpose == MARKER_ADD_PATH:
            failure = self.markers.add(mode.target_name or "", mode.buffer)
            return self._finish(mode, failure)

        if purpose == MARKER_RENAME:
            failure = self.markers.rename(mode.target_name or "", mode.buffer)
            return self._finish(mode, failure)

        if purpose == MARKER_EDIT_PATH:
            failure = self.markers.edit_path(mode.target_name or "", mode.buffer)
            return self._finish(mode, failure)

        return self._finish(mode, None)

    def _rename_clipboard_path(self, old: Path, new: Path) -> None:
        if self.clipboard is None or old not in self.clipboard.source_paths:
            return
        paths = (self.clipboard.source_paths - {old}) | {new}
        self.clipboard = Clipboard(mode=self.clipboard.mode, source_paths=frozenset(paths))

    def _navigate_to(self, pane: Pane, target: Path) -> Failure | None:
        if target.is_dir():
            pane.change_directory(target)
            return None
        if target.exists() or target.is_symlink():
            pane.change_directory(target.parent, select_name=target.name)
            return None
        return Failure(NOT_FOUND, target)

    def _jump_to_marker(self, name: str, pane: Pane, mode: TextInput) -> RenderRequest:
        target = self.markers.find(name)
        if target is None:
            return self._finish(mode, Failure(NOT_FOUND, None, f"marker {name.strip()!r}"))
        return self._finish(mode, self._navigate_to(pane, target))

    # -- marker list -------------------------------------------------------------------

    def _selected_marker(self) -> Marker | None:
        if not isinstance(self.mode, MarkerList):
            return None
        markers, _error = self.marker_view()
        if not markers:
            return None
        return markers[max(0, min(self.mode.cursor_index, len(markers) - 1))]

    def _marker_list_close(self) -> RenderRequest:
        assert isinstance(self.mode, MarkerList)
        if self.mode.search_buffer:
            return self._enter(MarkerList(cursor_index=0, search_buffer=None))
        return self._enter(Normal())

    def _marker_list_move(self, delta: int) -> RenderRequest:
        assert isinstance(self.mode, MarkerList)
        count = len(self.marker_view()[0])
        if count == 0:
            return RenderRequest(redraw=False)
        cursor = max(0, min(self.mode.cursor_index + delta, count - 1))
        return self._enter(dataclasses.replace(self.mode, cursor_index=cursor))

    def _marker_list_open(self) -> RenderRequest | None:
        marker = self._selected_marker()
        if marker is None:
            return None
        failure = self._navigate_to(self.active_pane, marker.path)
        if failure is not None:
            return RenderRequest(status=StatusMessage.from_failure(failure))
        return self._enter(Normal())

    def _marker_list_rename(self) -> RenderRequest | None:
        marker = self._selected_marker()
        if marker is None:
            return None
        assert isinstance(self.mode, MarkerList)
        return self._enter(
            TextInput(
                MARKER_RENAME,
                buffer=marker.name,
                origin_pane=self.active_index,
                target_name=marker.name,
                resume=self.mode,
            )
        )

    def _marker_list_edit_path(self) -> RenderRequest | None:
        marker = self._selected_marker()
        if marker is None:
            return None
        assert isinstance(self.mode, MarkerList)
        return self._enter(
            TextInput(
                MARKER_EDIT_PATH,
                buffer=str(marker.path),
                origin_pane=self.active_index,
                target_name=marker.name,
                resume=self.mode,
            )
        )

    def _marker_list_delete(self) -> RenderRequest | None:
        marker = self._selected_marker()
        if marker is None:
            return None
        assert isinstance(self.mode, MarkerList)
        failure = self.markers.delete(marker.name)
        count = len(self.marker_view()[0])
        self._set_mode(dataclasses.replace(self.mode, cursor_index=max(0, min(self.mode.cursor_index, count - 1))))
        if failure is not None:
            return RenderRequest(status=StatusMessage.from_failure(failure))
        return RenderRequest(status=StatusMessage.info(f"marker {marker.name} deleted"))

    def _marker_list_add(self) -> RenderRequest:
        assert isinstance(self.mode, MarkerList)
        return self._enter(TextInput(MARKER_ADD, origin_pane=self.active_index, resume=self.mode))

    def _marker_list_search(self) -> RenderRequest:
        assert isinstance(self.mode, MarkerList)
        return self._enter(
            TextInput(
                MARKER_SEARCH,
                buffer=self.mode.search_buffer or "",
                origin_pane=self.active_index,
                resume=self.mode,
            )
        )

    # -- open-with picker --------------------------------------------------------------

    def _handle_open_with(self, mode: OpenWithPicker, key: str) -> RenderRequest | None:
        result = self._open_with_actions.dispatch(key)
        if result is not None:
            return result
        if _is_text_key(key):
            return self._enter(dataclasses.replace(mode, filter_buffer=mode.filter_buffer + key, cursor_index=0))
        return None

    def _open_with_move(self, delta: int) -> RenderRequest:
        assert isinstance(self.mode, OpenWithPicker)
        count = len(self.open_with_candidates())
        if count == 0:
            return RenderRequest(redraw=False)
        cursor = max(0, min(self.mode.cursor_index + delta, count - 1))
        return self._enter(dataclasses.replace(self.mode, cursor_index=cursor))

    def _open_with_backspace(self) -> RenderRequest:
        assert isinstance(self.mode, OpenWithPicker)
        if not self.mode.filter_buffer:
            return RenderRequest(redraw=False)
        return self._enter(dataclasses.replace(self.mode, filter_buffer=self.mode.filter_buffer[:-1], cursor_index=0))

    def _open_with_launch(self) -> RenderRequest:
        mode = self.mode
        assert isinstance(mode, OpenWithPicker)
        candidates = self.open_with_candidates()
        if not candidates:
            return RenderRequest(status=StatusMessage.warning("no matching program"))
        candidate = candidates[max(0, min(mode.cursor_index, len(candidates) - 1))]
        return self._launch(candidate.program, mode.target, mode.cwd)
