"""Compose full ANSI frames from session state.

Layout: a header row with both pane paths, three columns (left pane, right
pane, preview or popup), an optional metadata bar, and a bottom line that is
the prompt, the delete confirmation, or the status message.
"""

from __future__ import annotations

import os
import sys

from ..file_model import KIND_SYMLINK, Entry
from ..pane import Pane
from ..preview import (
    MISMATCH,
    BinaryPreview,
    DirectoryPreview,
    ImagePreview,
    PreviewContent,
    TextPreview,
    UnreadablePreview,
    describe_metadata,
    permission_string,
    read_metadata,
)
from ..preview.highlight import colorize_lines
from ..session import (
    ConfirmDelete,
    MarkerList,
    OpenWithPicker,
    PendingPrefix,
    Session,
    StatusMessage,
    TextInput,
)
from ..session.request import LEVEL_ERROR, LEVEL_WARNING
from .ansi import fit_ansi_line, truncate_middle
from .icons import NO_ICONS, Icons, with_icon
from .theme import Theme

DIVIDER = "│"
MIN_PREVIEW_WIDTH = 20


def human_size(size: int | None) -> str:
    if size is None:
        return ""
    value = float(size)
    for unit in ("B", "K", "M", "G", "T"):
        if value < 1024 or unit == "T":
            if unit == "B":
                return f"{int(value)}B"
            return f"{value:.1f}{unit}"
        value /= 1024
    return f"{size}B"


def column_widths(width: int) -> tuple[int, int, int]:
    """Split ``width`` into left pane, right pane, and preview columns."""
    usable = max(3, width - 2)
    pane_width = max(1, usable * 3 // 10)
    preview_width = max(1, usable - 2 * pane_width)
    if preview_width < MIN_PREVIEW_WIDTH and usable >= 3 * MIN_PREVIEW_WIDTH // 2:
        pane_width = max(1, (usable - MIN_PREVIEW_WIDTH) // 2)
        preview_width = usable - 2 * pane_width
    return pane_width, pane_width, preview_width


def scroll_start(cursor: int | None, count: int, rows: int) -> int:
    if cursor is None or count <= rows:
        return 0
    return max(0, min(cursor - rows // 2, count - rows))


def format_entry(entry: Entry, pane: Pane, width: int, icons: Icons = NO_ICONS) -> str:
    """Return the plain text row for ``entry`` without colors."""
    mark = "*" if entry.path in pane.marked else " "
    name = with_icon(icons.for_entry(entry), entry.name + ("/" if entry.is_dir else ""))
    if entry.kind == KIND_SYMLINK and not entry.is_dir:
        name += "@"
    columns: list[str] = []
    if pane.show_permissions_column:
        columns.append(permission_string(entry.permissions))
    if pane.show_owner_column:
        columns.append(entry.owner)
    if not entry.is_dir:
        columns.append(human_size(entry.size_bytes).rjust(6))
    suffix = " ".join(columns)
    name_width = max(1, width - 1 - (len(suffix) + 1 if suffix else 0))
    label = truncate_middle(name, name_width).ljust(name_width)
    return f"{mark}{label} {suffix}" if suffix else f"{mark}{label}"


def pane_lines(
    pane: Pane,
    rows: int,
    width: int,
    theme: Theme,
    is_active: bool,
    icons: Icons = NO_ICONS,
) -> list[str]:
    lines: list[str] = []
    if pane.error is not None:
        lines.append(theme.error + fit_ansi_line(f" {pane.error.strerror or pane.error}", width) + theme.reset)
    elif not pane.entries:
        placeholder = " no matches" if pane.filter_matcher is not None else " empty"
        lines.append(theme.dim + fit_ansi_line(placeholder, width) + theme.reset)

    start = scroll_start(pane.cursor_index, len(pane.entries), rows - len(lines))
    for idx in range(start, min(len(pane.entries), start + rows - len(lines))):
        entry = pane.entries[idx]
        text = fit_ansi_line(format_entry(entry, pane, width, icons), width)
        if idx == pane.cursor_index:
            style = theme.selection if is_active else theme.reverse
        elif entry.path in pane.marked:
            style = theme.warning
        elif entry.is_dir:
            style = theme.folder
        else:
            style = theme.base
        lines.append(style + text + theme.reset)

    while len(lines) < rows:
        lines.append(theme.base + " " * width + theme.reset)
    return lines


def preview_text(preview: PreviewContent | None, rows: int, width: int, theme: Theme) -> list[str]:
    """Return preview rows; colors come from the theme and highlighter."""
    if preview is None:
        return []
    if isinstance(preview, TextPreview):
        shown = colorize_lines(preview.lines[:rows], preview.path)
        if preview.truncated and len(shown) < rows:
            shown.append(theme.dim + "… truncated" + theme.reset)
        return shown
    if isinstance(preview, ImagePreview):
        lines = [
            theme.accent + f"{preview.format} image" + theme.reset,
            f"dimensions: {preview.dimensions}",
            f"size: {human_size(preview.size_bytes)}",
        ]
        if preview.mismatch is not None:
            style = theme.warning if preview.mismatch.status == MISMATCH else theme.dim
            lines.append(style + preview.mismatch.describe() + theme.reset)
        return lines
    if isinstance(preview, BinaryPreview):
        return [
            theme.accent + "binary file" + theme.reset,
            f"type: {preview.guessed_type}",
            f"size: {human_size(preview.size_bytes)}",
        ]
    if isinstance(preview, DirectoryPreview):
        noun = "entry" if preview.entry_count == 1 else "entries"
        return [theme.folder + f"{preview.entry_count} {noun}" + theme.reset]
    if isinstance(preview, UnreadablePreview):
        return [theme.error + f"unreadable: {preview.reason}" + theme.reset]
    raise AssertionError(f"unhandled preview: {preview!r}")


def _list_popup(
    title: str,
    items: list[str],
    cursor: int,
    rows: int,
    width: int,
    theme: Theme,
    footer: str = "",
) -> list[str]:
    lines = [theme.accent + fit_ansi_line(f" {title}", width) + theme.reset]
    body_rows = max(0, rows - 1 - (1 if footer else 0))
    start = scroll_start(cursor if items else None, len(items), body_rows)
    for idx in range(start, min(len(items), start + body_rows)):
        style = theme.selection if idx == cursor else theme.base
        lines.append(style + fit_ansi_line(f" {items[idx]}", width) + theme.reset)
    if not items:
        lines.append(theme.dim + fit_ansi_line(" (none)", width) + theme.reset)
    if footer:
        lines.append(theme.dim + fit_ansi_line(f" {footer}", width) + theme.reset)
    return lines


def popup_lines(session: Session, rows: int, width: int, theme: Theme) -> list[str] | None:
    """Return the marker list or open-with picker rows when one is active."""
    mode = session.mode
    in_marker_input = isinstance(mode, TextInput) and mode.resume is not None
    if isinstance(mode, MarkerList) or in_marker_input:
        markers, error = session.marker_view()
        cursor = mode.cursor_index if isinstance(mode, MarkerList) else mode.resume.cursor_index
        label_width = max((len(marker.name) for marker in markers), default=0)
        items = [f"{marker.name.ljust(label_width)}  {marker.path}" for marker in markers]
        query = session.marker_filter()
        footer = ""
        if error is not None:
            footer = error.describe()
        elif query:
            footer = f"filter: {query}"
        return _list_popup("markers", items, cursor, rows, width, theme, footer)
    if isinstance(mode, OpenWithPicker):
        candidates = session.open_with_candidates()
        items = [candidate.label for candidate in candidates]
        return _list_popup(
            f"open {mode.target.name} with",
            items,
            mode.cursor_index,
            rows,
            width,
            theme,
            f"> {mode.filter_buffer}",
        )
    return None


def metadata_line(session: Session, width: int, theme: Theme) -> str | None:
    settings = session.metadata_bar
    if not settings.enabled:
        return None
    entry = session.selected_entry()
    metadata = read_metadata(entry.path) if entry is not None else None
    if metadata is None:
        text = ""
    else:
        text = describe_metadata(
            metadata,
            show_permissions=settings.show_permissions,
            show_dates=settings.show_dates,
            show_owner=settings.show_owner,
            labels=session.config.icons.metadata_labels(),
        )
    return theme.accent + fit_ansi_line(f" {text}", width) + theme.reset


def bottom_line(session: Session, status: StatusMessage | None, width: int, theme: Theme) -> str:
    mode = session.mode
    if isinstance(mode, TextInput):
        return theme.base + fit_ansi_line(f"{mode.prompt}: {mode.buffer}█", width) + theme.reset
    if isinstance(mode, ConfirmDelete):
        count = len(mode.target_paths)
        subject = mode.target_paths[0].name if count == 1 else f"{count} items"
        return theme.warning + fit_ansi_line(f"delete {subject}? [y/n]", width) + theme.reset
    if status is not None:
        style = theme.base
        if status.level == LEVEL_ERROR:
            style = theme.error
        elif status.level == LEVEL_WARNING:
            style = theme.warning
        return style + fit_ansi_line(status.text, width) + theme.reset

    parts: list[str] = []
    if isinstance(mode, PendingPrefix):
        parts.append(f"{mode.kind}…")
    pane = session.active_pane
    if pane.filter_pattern:
        parts.append(f"/{pane.filter_pattern}")
    if pane.marked:
        parts.append(f"{len(pane.marked)} marked")
    if session.clipboard is not None:
        parts.append(session.clipboard.summary())
    return theme.dim + fit_ansi_line("  ".join(parts), width) + theme.reset


def build_frame(session: Session, width: int, height: int, status: StatusMessage | None, theme: Theme) -> str:
    """Return one complete frame as an ANSI string."""
    width = max(10, width)
    height = max(3, height)
    left_width, right_width, preview_width = column_widths(width)

    metadata = metadata_line(session, width, theme)
    body_rows = max(1, height - 2 - (1 if metadata is not None else 0))

    header_cells: list[str] = []
    for idx, (pane, pane_width) in enumerate(zip(session.panes, (left_width, right_width))):
        style = theme.accent if idx == session.active_index else theme.dim
        header_cells.append(style + fit_ansi_line(truncate_middle(str(pane.current_directory), pane_width), pane_width))
    preview_title = ""
    entry = session.selected_entry()
    if entry is not None:
        preview_title = truncate_middle(entry.name, preview_width)
    header_cells.append(theme.dim + fit_ansi_line(preview_title, preview_width))

    icons = session.config.icons
    left = pane_lines(session.panes[0], body_rows, left_width, theme, session.active_index == 0, icons)
    right = pane_lines(session.panes[1], body_rows, right_width, theme, session.active_index == 1, icons)
    side = popup_lines(session, body_rows, preview_width, theme)
    if side is None:
        side = preview_text(session.preview(), body_rows, preview_width, theme)
    side = [fit_ansi_line(line, preview_width) + theme.reset for line in side[:body_rows]]
    while len(side) < body_rows:
        side.append(" " * preview_width)

    out: list[str] = ["\033[H\033[J"]
    out.append((theme.dim + DIVIDER + theme.reset).join(header_cells) + theme.reset + "\r\n")
    divider = theme.dim + DIVIDER + theme.reset
    for row in range(body_rows):
        out.append(left[row] + divider + right[row] + divider + theme.base + side[row] + theme.reset + "\r\n")
    if metadata is not None:
        out.append(metadata + "\r\n")
    out.append(bottom_line(session, status, width, theme))
    out.append(theme.reset)
    return "".join(out)


def render_frame(session: Session, width: int, height: int, status: StatusMessage | None, theme: Theme) -> None:
    frame = build_frame(session, width, height, status, theme)
    os.write(sys.stdout.fileno(), frame.encode("utf-8", errors="replace"))
