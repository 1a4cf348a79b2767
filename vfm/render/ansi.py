"""Column arithmetic for strings that may carry SGR escape sequences.

Escapes pass through untouched and occupy no columns; everything else is
measured the way a terminal lays it out.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
ELLIPSIS = "…"


def char_display_width(ch: str, col: int) -> int:
    """Columns ``ch`` occupies when drawn starting at column ``col``.

    Tabs run to the next multiple of ``TAB_STOP``; combining marks are zero
    wide and East Asian wide or fullwidth characters take two cells.
    """
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def display_width(text: str) -> int:
    width = 0
    for ch in ANSI_ESCAPE_RE.sub("", text):
        width += char_display_width(ch, width)
    return width


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` down to ``max_cols`` columns, keeping every escape it passes.

    Tabs come out as spaces so the result lines up cell for cell.
    """
    if max_cols <= 0:
        return ""
    pieces: list[str] = []
    width = 0
    cursor = 0
    # Plain runs alternate with escapes; a trailing plain run has no escape.
    for escape in [*ANSI_ESCAPE_RE.finditer(text), None]:
        plain_end = len(text) if escape is None else escape.start()
        for ch in text[cursor:plain_end]:
            cells = char_display_width(ch, width)
            if width + cells > max_cols:
                return "".join(pieces)
            pieces.append(" " * cells if ch == "\t" else ch)
            width += cells
        if escape is None:
            break
        pieces.append(escape.group())
        cursor = escape.end()
    return "".join(pieces)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip and right-pad ``text`` to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    padding = width - display_width(clipped)
    return clipped + " " * padding if padding > 0 else clipped


def truncate_middle(text: str, width: int) -> str:
    """Shorten plain ``text`` to ``width`` characters with an ellipsis in the middle."""
    if len(text) <= width:
        return text
    if width <= 1:
        return text[: max(0, width)]
    keep = width - 1
    head = keep // 2
    return text[:head] + ELLIPSIS + text[len(text) - (keep - head):]
