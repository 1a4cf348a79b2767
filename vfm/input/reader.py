"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into key tokens: printable
characters as themselves, ``UP DOWN LEFT RIGHT ENTER ESC BACKSPACE TAB``,
``HOME END DELETE PAGE_UP PAGE_DOWN`` and ``CTRL_<LETTER>``. Only a lone ESC byte
becomes ``ESC``; escape sequences with no mapping read as ``""``, like a timeout.
"""

from __future__ import annotations

import os
import select
from collections import deque

ESC_SEQUENCE_TIMEOUT_MS = 25
MAX_SEQUENCE_PARAMS = 8
# Unmapped sequences (Insert, F-keys, Shift+Tab) decode to this and bind to nothing.
UNKNOWN_KEY = ""

# Bytes read ahead while decoding and handed back on the next call.
_PENDING_BYTES: deque[bytes] = deque()

_SINGLE_BYTE_TOKENS: dict[bytes, str] = {
    b"\t": "TAB",
    b"\n": "ENTER",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
}

_FINAL_BYTE_TOKENS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

# ESC [ <n> ~ forms; xterm and rxvt disagree on HOME/END numbers.
_NUMBERED_TOKENS: dict[bytes, str] = {
    b"1": "HOME",
    b"7": "HOME",
    b"4": "END",
    b"8": "END",
    b"3": "DELETE",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
}


def _next_byte(fd: int, timeout_ms: int | None) -> bytes | None:
    """One byte from the look-ahead buffer or ``fd``; ``None`` on timeout or EOF.

    ``timeout_ms=None`` blocks until input arrives.
    """
    if _PENDING_BYTES:
        return _PENDING_BYTES.popleft()
    if timeout_ms is not None:
        ready, _, _ = select.select([fd], [], [], max(0, timeout_ms) / 1000)
        if not ready:
            return None
    return os.read(fd, 1) or None


def _sequence_token(params: bytes, final: bytes) -> str:
    if final == b"~":
        # Modifiers follow a ';' and are ignored.
        return _NUMBERED_TOKENS.get(params.split(b";", 1)[0], UNKNOWN_KEY)
    return _FINAL_BYTE_TOKENS.get(final, UNKNOWN_KEY)


def _read_escape(fd: int) -> str:
    intro = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if intro is None:
        return "ESC"
    if intro not in (b"[", b"O"):
        _PENDING_BYTES.append(intro)
        return "ESC"
    params = b""
    while len(params) <= MAX_SEQUENCE_PARAMS:
        byte = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if byte is None:
            return UNKNOWN_KEY
        if 0x40 <= byte[0] <= 0x7E:
            return _sequence_token(params, byte)
        params += byte
    return UNKNOWN_KEY


def _read_utf8(fd: int, lead: bytes) -> str:
    code = lead[0]
    expected = 3 if code >= 0xF0 else 2 if code >= 0xE0 else 1 if code >= 0xC0 else 0
    data = lead
    for _ in range(expected):
        more = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        data += more
    return data.decode("utf-8", errors="replace")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; returns ``""`` on timeout or EOF."""
    first = _next_byte(fd, timeout_ms)
    if first is None:
        return ""
    if first == b"\r":
        # A CRLF pair is a single ENTER.
        follow = _next_byte(fd, 0)
        if follow is not None and follow != b"\n":
            _PENDING_BYTES.append(follow)
        return "ENTER"
    if first in _SINGLE_BYTE_TOKENS:
        return _SINGLE_BYTE_TOKENS[first]
    if first == b"\x1b":
        return _read_escape(fd)
    code = first[0]
    if 1 <= code <= 26:
        return f"CTRL_{chr(0x40 + code)}"
    if code < 0x20:
        return ""
    return _read_utf8(fd, first)
