"""Raw-mode and alternate-screen switching for the controlling terminal."""

from __future__ import annotations

import contextlib
import os
import termios
import tty
from collections.abc import Iterator

# Alternate screen on, cursor hidden; and the reverse.
ENTER_TUI = "\033[?1049h\033[?25l"
LEAVE_TUI = "\033[?25h\033[?1049l"


class TerminalController:
    """Moves the terminal between the full-screen TUI and normal line mode.

    The cooked tty attributes are captured once at construction and restored
    every time the TUI is left, so a foreground child (shell, editor) always
    starts from the user's own settings.
    """

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._cooked_attrs = termios.tcgetattr(stdin_fd)

    def _emit(self, sequence: str) -> None:
        os.write(self.stdout_fd, sequence.encode("ascii"))

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        self._emit(ENTER_TUI)

    def disable_tui_mode(self) -> None:
        self._emit(LEAVE_TUI)
        termios.tcsetattr(self.stdin_fd, termios.TCSADRAIN, self._cooked_attrs)

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        self.enable_tui_mode()
        try:
            yield
        finally:
            self.disable_tui_mode()
