"""Runtime wiring: terminal lifecycle, event loop, and OS collaborators."""

from __future__ import annotations

import shutil
import sys

from ..input import read_key
from ..render.frame import render_frame
from ..render.theme import Theme
from ..session import Session, StatusMessage
from .clipboard import copy_text_to_clipboard
from .loop import RuntimeLoopCallbacks, run_main_loop
from .spawn import launch_program, launch_shell, open_with_default
from .terminal import TerminalController


def run_app(session: Session, theme: Theme, initial_status: StatusMessage | None = None) -> None:
    """Take over the terminal and run ``session`` until the user quits."""
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())

    def terminal_size() -> tuple[int, int]:
        term = shutil.get_terminal_size((80, 24))
        return term.columns, term.lines

    def render(status: StatusMessage | None) -> None:
        columns, lines = terminal_size()
        render_frame(session, columns, lines, status, theme)

    callbacks = RuntimeLoopCallbacks(
        render=render,
        read_key=lambda timeout_ms: read_key(stdin_fd, timeout_ms=timeout_ms),
        terminal_size=terminal_size,
        launch_shell=lambda cwd: launch_shell(cwd, terminal.disable_tui_mode, terminal.enable_tui_mode),
        launch_program=lambda request: launch_program(request, terminal.disable_tui_mode, terminal.enable_tui_mode),
        copy_to_clipboard=copy_text_to_clipboard,
        open_path=open_with_default,
    )
    with terminal.raw_mode():
        run_main_loop(session, callbacks, initial_status)


__all__ = ["TerminalController", "run_app", "run_main_loop"]
