"""Main interactive event loop for the terminal UI.

One key is read, handed to the session, and the returned ``RenderRequest`` is
carried out before the next key is accepted. Feature logic lives in the
session and in the injected callbacks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..session import LaunchRequest, RenderRequest, Session, ShellRequest, StatusMessage

LOGGER = logging.getLogger(__name__)

IDLE_POLL_MS = 250


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected collaborators used by ``run_main_loop``."""

    render: Callable[[StatusMessage | None], None]
    read_key: Callable[[int | None], str]
    terminal_size: Callable[[], tuple[int, int]]
    launch_shell: Callable[[Path], str | None]
    launch_program: Callable[[LaunchRequest], str | None]
    copy_to_clipboard: Callable[[str], bool]
    open_path: Callable[[Path], str | None]


@dataclass
class LoopState:
    dirty: bool = True
    status: StatusMessage | None = None
    quit: bool = False


def apply_request(session: Session, request: RenderRequest, callbacks: RuntimeLoopCallbacks, state: LoopState) -> None:
    """Carry out the collaborator work ``request`` asks for and update ``state``."""
    if request.quit:
        state.quit = True
        return

    status = request.status
    if request.clipboard_text is not None and not callbacks.copy_to_clipboard(request.clipboard_text):
        status = StatusMessage.error("no clipboard command available (wl-copy, xclip, xsel)")

    if request.open_path is not None:
        error = callbacks.open_path(request.open_path)
        status = StatusMessage.error(error) if error else StatusMessage.info(f"opened {request.open_path.name}")

    suspend = request.suspend
    if isinstance(suspend, ShellRequest):
        error = callbacks.launch_shell(suspend.cwd)
        resumed = session.resume_from_shell()
        status = StatusMessage.error(error) if error else resumed.status
        state.dirty = True
    elif isinstance(suspend, LaunchRequest):
        error = callbacks.launch_program(suspend)
        resumed = session.resume_from_shell()
        status = StatusMessage.error(error) if error else resumed.status
        state.dirty = True

    if request.redraw or status is not None:
        state.dirty = True
        state.status = status


def run_main_loop(
    session: Session,
    callbacks: RuntimeLoopCallbacks,
    initial_status: StatusMessage | None = None,
) -> None:
    """Run until a quit request; renders only when something changed."""
    state = LoopState(status=initial_status)
    last_size: tuple[int, int] | None = None
    while not state.quit:
        size = callbacks.terminal_size()
        if size != last_size:
            last_size = size
            state.dirty = True
        if state.dirty:
            callbacks.render(state.status)
            state.dirty = False

        key = callbacks.read_key(IDLE_POLL_MS)
        if not key:
            continue
        request = session.handle_key(key)
        apply_request(session, request, callbacks, state)
    LOGGER.info("quit requested")
