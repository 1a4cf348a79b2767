"""Process spawning for the subshell, open-with launches, and default handlers.

Foreground helpers run while the TUI is suspended and return an error message
string instead of raising, for UI-friendly handling.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable

from ..session import LaunchRequest

LOGGER = logging.getLogger(__name__)

DEFAULT_SHELL = "/bin/sh"


def shell_command() -> list[str]:
    shell = os.environ.get("SHELL", "").strip()
    return [shell or DEFAULT_SHELL]


def run_foreground(
    command: list[str],
    cwd: Path,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
) -> str | None:
    """Run ``command`` in ``cwd`` with the terminal handed over until it exits."""
    disable_tui_mode()
    try:
        LOGGER.info("running %s in %s", command[0], cwd)
        subprocess.run(command, cwd=cwd, check=False)
    except OSError as exc:
        LOGGER.warning("failed to run %s: %s", command[0], exc)
        return f"failed to run {command[0]}: {exc.strerror or exc}"
    finally:
        enable_tui_mode()
    return None


def launch_shell(
    cwd: Path,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
) -> str | None:
    return run_foreground(shell_command(), cwd, disable_tui_mode, enable_tui_mode)


def launch_program(
    request: LaunchRequest,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
) -> str | None:
    if shutil.which(request.program) is None:
        return f"program not found: {request.program}"
    return run_foreground([request.program, *request.args], request.cwd, disable_tui_mode, enable_tui_mode)


def default_opener() -> str | None:
    if sys.platform == "darwin":
        return "open"
    for name in ("xdg-open", "gio"):
        if shutil.which(name) is not None:
            return name
    return None


def open_with_default(path: Path) -> str | None:
    """Open ``path`` with the desktop's default handler, detached from the TUI."""
    opener = default_opener()
    if opener is None:
        return "no default opener found (xdg-open)"
    command = [opener, "open", str(path)] if opener == "gio" else [opener, str(path)]
    try:
        subprocess.Popen(
            command,
            cwd=path.parent,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        LOGGER.warning("failed to open %s with %s: %s", path, opener, exc)
        return f"failed to open {path.name}: {exc.strerror or exc}"
    return None
