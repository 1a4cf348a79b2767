"""Values the session hands back to the event loop after each key."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import BatchResult, Failure

LEVEL_INFO = "info"
LEVEL_WARNING = "warning"
LEVEL_ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    level: str
    text: str

    @classmethod
    def info(cls, text: str) -> StatusMessage:
        return cls(LEVEL_INFO, text)

    @classmethod
    def warning(cls, text: str) -> StatusMessage:
        return cls(LEVEL_WARNING, text)

    @classmethod
    def error(cls, text: str) -> StatusMessage:
        return cls(LEVEL_ERROR, text)

    @classmethod
    def from_failure(cls, failure: Failure) -> StatusMessage:
        return cls(LEVEL_ERROR, failure.describe())

    @classmethod
    def from_batch(cls, result: BatchResult) -> StatusMessage:
        if result.ok:
            return cls(LEVEL_INFO, result.summary())
        if result.partial:
            return cls(LEVEL_WARNING, result.summary())
        return cls(LEVEL_ERROR, result.summary())


@dataclass(frozen=True)
class ShellRequest:
    """Hand the terminal to an interactive shell rooted at ``cwd``."""

    cwd: Path


@dataclass(frozen=True)
class LaunchRequest:
    """Run ``program`` with ``args`` in ``cwd`` while the TUI is suspended."""

    program: str
    args: tuple[str, ...]
    cwd: Path


@dataclass(frozen=True)
class RenderRequest:
    redraw: bool = True
    quit: bool = False
    status: StatusMessage | None = None
    suspend: ShellRequest | LaunchRequest | None = None
    clipboard_text: str | None = None
    open_path: Path | None = None
