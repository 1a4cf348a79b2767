"""Session state machine, its mode variants, and render requests."""

from __future__ import annotations

from .modes import (
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
from .state import Session

__all__ = [
    "ConfirmDelete",
    "LaunchRequest",
    "MarkerList",
    "Mode",
    "Normal",
    "OpenWithPicker",
    "PendingPrefix",
    "RenderRequest",
    "Session",
    "ShellRequest",
    "ShellSuspended",
    "StatusMessage",
    "TextInput",
]
