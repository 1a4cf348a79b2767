"""Tagged preview payloads produced by the resolver.

Each variant is a frozen value; renderers dispatch on the concrete type.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

MATCH = "match"
MISMATCH = "mismatch"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class MismatchCheck:
    """Outcome of comparing a file extension with its sniffed format."""

    status: str
    detected: str | None = None
    extension: str | None = None

    def describe(self) -> str:
        if self.status == MISMATCH:
            return f"extension .{self.extension} but content is {self.detected}"
        if self.status == MATCH:
            return "extension matches content"
        return "extension not checked"


@dataclass(frozen=True)
class TextPreview:
    path: Path
    lines: tuple[str, ...]
    truncated: bool = False


@dataclass(frozen=True)
class ImagePreview:
    path: Path
    width: int | None
    height: int | None
    format: str
    size_bytes: int
    mismatch: MismatchCheck | None = None

    @property
    def dimensions(self) -> str:
        if self.width is None or self.height is None:
            return "unknown"
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class BinaryPreview:
    path: Path
    size_bytes: int
    guessed_type: str


@dataclass(frozen=True)
class DirectoryPreview:
    path: Path
    entry_count: int


@dataclass(frozen=True)
class UnreadablePreview:
    """Preview that could not be produced; ``kind`` is a failure kind."""

    path: Path
    reason: str
    kind: str


PreviewContent = TextPreview | ImagePreview | BinaryPreview | DirectoryPreview | UnreadablePreview
