"""Pending cut/copy clipboard owned by the session."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

CUT = "cut"
COPY = "copy"


@dataclass(frozen=True)
class Clipboard:
    """At most one pending operation: a mode plus absolute source paths."""

    mode: str
    source_paths: frozenset[Path]

    def summary(self) -> str:
        count = len(self.source_paths)
        noun = "item" if count == 1 else "items"
        return f"{self.mode}: {count} {noun}"


def _absolute_paths(paths: Iterable[Path]) -> frozenset[Path]:
    return frozenset(Path(path).absolute() for path in paths)


def cut(paths: Iterable[Path]) -> Clipboard | None:
    """Mark ``paths`` to be moved on the next paste. Touches nothing on disk."""
    sources = _absolute_paths(paths)
    if not sources:
        return None
    return Clipboard(mode=CUT, source_paths=sources)


def copy_mark(paths: Iterable[Path]) -> Clipboard | None:
    """Mark ``paths`` to be duplicated on every paste. Touches nothing on disk."""
    sources = _absolute_paths(paths)
    if not sources:
        return None
    return Clipboard(mode=COPY, source_paths=sources)
