"""Ordered marker store that persists every mutation before reporting success."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from ..errors import ALREADY_EXISTS, INVALID_NAME, NOT_FOUND, Failure, failure_from_os_error
from ..search import CompileError
from .filter import SCOPE_BOTH, search_markers
from .types import Marker, normalize_marker_path

LOGGER = logging.getLogger(__name__)

Persist = Callable[[tuple[Marker, ...]], None]


class MarkerStore:
    """Named bookmarks in insertion order.

    ``persist`` receives the complete new snapshot and must raise ``OSError``
    when the write fails; the in-memory store only changes after it returns.
    """

    def __init__(self, markers: Iterable[Marker] = (), persist: Persist | None = None) -> None:
        self._markers: tuple[Marker, ...] = tuple(markers)
        self._persist = persist

    @property
    def markers(self) -> tuple[Marker, ...]:
        return self._markers

    def __len__(self) -> int:
        return len(self._markers)

    def _index(self, name: str) -> int | None:
        for idx, marker in enumerate(self._markers):
            if marker.name == name:
                return idx
        return None

    def _commit(self, updated: tuple[Marker, ...]) -> Failure | None:
        if self._persist is not None:
            try:
                self._persist(updated)
            except OSError as exc:
                LOGGER.error("persisting markers failed", exc_info=True)
                return failure_from_os_error(exc, Path(exc.filename) if exc.filename else None)
        self._markers = updated
        return None

    def add(self, name: str, path: str | Path) -> Failure | None:
        name = name.strip()
        if not name:
            return Failure(INVALID_NAME, None, "marker name is empty")
        if self._index(name) is not None:
            return Failure(ALREADY_EXISTS, None, f"marker {name!r}")
        marker = Marker(name=name, path=normalize_marker_path(path))
        return self._commit(self._markers + (marker,))

    def rename(self, old_name: str, new_name: str) -> Failure | None:
        idx = self._index(old_name)
        if idx is None:
            return Failure(NOT_FOUND, None, f"marker {old_name!r}")
        new_name = new_name.strip()
        if not new_name:
            return Failure(INVALID_NAME, None, "marker name is empty")
        if new_name == old_name:
            return None
        if self._index(new_name) is not None:
            return Failure(ALREADY_EXISTS, None, f"marker {new_name!r}")
        updated = list(self._markers)
        updated[idx] = Marker(name=new_name, path=updated[idx].path)
        return self._commit(tuple(updated))

    def edit_path(self, name: str, new_path: str | Path) -> Failure | None:
        idx = self._index(name)
        if idx is None:
            return Failure(NOT_FOUND, None, f"marker {name!r}")
        if not str(new_path).strip():
            return Failure(INVALID_NAME, None, "marker path is empty")
        updated = list(self._markers)
        updated[idx] = Marker(name=name, path=normalize_marker_path(new_path))
        return self._commit(tuple(updated))

    def delete(self, name: str) -> Failure | None:
        idx = self._index(name)
        if idx is None:
            return Failure(NOT_FOUND, None, f"marker {name!r}")
        return self._commit(self._markers[:idx] + self._markers[idx + 1 :])

    def find(self, name: str) -> Path | None:
        idx = self._index(name.strip())
        if idx is None:
            return None
        return self._markers[idx].path

    def search(self, pattern: str, scope: str = SCOPE_BOTH) -> tuple[list[Marker], CompileError | None]:
        """Return the order-preserving filtered view for ``pattern``."""
        return search_markers(self._markers, pattern, scope)
