"""Name validation and collision-free copy naming."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from ..errors import INVALID_NAME, Failure


def validate_name(raw_name: str, directory: Path) -> tuple[str, Failure | None]:
    """Strip ``raw_name`` and reject names that cannot be a single path component."""
    name = raw_name.strip()
    if not name:
        return name, Failure(INVALID_NAME, directory, "name is empty")
    if name in {".", ".."}:
        return name, Failure(INVALID_NAME, directory / name, "reserved name")
    if "/" in name or "\0" in name or (os.sep != "/" and os.sep in name):
        return name, Failure(INVALID_NAME, directory / name, "name contains a path separator")
    return name, None


def copy_name_candidates(name: str, is_dir: bool) -> Iterator[str]:
    """Yield ``stem (copy)suffix``, ``stem (copy 2)suffix``, and so on."""
    if is_dir:
        stem, suffix = name, ""
    else:
        pure = Path(name)
        stem, suffix = pure.stem, pure.suffix
    yield f"{stem} (copy){suffix}"
    counter = 2
    while True:
        yield f"{stem} (copy {counter}){suffix}"
        counter += 1


def next_free_copy_target(directory: Path, name: str, is_dir: bool) -> Path:
    candidates = copy_name_candidates(name, is_dir)
    target = directory / next(candidates)
    while os.path.lexists(target):
        target = directory / next(candidates)
    return target
