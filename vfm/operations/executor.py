"""Filesystem mutations: create, rename, delete, and paste.

Every function catches ``OSError`` where it happens and reports it as a
``Failure``. Batch operations attempt each path independently and never roll
back items that already succeeded.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from ..errors import (
    ALREADY_EXISTS,
    CROSS_BOUNDARY_MOVE_FAILED,
    INVALID_TARGET,
    NOT_FOUND,
    BatchResult,
    Failure,
    PathOutcome,
    failure_from_os_error,
)
from ..file_model import Entry
from .clipboard import CUT, Clipboard
from .names import next_free_copy_target, validate_name

LOGGER = logging.getLogger(__name__)


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def _log_outcome(operation: str, outcome: PathOutcome) -> None:
    if outcome.failure is not None:
        LOGGER.warning("%s %s failed: %s", operation, outcome.path, outcome.failure.describe())


def _finish_batch(operation: str, outcomes: list[PathOutcome], refresh_dirs: set[Path]) -> BatchResult:
    result = BatchResult(operation=operation, outcomes=tuple(outcomes), refresh_dirs=frozenset(refresh_dirs))
    LOGGER.info("%s: %d ok, %d failed", operation, len(result.succeeded), len(result.failures))
    return result


def create_file(directory: Path, name: str) -> PathOutcome:
    """Create an empty file ``name`` in ``directory``; never truncates."""
    name, failure = validate_name(name, directory)
    target = directory / name
    if failure is None:
        if os.path.lexists(target):
            failure = Failure(ALREADY_EXISTS, target)
        else:
            try:
                fd = os.open(target, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o666)
                os.close(fd)
            except OSError as exc:
                failure = failure_from_os_error(exc, target)
    outcome = PathOutcome(path=target, failure=failure)
    _log_outcome("create file", outcome)
    return outcome


def create_dir(directory: Path, name: str) -> PathOutcome:
    """Create directory ``name`` in ``directory``."""
    name, failure = validate_name(name, directory)
    target = directory / name
    if failure is None:
        if os.path.lexists(target):
            failure = Failure(ALREADY_EXISTS, target)
        else:
            try:
                os.mkdir(target)
            except OSError as exc:
                failure = failure_from_os_error(exc, target)
    outcome = PathOutcome(path=target, failure=failure)
    _log_outcome("create directory", outcome)
    return outcome


def rename(path: Path, new_name: str) -> PathOutcome:
    """Rename ``path`` within its directory; refuses to replace a sibling."""
    directory = path.parent
    new_name, failure = validate_name(new_name, directory)
    target = directory / new_name
    if failure is None and not os.path.lexists(path):
        failure = Failure(NOT_FOUND, path)
    if failure is None and target != path:
        # Case-only renames on case-insensitive filesystems resolve to the same file.
        same_file = False
        if os.path.lexists(target):
            try:
                same_file = os.path.samefile(path, target)
            except OSError:
                same_file = False
            if not same_file:
                failure = Failure(ALREADY_EXISTS, target)
        if failure is None:
            try:
                os.rename(path, target)
            except OSError as exc:
                failure = failure_from_os_error(exc, path)
    outcome = PathOutcome(path=path, failure=failure, destination=target)
    _log_outcome("rename", outcome)
    return outcome


def _remove_path(path: Path) -> None:
    if _is_real_dir(path):
        shutil.rmtree(path)
    else:
        os.unlink(path)


def delete(paths: Iterable[Path]) -> BatchResult:
    """Delete every path independently; directories are removed recursively."""
    outcomes: list[PathOutcome] = []
    refresh_dirs: set[Path] = set()
    for path in paths:
        path = Path(path)
        failure: Failure | None = None
        if not os.path.lexists(path):
            failure = Failure(NOT_FOUND, path)
        else:
            try:
                _remove_path(path)
            except OSError as exc:
                failure = failure_from_os_error(exc, Path(exc.filename) if exc.filename else path)
            refresh_dirs.add(path.parent)
        outcome = PathOutcome(path=path, failure=failure)
        _log_outcome("delete", outcome)
        outcomes.append(outcome)
    return _finish_batch("delete", outcomes, refresh_dirs)


def _copy_any(source: Path, target: Path) -> None:
    if _is_real_dir(source):
        shutil.copytree(source, target, symlinks=True)
    else:
        shutil.copy2(source, target, follow_symlinks=False)


def _discard_partial(target: Path) -> None:
    if not os.path.lexists(target):
        return
    try:
        _remove_path(target)
    except OSError:
        LOGGER.error("could not remove partial copy %s", target, exc_info=True)


def _copy_into(source: Path, target: Path) -> Failure | None:
    try:
        _copy_any(source, target)
    except OSError as exc:
        _discard_partial(target)
        return failure_from_os_error(exc, source)
    return None


def _move_across_devices(source: Path, target: Path) -> Failure | None:
    failure = _copy_into(source, target)
    if failure is not None:
        return failure
    try:
        _remove_path(source)
    except OSError as exc:
        return Failure(CROSS_BOUNDARY_MOVE_FAILED, source, f"copied, but source not removed: {exc.strerror or exc}")
    return None


def _move(source: Path, target: Path) -> Failure | None:
    try:
        os.rename(source, target)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            return failure_from_os_error(exc, source)
        LOGGER.info("moving %s across filesystems", source)
        return _move_across_devices(source, target)
    return None


def _is_within(candidate: Path, ancestor: Path) -> bool:
    try:
        candidate_resolved = candidate.resolve()
        ancestor_resolved = ancestor.resolve()
    except OSError:
        return False
    return candidate_resolved == ancestor_resolved or candidate_resolved.is_relative_to(ancestor_resolved)


def _paste_one(clipboard: Clipboard, source: Path, destination_dir: Path) -> PathOutcome:
    if not os.path.lexists(source):
        return PathOutcome(path=source, failure=Failure(NOT_FOUND, source))
    if _is_real_dir(source) and _is_within(destination_dir, source):
        return PathOutcome(
            path=source,
            failure=Failure(INVALID_TARGET, source, "cannot paste a directory into itself"),
        )

    target = destination_dir / source.name
    if clipboard.mode == CUT:
        if os.path.lexists(target):
            return PathOutcome(path=source, failure=Failure(ALREADY_EXISTS, target), destination=target)
        return PathOutcome(path=source, failure=_move(source, target), destination=target)

    if os.path.lexists(target):
        target = next_free_copy_target(destination_dir, source.name, _is_real_dir(source))
    return PathOutcome(path=source, failure=_copy_into(source, target), destination=target)


def paste(clipboard: Clipboard, destination_dir: Path) -> tuple[BatchResult, Clipboard | None]:
    """Apply the clipboard to ``destination_dir``.

    Cut moves each path and skips names that already exist at the
    destination. Copy duplicates each path, choosing a free ``(copy)`` name on
    collision. Returns the batch result and the clipboard to keep: Copy stays
    as is; Cut keeps only the paths that failed.
    """
    destination_dir = Path(destination_dir).absolute()
    operation = "move" if clipboard.mode == CUT else "copy"
    outcomes: list[PathOutcome] = []
    refresh_dirs: set[Path] = {destination_dir}
    for source in sorted(clipboard.source_paths):
        outcome = _paste_one(clipboard, source, destination_dir)
        _log_outcome(operation, outcome)
        outcomes.append(outcome)
        if clipboard.mode == CUT:
            refresh_dirs.add(source.parent)

    result = _finish_batch(operation, outcomes, refresh_dirs)
    if clipboard.mode != CUT:
        return result, clipboard
    remaining = frozenset(outcome.path for outcome in outcomes if not outcome.ok)
    if not remaining:
        return result, None
    return result, Clipboard(mode=CUT, source_paths=remaining)


def copy_path_to_clipboard_text(entry: Entry) -> str:
    """Return the absolute path string for the OS clipboard."""
    return str(Path(entry.path).absolute())
