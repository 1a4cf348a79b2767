"""Failure taxonomy shared by file operations, markers, and previews.

Operations never raise for filesystem reasons. They catch ``OSError`` where
it happens and return one of these values so the session can surface it on
the status line and keep running.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass
from pathlib import Path

NOT_FOUND = "not_found"
PERMISSION_DENIED = "permission_denied"
ALREADY_EXISTS = "already_exists"
INVALID_NAME = "invalid_name"
CROSS_BOUNDARY_MOVE_FAILED = "cross_boundary_move_failed"
INVALID_TARGET = "invalid_target"
IO_ERROR = "io_error"

FAILURE_LABELS: dict[str, str] = {
    NOT_FOUND: "not found",
    PERMISSION_DENIED: "permission denied",
    ALREADY_EXISTS: "already exists",
    INVALID_NAME: "invalid name",
    CROSS_BOUNDARY_MOVE_FAILED: "move across filesystems failed",
    INVALID_TARGET: "invalid target",
    IO_ERROR: "I/O error",
}

_ERRNO_KINDS: dict[int, str] = {
    errno.ENOENT: NOT_FOUND,
    errno.ENOTDIR: NOT_FOUND,
    errno.EACCES: PERMISSION_DENIED,
    errno.EPERM: PERMISSION_DENIED,
    errno.EROFS: PERMISSION_DENIED,
    errno.EEXIST: ALREADY_EXISTS,
    errno.ENOTEMPTY: ALREADY_EXISTS,
    errno.EXDEV: CROSS_BOUNDARY_MOVE_FAILED,
    errno.EINVAL: INVALID_TARGET,
}


@dataclass(frozen=True)
class Failure:
    """One typed failure attached to the path it concerns."""

    kind: str
    path: Path | None
    message: str = ""

    def describe(self) -> str:
        """Return a one-line human readable description."""
        label = FAILURE_LABELS.get(self.kind, self.kind)
        subject = self.path.name if self.path is not None and self.path.name else str(self.path or "")
        detail = f": {self.message}" if self.message else ""
        if subject:
            return f"{subject}: {label}{detail}"
        return f"{label}{detail}"


def failure_from_os_error(exc: OSError, path: Path | None) -> Failure:
    """Classify an ``OSError`` into the failure taxonomy."""
    kind = _ERRNO_KINDS.get(exc.errno or 0, IO_ERROR)
    if isinstance(exc, FileNotFoundError):
        kind = NOT_FOUND
    elif isinstance(exc, PermissionError):
        kind = PERMISSION_DENIED
    elif isinstance(exc, FileExistsError):
        kind = ALREADY_EXISTS
    return Failure(kind=kind, path=path, message=exc.strerror or str(exc))


@dataclass(frozen=True)
class PathOutcome:
    """Result of one item in a batch operation."""

    path: Path
    failure: Failure | None = None
    destination: Path | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(frozen=True)
class BatchResult:
    """Aggregated per-path outcomes of a batch operation.

    Items are attempted independently; one failure never stops the rest.
    ``refresh_dirs`` lists directories whose listings changed.
    """

    operation: str
    outcomes: tuple[PathOutcome, ...] = ()
    refresh_dirs: frozenset[Path] = frozenset()

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def partial(self) -> bool:
        """True when some items succeeded and some failed."""
        return any(outcome.ok for outcome in self.outcomes) and not self.ok

    @property
    def failures(self) -> tuple[Failure, ...]:
        return tuple(outcome.failure for outcome in self.outcomes if outcome.failure is not None)

    @property
    def succeeded(self) -> tuple[PathOutcome, ...]:
        return tuple(outcome for outcome in self.outcomes if outcome.ok)

    def summary(self) -> str:
        """Summarize the batch for the status line."""
        total = len(self.outcomes)
        if total == 0:
            return f"{self.operation}: nothing to do"
        failures = self.failures
        if not failures:
            noun = "item" if total == 1 else "items"
            return f"{self.operation}: {total} {noun} done"
        if len(failures) == 1 and total == 1:
            return f"{self.operation} failed: {failures[0].describe()}"
        head = failures[0].describe()
        more = f" (+{len(failures) - 1} more)" if len(failures) > 1 else ""
        return f"{self.operation}: {total - len(failures)}/{total} done, failed {head}{more}"
