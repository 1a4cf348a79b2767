"""Scope-prefixed marker search queries.

``n:``/``n/``/``name:``/``name/`` restrict matching to names,
``p:``/``p/``/``path:``/``path/`` to paths; anything else matches both.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..search import CompileError, compile_matcher, filter_candidates
from .types import Marker

SCOPE_NAME = "name"
SCOPE_PATH = "path"
SCOPE_BOTH = "both"

_SCOPE_PREFIXES: tuple[tuple[str, str], ...] = (
    ("name:", SCOPE_NAME),
    ("name/", SCOPE_NAME),
    ("path:", SCOPE_PATH),
    ("path/", SCOPE_PATH),
    ("n:", SCOPE_NAME),
    ("n/", SCOPE_NAME),
    ("p:", SCOPE_PATH),
    ("p/", SCOPE_PATH),
)


def parse_scope(query: str) -> tuple[str, str]:
    """Split ``query`` into ``(scope, pattern)``; prefixes ignore case."""
    folded = query.lower()
    for prefix, scope in _SCOPE_PREFIXES:
        if folded.startswith(prefix):
            return scope, query[len(prefix) :]
    return SCOPE_BOTH, query


def _marker_texts(scope: str):
    if scope == SCOPE_NAME:
        return lambda marker: marker.name
    if scope == SCOPE_PATH:
        return lambda marker: str(marker.path)
    return lambda marker: (marker.name, str(marker.path))


def search_markers(
    markers: Sequence[Marker],
    pattern: str,
    scope: str = SCOPE_BOTH,
) -> tuple[list[Marker], CompileError | None]:
    """Filter ``markers`` preserving order; a bad pattern matches nothing."""
    matcher = compile_matcher(pattern)
    matched = filter_candidates(matcher, markers, key=_marker_texts(scope))
    return matched, matcher if isinstance(matcher, CompileError) else None
