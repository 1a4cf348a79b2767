"""Case-insensitive regular expression filtering over candidate sequences.

A malformed pattern compiles to ``CompileError`` instead of raising. Filtering
with a ``CompileError`` matches nothing; an empty pattern matches everything.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Matcher:
    pattern: str
    regex: re.Pattern[str] | None

    def matches(self, text: str) -> bool:
        if self.regex is None:
            return True
        return self.regex.search(text) is not None


@dataclass(frozen=True)
class CompileError:
    pattern: str
    message: str

    def matches(self, text: str) -> bool:
        return False

    def describe(self) -> str:
        return f"invalid pattern {self.pattern!r}: {self.message}"


def compile_matcher(pattern: str) -> Matcher | CompileError:
    """Compile ``pattern`` case-insensitively."""
    if not pattern:
        return Matcher(pattern="", regex=None)
    try:
        return Matcher(pattern=pattern, regex=re.compile(pattern, re.IGNORECASE))
    except re.error as exc:
        return CompileError(pattern=pattern, message=str(exc))


def filter_candidates(
    matcher: Matcher | CompileError,
    candidates: Sequence[T],
    key: Callable[[T], str | Iterable[str]] = str,
) -> list[T]:
    """Return the order-preserving subsequence of ``candidates`` that match.

    ``key`` returns the text to search, or several texts of which any may
    match.
    """
    if isinstance(matcher, CompileError):
        return []
    matched: list[T] = []
    for candidate in candidates:
        texts = key(candidate)
        if isinstance(texts, str):
            texts = (texts,)
        if any(matcher.matches(text) for text in texts):
            matched.append(candidate)
    return matched
