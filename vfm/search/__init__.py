"""Search helpers: regex filtering for entries and markers, fuzzy label ranking."""

from __future__ import annotations

from .fuzzy import fuzzy_match_labels, fuzzy_score, substring_index
from .regex import CompileError, Matcher, compile_matcher, filter_candidates

__all__ = [
    "CompileError",
    "Matcher",
    "compile_matcher",
    "filter_candidates",
    "fuzzy_match_labels",
    "fuzzy_score",
    "substring_index",
]
