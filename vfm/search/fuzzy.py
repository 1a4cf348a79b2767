"""Ranking of short labels (program names) against a typed query.

A label that contains the query as a substring always beats one that only
contains it as a scattered subsequence.
"""

from __future__ import annotations

WORD_BREAKS = frozenset("/_- .")
SUBSTRING_BASE = 10_000


def substring_index(query: str, candidate: str) -> int | None:
    """Case-insensitive ``str.find`` that returns ``None`` on a miss."""
    position = candidate.casefold().find(query.casefold())
    return None if position < 0 else position


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``query`` as an in-order subsequence of ``candidate``.

    Adjacent hits and hits at word starts earn points, gaps cost points and
    long candidates pay a small length tax. ``None`` means no match.
    """
    if not query:
        return 0
    haystack = candidate.casefold()
    total = -(len(haystack) // 5)
    last = -1
    streak = 0
    for char in query.casefold():
        hit = haystack.find(char, last + 1)
        if hit < 0:
            return None
        if hit == last + 1:
            streak += 1
            total += 20 + min(16, 4 * streak)
        else:
            streak = 0
            total -= min(40, 2 * (hit - last - 1))
        if hit == 0 or haystack[hit - 1] in WORD_BREAKS:
            total += 35
        last = hit
    return total


def fuzzy_match_labels(query: str, labels: list[str], limit: int | None = None) -> list[tuple[int, str, int]]:
    """Rank ``labels`` against ``query``.

    Returns ``(index, label, score)`` rows. An empty query keeps input order.
    Substring hits win; subsequence matching is the fallback when no label
    contains the query.
    """
    cap = len(labels) if limit is None else max(1, limit)
    if not query:
        return [(index, label, 0) for index, label in enumerate(labels)][:cap]

    by_position = []
    for index, label in enumerate(labels):
        position = substring_index(query, label)
        if position is not None:
            by_position.append(((position, len(label), label), index))
    if by_position:
        by_position.sort()
        return [
            (index, label, SUBSTRING_BASE - 50 * position - length)
            for (position, length, label), index in by_position[:cap]
        ]

    by_score = []
    for index, label in enumerate(labels):
        score = fuzzy_score(query, label)
        if score is not None:
            by_score.append(((-score, len(label), label), index))
    by_score.sort()
    return [(index, label, -negated) for (negated, _length, label), index in by_score[:cap]]
