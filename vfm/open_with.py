"""Open-with candidates: numbered quick slots plus programs found on ``$PATH``.

The resolver only decides which program and argument to launch. Whether the
program actually runs is for the spawn layer to find out.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .search import fuzzy_match_labels

LOGGER = logging.getLogger(__name__)

QUICK_SLOT_KEYS = tuple("0123456789")


@dataclass(frozen=True)
class Candidate:
    program: str
    slot: str | None = None

    @property
    def label(self) -> str:
        if self.slot is None:
            return self.program
        return f"{self.slot}: {self.program}"


def scan_programs(path_env: str | None = None) -> list[str]:
    """List executable names on ``path_env`` (default ``$PATH``).

    Names are deduplicated, first directory wins, and sorted
    case-insensitively. Unreadable directories are skipped.
    """
    search_path = os.environ.get("PATH", "") if path_env is None else path_env
    seen: set[str] = set()
    for directory in search_path.split(os.pathsep):
        if not directory:
            continue
        try:
            with os.scandir(directory) as children:
                for child in children:
                    if child.name in seen:
                        continue
                    try:
                        if not child.is_file():
                            continue
                    except OSError:
                        continue
                    if os.access(child.path, os.X_OK):
                        seen.add(child.name)
        except OSError:
            LOGGER.debug("skipping unreadable PATH entry %s", directory)
            continue
    return sorted(seen, key=lambda name: (name.casefold(), name))


class OpenWithResolver:
    """Merge configured quick slots with lazily discovered programs."""

    def __init__(
        self,
        quick_slots: dict[str, str] | None = None,
        discover: Callable[[], list[str]] = scan_programs,
    ) -> None:
        self.quick_slots = {
            slot: program
            for slot, program in sorted((quick_slots or {}).items())
            if slot in QUICK_SLOT_KEYS and program.strip()
        }
        self._discover = discover
        self._programs: list[str] | None = None

    def programs(self) -> list[str]:
        """Return discovered programs, scanning once per session."""
        if self._programs is None:
            self._programs = list(self._discover())
            LOGGER.debug("discovered %d programs", len(self._programs))
        return self._programs

    def candidates(self) -> list[Candidate]:
        """Quick slots in slot order, then every other known program."""
        merged = [Candidate(program=program, slot=slot) for slot, program in self.quick_slots.items()]
        quick_programs = set(self.quick_slots.values())
        merged.extend(Candidate(program=name) for name in self.programs() if name not in quick_programs)
        return merged

    def filter(self, query: str) -> list[Candidate]:
        """Narrow candidates by substring, falling back to fuzzy matching."""
        candidates = self.candidates()
        matches = fuzzy_match_labels(query, [candidate.label for candidate in candidates])
        return [candidates[idx] for idx, _label, _score in matches]

    def quick(self, slot: str) -> str | None:
        return self.quick_slots.get(slot)

    @staticmethod
    def command_for(program: str, target: Path) -> tuple[str, list[str]]:
        """Return ``(program, args)`` that opens ``target`` with ``program``."""
        return program, [str(target)]
