"""vfm: a keyboard-driven dual-pane terminal file manager.

The interactive entry point is ``vfm.cli.main``; ``main`` here defers that
import so that using the file model or operations does not pull in the
terminal runtime.
"""

from __future__ import annotations

__version__ = "0.3.0"


def main(argv: list[str] | None = None) -> None:
    from .cli import main as cli_main

    cli_main(argv)


__all__ = ["__version__", "main"]
