"""Run vfm with ``python -m vfm``."""

from .cli import main

if __name__ == "__main__":
    main()
