"""Command-line front door for vfm.

Parses CLI options, configures logging, loads config and markers, resolves
both pane roots, then hands the session to the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from platformdirs import user_log_dir

from . import __version__
from .config import APP_NAME, ConfigError, config_path, load_config, load_explicit_config, resolve_config
from .file_model import nearest_existing_directory
from .markers import MarkerStore, load_markers, save_markers
from .runtime import run_app
from .session import Session, StatusMessage

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def default_log_file() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"


def configure_logging(level: str = "WARNING", log_file: Path | None = None) -> Path:
    """Send package logs to ``log_file``; the TUI owns stderr while running."""
    target = Path(log_file).expanduser() if log_file is not None else default_log_file()
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger(__package__ or APP_NAME)
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    package_logger.propagate = False
    return target


def resolve_start_directory(requested: Path) -> tuple[Path | None, str | None]:
    """Return a usable pane root for ``requested`` and a warning when it moved.

    Falls back to the nearest existing ancestor, then to the home directory.
    ``(None, message)`` means nothing usable was found.
    """
    requested = requested.expanduser().absolute()
    usable = nearest_existing_directory(requested)
    if usable is None:
        usable = nearest_existing_directory(Path.home())
    if usable is None:
        return None, f"cannot open {requested} or any parent"
    if usable != requested:
        return usable, f"{requested} is not accessible, using {usable}"
    return usable, None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="Dual-pane terminal file manager.")
    parser.add_argument("left", nargs="?", default=None, help="Left pane directory. Defaults to current directory.")
    parser.add_argument("right", nargs="?", default=None, help="Right pane directory. Defaults to current directory.")
    parser.add_argument("--config", type=Path, default=None, metavar="PATH", help="Config file to use.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for the log file (default: WARNING).",
    )
    parser.add_argument("--log-file", type=Path, default=None, metavar="PATH", help="Write logs to PATH.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_session(args: argparse.Namespace, cwd: Path) -> tuple[Session, list[str]]:
    """Load config and markers and resolve both panes; raises ``SystemExit`` when fatal."""
    warnings: list[str] = []
    try:
        raw = load_explicit_config(args.config) if args.config is not None else load_config(config_path())
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc
    config, config_warnings = resolve_config(raw)
    warnings.extend(config_warnings)

    roots: list[Path | None] = []
    for requested in (args.left, args.right):
        root, warning = resolve_start_directory(Path(requested) if requested else cwd)
        if warning:
            LOGGER.warning(warning)
            warnings.append(warning)
        roots.append(root)
    left, right = roots
    if left is None and right is None:
        raise SystemExit("vfm: no accessible directory for either pane")
    left = left if left is not None else right
    right = right if right is not None else left

    markers, marker_warning = load_markers()
    if marker_warning:
        warnings.append(marker_warning)
    store = MarkerStore(markers, persist=save_markers)

    return Session(left, right, config=config, markers=store), warnings


def main(argv: list[str] | None = None, cwd: Path | None = None) -> None:
    """Parse CLI arguments and run vfm until the user quits."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)
    if cwd is None:
        try:
            cwd = Path.cwd()
        except OSError:
            cwd = Path.home()
    session, warnings = build_session(args, cwd)
    initial_status = StatusMessage.warning("; ".join(warnings)) if warnings else None

    LOGGER.info("starting in %s and %s", session.panes[0].current_directory, session.panes[1].current_directory)
    run_app(session, session.config.theme, initial_status)


if __name__ == "__main__":
    main()
