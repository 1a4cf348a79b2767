"""Persistent JSON config loading and validation.

Loading is defensive: a missing or malformed file behaves like an empty one.
``resolve_config`` then turns the raw object into a complete ``AppConfig``,
replacing any invalid section with its default and reporting a warning.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .input import Keymap, build_keymap
from .open_with import QUICK_SLOT_KEYS
from .preview import DEFAULT_MAX_BYTES, DEFAULT_MAX_LINES
from .render.icons import Icons
from .render.theme import DEFAULT_COLORS, Theme, parse_color

LOGGER = logging.getLogger(__name__)

APP_NAME = "vfm"
CONFIG_FILENAME = "config.json"
CONFIG_ENV_VAR = "VFM_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LEGACY_CONFIG_PATH = Path.home() / ".vfm.json"
CONFIG_PATH = DEFAULT_CONFIG_PATH


class ConfigError(Exception):
    """Raised when an explicitly requested config file cannot be used."""


@dataclass(frozen=True)
class MetadataBarConfig:
    enabled: bool = False
    show_permissions: bool = True
    show_dates: bool = True
    show_owner: bool = True


@dataclass(frozen=True)
class PreviewConfig:
    max_lines: int = DEFAULT_MAX_LINES
    max_bytes: int = DEFAULT_MAX_BYTES


@dataclass(frozen=True)
class AppConfig:
    colors: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    metadata_bar: MetadataBarConfig = MetadataBarConfig()
    check_mismatch: bool = False
    show_hidden: bool = True
    preview: PreviewConfig = PreviewConfig()
    quick_slots: dict[str, str] = field(default_factory=dict)
    icons: Icons = Icons()
    keymap: Keymap = field(default_factory=lambda: build_keymap()[0])

    @property
    def theme(self) -> Theme:
        return Theme.from_colors(self.colors)


def config_path(explicit: Path | None = None) -> Path:
    """Return the config location in precedence order.

    ``explicit`` (from ``--config``) wins, then ``$VFM_CONFIG``, then the
    platform config dir, then the legacy dotfile when only it exists.
    """
    if explicit is not None:
        return Path(explicit).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path).expanduser()
    if CONFIG_PATH.exists():
        return CONFIG_PATH
    if CONFIG_PATH == DEFAULT_CONFIG_PATH and LEGACY_CONFIG_PATH.exists():
        return LEGACY_CONFIG_PATH
    return CONFIG_PATH


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    target = config_path() if path is None else path
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        LOGGER.warning("ignoring unreadable config %s: %s", target, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_explicit_config(path: Path) -> dict[str, object]:
    """Load a config file the user named; a missing file is an error."""
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigError(f"config file not found: {path}")
    return load_config(path)


def _resolve_colors(raw: object) -> dict[str, str]:
    if not isinstance(raw, dict):
        raise ValueError("expected an object")
    colors = dict(DEFAULT_COLORS)
    for name, value in raw.items():
        if name not in DEFAULT_COLORS:
            raise ValueError(f"unknown color slot {name!r}")
        parse_color(value)
        colors[name] = value
    return colors


def _resolve_bool_fields(raw: object, defaults: object) -> dict[str, bool]:
    if not isinstance(raw, dict):
        raise ValueError("expected an object")
    resolved: dict[str, bool] = {}
    for name, value in raw.items():
        if not hasattr(defaults, name):
            raise ValueError(f"unknown field {name!r}")
        if not isinstance(value, bool):
            raise ValueError(f"{name} must be true or false")
        resolved[name] = value
    return resolved


def _resolve_preview(raw: object) -> PreviewConfig:
    if not isinstance(raw, dict):
        raise ValueError("expected an object")
    values: dict[str, int] = {}
    for name in ("max_lines", "max_bytes"):
        if name not in raw:
            continue
        value = raw[name]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"{name} must be a positive integer")
        values[name] = value
    return PreviewConfig(**values)


def _resolve_quick_slots(raw: object) -> dict[str, str]:
    if not isinstance(raw, dict):
        raise ValueError("expected an object")
    quick = raw.get("quick", {})
    if not isinstance(quick, dict):
        raise ValueError("quick must map digits to programs")
    slots: dict[str, str] = {}
    for slot, program in quick.items():
        if slot not in QUICK_SLOT_KEYS:
            raise ValueError(f"quick slot {slot!r} is not a digit")
        if not isinstance(program, str) or not program.strip():
            raise ValueError(f"quick slot {slot} needs a program name")
        slots[slot] = program.strip()
    return slots


def _resolve_icons(raw: object) -> Icons:
    if not isinstance(raw, dict):
        raise ValueError("expected an object")
    known = Icons.field_names()
    for name, value in raw.items():
        if name not in known:
            raise ValueError(f"unknown icon {name!r}")
        if not isinstance(value, str):
            raise ValueError(f"icon {name} must be a string")
    return Icons(**raw)


def resolve_config(raw: dict[str, object]) -> tuple[AppConfig, list[str]]:
    """Validate ``raw`` section by section.

    Returns ``(config, warnings)``; each invalid section falls back to its
    default as a whole and adds one warning.
    """
    warnings: list[str] = []
    defaults = AppConfig()

    def section(name: str, resolver, fallback):
        if name not in raw:
            return fallback
        try:
            return resolver(raw[name])
        except ValueError as exc:
            warnings.append(f"{name}: {exc}; using defaults")
            return fallback

    colors = section("theme", _resolve_colors, defaults.colors)
    metadata_fields = section(
        "metadata_bar",
        lambda value: _resolve_bool_fields(value, defaults.metadata_bar),
        {},
    )
    preview = section("preview", _resolve_preview, defaults.preview)
    quick_slots = section("open_with", _resolve_quick_slots, {})
    icons = section("icons", _resolve_icons, defaults.icons)

    def flag(name: str, default: bool) -> bool:
        def check(value: object) -> bool:
            if not isinstance(value, bool):
                raise ValueError("must be true or false")
            return value

        return section(name, check, default)

    check_mismatch = flag("check_mismatch", defaults.check_mismatch)
    show_hidden = flag("show_hidden", defaults.show_hidden)

    keymap, key_warnings = build_keymap(raw.get("keys"))
    warnings.extend(key_warnings)

    for warning in warnings:
        LOGGER.warning("config %s", warning)

    return (
        AppConfig(
            colors=colors,
            metadata_bar=MetadataBarConfig(**metadata_fields),
            check_mismatch=check_mismatch,
            show_hidden=show_hidden,
            preview=preview,
            quick_slots=quick_slots,
            icons=icons,
            keymap=keymap,
        ),
        warnings,
    )
