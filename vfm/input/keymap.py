"""Logical actions, default key bindings, and config-string key parsing.

Bindings are grouped by key context (``normal``, each prefix, ``marker_list``,
``open_with``). A configured override replaces the listed actions only; the
whole map is validated before use so callers never see a half-applied one.
"""

from __future__ import annotations

from collections.abc import Mapping

NAMED_KEYS: dict[str, str] = {
    "enter": "ENTER",
    "return": "ENTER",
    "esc": "ESC",
    "escape": "ESC",
    "tab": "TAB",
    "backspace": "BACKSPACE",
    "space": " ",
    "up": "UP",
    "down": "DOWN",
    "left": "LEFT",
    "right": "RIGHT",
    "home": "HOME",
    "end": "END",
    "delete": "DELETE",
    "pageup": "PAGE_UP",
    "pagedown": "PAGE_DOWN",
}

DEFAULT_BINDINGS: dict[str, dict[str, tuple[str, ...]]] = {
    "normal": {
        "quit": ("q",),
        "up": ("k", "up"),
        "down": ("j", "down"),
        "parent": ("h", "left", "backspace"),
        "open": ("l", "right", "enter"),
        "switch_pane": ("tab",),
        "toggle_mark": ("space",),
        "clear_search": ("esc",),
        "search": ("/",),
        "add": ("a",),
        "rename": ("r",),
        "delete": ("d",),
        "marker_set": ("m",),
        "marker_list": ("M",),
        "marker_jump": ("'",),
        "settings": ("s",),
        "view": ("v",),
        "copy": ("y",),
        "cut": ("x",),
        "paste": ("p",),
        "shell": ("S",),
        "open_with": ("o",),
        "open_with_quick": ("O",),
    },
    "add": {
        "add_dir": ("d",),
    },
    "settings": {
        "toggle_permissions": ("p",),
        "toggle_dates": ("d",),
        "toggle_owner": ("o",),
        "toggle_metadata": ("m",),
        "toggle_hidden": ("h",),
    },
    "view": {
        "toggle_permissions_column": ("p",),
        "toggle_owner_column": ("o",),
    },
    "copy": {
        "copy_path": ("p",),
    },
    "delete": {
        "confirm": ("d",),
    },
    "marker_list": {
        "close": ("esc", "q"),
        "up": ("k", "up"),
        "down": ("j", "down"),
        "open": ("enter", "l"),
        "rename": ("r",),
        "edit_path": ("e",),
        "delete": ("d",),
        "add": ("a",),
        "search": ("/",),
    },
    "open_with": {
        "close": ("esc",),
        "up": ("up",),
        "down": ("down",),
        "open": ("enter",),
        "backspace": ("backspace",),
    },
}


def parse_key(spec: str) -> str:
    """Turn a config key string into a key token.

    ``"k"`` stays ``"k"``, ``"enter"`` becomes ``"ENTER"``, ``"space"``
    becomes ``" "`` and ``"ctrl+c"`` becomes ``"CTRL_C"``. Raises
    ``ValueError`` for anything else.
    """
    if not isinstance(spec, str) or not spec:
        raise ValueError(f"invalid key: {spec!r}")
    if len(spec) == 1:
        if spec.isprintable():
            return spec
        raise ValueError(f"invalid key: {spec!r}")
    lowered = spec.strip().lower()
    if lowered.startswith("ctrl+") or lowered.startswith("ctrl-"):
        letter = lowered[5:]
        if len(letter) == 1 and "a" <= letter <= "z":
            return f"CTRL_{letter.upper()}"
        raise ValueError(f"invalid key: {spec!r}")
    token = NAMED_KEYS.get(lowered)
    if token is None:
        raise ValueError(f"invalid key: {spec!r}")
    return token


class Keymap:
    """Resolved key-token to action lookup per key context."""

    def __init__(self, bindings: Mapping[str, Mapping[str, tuple[str, ...]]]) -> None:
        self._actions: dict[str, dict[str, str]] = {}
        self._keys: dict[str, dict[str, tuple[str, ...]]] = {}
        for context, actions in bindings.items():
            lookup: dict[str, str] = {}
            tokens_by_action: dict[str, tuple[str, ...]] = {}
            for action, specs in actions.items():
                tokens = tuple(parse_key(spec) for spec in specs)
                for token in tokens:
                    existing = lookup.get(token)
                    if existing is not None and existing != action:
                        raise ValueError(f"{context}: key {token!r} bound to both {existing} and {action}")
                    lookup[token] = action
                tokens_by_action[action] = tokens
            self._actions[context] = lookup
            self._keys[context] = tokens_by_action

    def action_for(self, context: str, key: str) -> str | None:
        return self._actions.get(context, {}).get(key)

    def keys_for(self, context: str, action: str) -> tuple[str, ...]:
        return self._keys.get(context, {}).get(action, ())


def build_keymap(overrides: object = None) -> tuple[Keymap, list[str]]:
    """Merge ``overrides`` onto the defaults.

    Returns ``(keymap, warnings)``. Any invalid override discards all
    overrides and yields the default keymap plus one warning.
    """
    if overrides is None or overrides == {}:
        return Keymap(DEFAULT_BINDINGS), []
    try:
        merged = _merge_overrides(overrides)
        return Keymap(merged), []
    except ValueError as exc:
        return Keymap(DEFAULT_BINDINGS), [f"keys: {exc}; using default key bindings"]


def _merge_overrides(overrides: object) -> dict[str, dict[str, tuple[str, ...]]]:
    if not isinstance(overrides, dict):
        raise ValueError("expected an object of key contexts")
    merged = {context: dict(actions) for context, actions in DEFAULT_BINDINGS.items()}
    for context, actions in overrides.items():
        if context not in merged:
            raise ValueError(f"unknown key context {context!r}")
        if not isinstance(actions, dict):
            raise ValueError(f"{context}: expected an object of actions")
        for action, specs in actions.items():
            if action not in merged[context]:
                raise ValueError(f"{context}: unknown action {action!r}")
            if isinstance(specs, str):
                specs = [specs]
            if not isinstance(specs, list) or not specs:
                raise ValueError(f"{context}.{action}: expected a key or list of keys")
            merged[context][action] = tuple(specs)
    return merged
