"""Input layer: terminal key decoding, key maps, and action dispatch.

``read_key`` turns raw bytes into key tokens; ``Keymap`` maps tokens to
logical actions per key context; ``ActionRegistry`` binds actions to handlers.
"""

from .keymap import DEFAULT_BINDINGS, Keymap, build_keymap, parse_key
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key
from .registry import ActionRegistry

__all__ = [
    "ActionRegistry",
    "DEFAULT_BINDINGS",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "Keymap",
    "build_keymap",
    "parse_key",
    "read_key",
]
