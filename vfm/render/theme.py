"""Theme color parsing and the semantic ANSI palette used by renderers.

Colors are named (``"red"``, ``"lightblue"``), hex (``"#1e90ff"``) or a
256-color index (``"42"``). Each parses to SGR parameters for foreground and
background use.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_NAMED_COLORS: dict[str, int] = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    "gray": 60,
    "grey": 60,
    "darkgray": 60,
    "darkgrey": 60,
    "lightred": 61,
    "lightgreen": 62,
    "lightyellow": 63,
    "lightblue": 64,
    "lightmagenta": 65,
    "lightcyan": 66,
    "lightwhite": 67,
}

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{6})$")

DEFAULT_COLORS: dict[str, str] = {
    "background": "black",
    "foreground": "white",
    "selection_bg": "blue",
    "selection_fg": "black",
    "accent": "cyan",
    "folder": "lightblue",
    "warning": "yellow",
    "error": "red",
}


@dataclass(frozen=True)
class Color:
    """SGR parameter strings for one parsed color."""

    fg: str
    bg: str


def parse_color(value: str) -> Color:
    """Parse a theme color string; raises ``ValueError`` when unrecognized."""
    if not isinstance(value, str):
        raise ValueError(f"invalid color: {value!r}")
    text = value.strip().lower().replace("_", "").replace(" ", "")
    if text == "reset" or text == "default":
        return Color(fg="39", bg="49")
    named = _NAMED_COLORS.get(text)
    if named is not None:
        return Color(fg=str(30 + named), bg=str(40 + named))
    match = _HEX_RE.match(text)
    if match is not None:
        raw = match.group(1)
        red, green, blue = (int(raw[idx : idx + 2], 16) for idx in (0, 2, 4))
        return Color(fg=f"38;2;{red};{green};{blue}", bg=f"48;2;{red};{green};{blue}")
    if text.isdigit() and 0 <= int(text) <= 255:
        return Color(fg=f"38;5;{text}", bg=f"48;5;{text}")
    raise ValueError(f"invalid color: {value!r}")


def sgr(*params: str) -> str:
    joined = ";".join(param for param in params if param)
    return f"\033[{joined}m" if joined else ""


@dataclass(frozen=True)
class Theme:
    """Semantic ANSI palette used by renderers."""

    base: str
    selection: str
    accent: str
    folder: str
    warning: str
    error: str
    dim: str = "\033[2m"
    reverse: str = "\033[7m"
    reset: str = "\033[0m"

    @classmethod
    def from_colors(cls, colors: dict[str, str]) -> Theme:
        """Build the palette from validated color strings."""
        parsed = {name: parse_color(colors.get(name, default)) for name, default in DEFAULT_COLORS.items()}
        background = parsed["background"].bg
        return cls(
            base=sgr(parsed["foreground"].fg, background),
            selection=sgr(parsed["selection_fg"].fg, parsed["selection_bg"].bg),
            accent=sgr(parsed["accent"].fg, background),
            folder=sgr("1", parsed["folder"].fg, background),
            warning=sgr(parsed["warning"].fg, background),
            error=sgr("1", parsed["error"].fg, background),
        )


DEFAULT_THEME = Theme.from_colors(DEFAULT_COLORS)
