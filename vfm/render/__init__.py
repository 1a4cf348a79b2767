"""Frame rendering: ANSI helpers, theme palette, and the dual-pane layout.

``frame`` depends on the session and is imported as a submodule, not re-exported.
"""

from .ansi import display_width, fit_ansi_line, truncate_middle
from .icons import NO_ICONS, Icons
from .theme import DEFAULT_COLORS, DEFAULT_THEME, Theme, parse_color

__all__ = [
    "DEFAULT_COLORS",
    "DEFAULT_THEME",
    "Icons",
    "NO_ICONS",
    "Theme",
    "display_width",
    "fit_ansi_line",
    "parse_color",
    "truncate_middle",
]
