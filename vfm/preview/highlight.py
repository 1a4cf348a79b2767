"""Preview text sanitization and syntax coloring.

Pygments picks a lexer from the file name. If Pygments fails on a Python
file, a small ``tokenize``-based colorizer takes over.
"""

from __future__ import annotations

import io
import keyword
import logging
import re
import tokenize
from pathlib import Path

from pygments import highlight as pygments_highlight_text
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

LOGGER = logging.getLogger(__name__)

RESET = "\033[0m"

# C0 controls other than tab, newline and carriage return, then DEL and C1.
_UNSAFE_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_TOKEN_COLORS: dict[int, str] = {
    tokenize.STRING: "\033[32m",
    tokenize.COMMENT: "\033[90m",
    tokenize.NUMBER: "\033[36m",
    tokenize.OP: "\033[33m",
}
_KEYWORD_COLOR = "\033[1;34m"
_CONSTANT_COLOR = "\033[35m"

_FORMATTER = TerminalFormatter()


def sanitize_terminal_text(source: str) -> str:
    """Replace control characters with visible ``\\xNN`` escapes."""
    if _UNSAFE_CONTROL_RE.search(source) is None:
        return source
    return _UNSAFE_CONTROL_RE.sub(lambda match: f"\\x{ord(match.group()):02x}", source)


def _token_color(token: tokenize.TokenInfo) -> str:
    if token.type == tokenize.NAME:
        if token.string in {"True", "False", "None"}:
            return _CONSTANT_COLOR
        return _KEYWORD_COLOR if keyword.iskeyword(token.string) else ""
    return _TOKEN_COLORS.get(token.type, "")


def fallback_highlight(source: str) -> str:
    """Color Python ``source`` with the standard tokenizer.

    Returns ``source`` unchanged when it does not tokenize.
    """
    try:
        colored = [tok for tok in tokenize.generate_tokens(io.StringIO(source).readline) if _token_color(tok)]
    except (tokenize.TokenError, SyntaxError):
        return source

    line_starts = [0]
    for line in source.splitlines(keepends=True):
        line_starts.append(line_starts[-1] + len(line))

    out = source
    # Back to front, so earlier offsets stay valid.
    for tok in reversed(colored):
        begin = line_starts[tok.start[0] - 1] + tok.start[1]
        end = line_starts[tok.end[0] - 1] + tok.end[1]
        out = out[:begin] + _token_color(tok) + out[begin:end] + RESET + out[end:]
    return out


def colorize_source(source: str, path: Path) -> str:
    """Return ``source`` with ANSI colors for the language of ``path``.

    Plain text and files Pygments has no lexer for come back unchanged.
    """
    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False)
    except ClassNotFound:
        return source
    if isinstance(lexer, TextLexer):
        return source
    try:
        return pygments_highlight_text(source, lexer, _FORMATTER)
    except Exception:
        LOGGER.debug("pygments failed on %s", path, exc_info=True)
        return fallback_highlight(source) if path.suffix == ".py" else source


def colorize_lines(lines: tuple[str, ...] | list[str], path: Path) -> list[str]:
    """Color preview lines, one output line per input line.

    The plain lines are returned when highlighting changed the line count.
    """
    if not lines:
        return []
    colored = colorize_source("\n".join(lines), path).removesuffix("\n").split("\n")
    return colored if len(colored) == len(lines) else list(lines)
