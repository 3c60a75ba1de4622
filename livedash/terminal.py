"""Terminal capabilities and escape-sequence output.

Capabilities come from terminfo through ``curses`` (the same lookups ``tput``
performs). When terminfo is unavailable, for example when output is not a
TTY, plain ANSI sequences and ``shutil.get_terminal_size`` are used instead.
"""

import curses
import logging
import os
import shutil
import sys
from typing import TextIO

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 24
DEFAULT_COLS = 80

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

BASE_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "underline": "\033[4m",
    "blink": "\033[5m",
    "reverse": "\033[7m",
    "noreverse": "\033[27m",
    "black": "\033[30m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "grey": "\033[90m",
    "bg_black": "\033[40m",
    "bg_red": "\033[41m",
    "bg_green": "\033[42m",
    "bg_yellow": "\033[43m",
    "bg_blue": "\033[44m",
    "bg_magenta": "\033[45m",
    "bg_cyan": "\033[46m",
    "bg_white": "\033[47m",
}

# name -> (256-color sequence, 16-color fallback)
EXTENDED_COLORS = {
    "bright_red": ("\033[38;5;196m", "\033[91m"),
    "bright_green": ("\033[38;5;46m", "\033[92m"),
    "bright_blue": ("\033[38;5;21m", "\033[94m"),
    "bright_yellow": ("\033[38;5;226m", "\033[93m"),
    "bright_magenta": ("\033[38;5;201m", "\033[95m"),
    "bright_cyan": ("\033[38;5;51m", "\033[96m"),
    "orange": ("\033[38;5;208m", "\033[33m"),
    "purple": ("\033[38;5;93m", "\033[35m"),
    "pink": ("\033[38;5;213m", "\033[95m"),
    "lime": ("\033[38;5;154m", "\033[92m"),
    "bg_reserved": ("\033[48;5;235m", "\033[40m"),
}

COLOR_NAMES = tuple(BASE_COLORS) + tuple(EXTENDED_COLORS)

# Fallback sequences when terminfo has no entry
ANSI = {
    "el": "\033[K",
    "clear": "\033[H\033[2J",
    "civis": "\033[?25l",
    "cnorm": "\033[?25h",
    "smcup": "\033[?1049h",
    "rmcup": "\033[?1049l",
    "sgr0": "\033[0m",
}


def build_palette(colors: int, enabled: bool = True) -> dict[str, str]:
    """Resolve every color name to an escape sequence.

    Extended colors degrade to their 16-color equivalents below 256 colors.
    With colors disabled every name maps to an empty string.
    """
    if not enabled:
        return {name: "" for name in COLOR_NAMES}

    palette = dict(BASE_COLORS)
    for name, (extended, fallback) in EXTENDED_COLORS.items():
        palette[name] = extended if colors >= 256 else fallback
    return palette


class Terminal:
    """Output side of the terminal: cursor addressing, screen modes, colors.

    Args:
        stream: Output stream (defaults to sys.stdout)
        rows, cols, colors: Explicit dimensions; probed when omitted
        use_terminfo: Look capabilities up through curses when possible
        enable_colors: Resolve color names to escape sequences
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        rows: int | None = None,
        cols: int | None = None,
        colors: int | None = None,
        use_terminfo: bool = True,
        enable_colors: bool = True,
    ):
        self.stream = stream if stream is not None else sys.stdout
        self._caps: dict[str, str] = {}
        self._cup: bytes | None = None

        probed_rows, probed_cols, probed_colors = self._probe(use_terminfo)
        self.rows = rows if rows is not None else probed_rows
        self.cols = cols if cols is not None else probed_cols
        self.colors = colors if colors is not None else probed_colors
        self.palette = build_palette(self.colors, enabled=enable_colors)

    @property
    def has_256_colors(self) -> bool:
        return self.colors >= 256

    def _probe(self, use_terminfo: bool) -> tuple[int, int, int]:
        """Detect rows, columns and color depth."""
        size = shutil.get_terminal_size((DEFAULT_COLS, DEFAULT_ROWS))
        rows, cols = size.lines, size.columns
        colors = 256 if "256color" in os.environ.get("TERM", "") else 8

        if not use_terminfo or not _isatty(self.stream):
            return rows, cols, colors

        try:
            curses.setupterm(fd=self.stream.fileno())
        except (curses.error, OSError, ValueError) as e:
            logger.debug(f"terminfo unavailable, using ANSI defaults: {e}")
            return rows, cols, colors

        terminfo_colors = curses.tigetnum("colors")
        if terminfo_colors > 0:
            colors = terminfo_colors

        self._cup = curses.tigetstr("cup")
        for cap in ANSI:
            seq = curses.tigetstr(cap)
            if seq:
                self._caps[cap] = seq.decode("latin-1")

        return rows, cols, colors

    def _cap(self, name: str) -> str:
        return self._caps.get(name, ANSI[name])

    # -- output ------------------------------------------------------------

    def write(self, text: str) -> None:
        self.stream.write(text)

    def flush(self) -> None:
        try:
            self.stream.flush()
        except (OSError, ValueError):
            pass

    def move(self, row: int, col: int) -> None:
        """Move the cursor to 1-based (row, col). No bounds checking here."""
        if self._cup is not None:
            self.write(curses.tparm(self._cup, row - 1, col - 1).decode("latin-1"))
        else:
            self.write(f"\033[{row};{col}H")

    def clear_line(self) -> None:
        """Erase from the cursor to the end of the line."""
        self.write(self._cap("el"))

    def clear(self) -> None:
        self.write(self._cap("clear"))

    def hide_cursor(self) -> None:
        self.write(self._cap("civis"))

    def show_cursor(self) -> None:
        self.write(self._cap("cnorm"))

    def enter_alternate_screen(self) -> None:
        self.write(self._cap("smcup"))

    def exit_alternate_screen(self) -> None:
        self.write(self._cap("rmcup"))

    def reset_attributes(self) -> None:
        self.write(self._cap("sgr0"))

    def color(self, name: str) -> str:
        """Escape sequence for a color/style name ('' when unknown)."""
        return self.palette.get(name, "")


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False
