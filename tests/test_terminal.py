"""Tests for Terminal output and the color palette."""

import io

from livedash.terminal import ANSI, BASE_COLORS, COLOR_NAMES, Terminal, build_palette


def make_terminal(**kwargs):
    stream = io.StringIO()
    kwargs.setdefault("rows", 24)
    kwargs.setdefault("cols", 80)
    kwargs.setdefault("colors", 8)
    return Terminal(stream=stream, use_terminfo=False, **kwargs), stream


class TestPalette:

    def test_extended_colors_degrade_below_256(self):
        palette = build_palette(8)
        assert palette["orange"] == "\033[33m"
        assert palette["bright_red"] == "\033[91m"

    def test_extended_colors_with_256(self):
        palette = build_palette(256)
        assert palette["orange"] == "\033[38;5;208m"
        assert palette["red"] == BASE_COLORS["red"]

    def test_disabled_maps_everything_to_empty(self):
        palette = build_palette(256, enabled=False)
        assert set(palette) == set(COLOR_NAMES)
        assert all(value == "" for value in palette.values())


class TestTerminal:

    def test_explicit_dimensions(self):
        terminal, _ = make_terminal(rows=40, cols=120, colors=256)
        assert (terminal.rows, terminal.cols) == (40, 120)
        assert terminal.has_256_colors

    def test_move_is_one_based_ansi(self):
        terminal, stream = make_terminal()
        terminal.move(1, 1)
        terminal.move(12, 40)
        assert stream.getvalue() == "\033[1;1H\033[12;40H"

    def test_screen_modes_fall_back_to_ansi(self):
        terminal, stream = make_terminal()
        terminal.enter_alternate_screen()
        terminal.hide_cursor()
        terminal.clear_line()
        terminal.show_cursor()
        terminal.reset_attributes()
        terminal.exit_alternate_screen()
        assert stream.getvalue() == (
            ANSI["smcup"] + ANSI["civis"] + ANSI["el"] + ANSI["cnorm"] + ANSI["sgr0"] + ANSI["rmcup"]
        )

    def test_unknown_color_is_empty(self):
        terminal, _ = make_terminal()
        assert terminal.color("no-such-color") == ""
        assert terminal.color("green") == "\033[32m"

    def test_non_tty_skips_terminfo(self):
        """A StringIO is not a TTY, so probing never touches curses."""
        terminal = Terminal(stream=io.StringIO())
        assert terminal.rows > 0
        assert terminal.cols > 0
        terminal.move(2, 3)
        assert terminal.stream.getvalue() == "\033[2;3H"
