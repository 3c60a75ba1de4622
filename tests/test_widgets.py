"""Tests for the widget renderers and their pure helpers."""

import io

import pytest

from livedash.config import DashboardConfig
from livedash.screen import Screen
from livedash.terminal import Terminal
from livedash.widgets import (
    combo_box,
    display_text,
    fill_width,
    normalize_samples,
    normalize_state,
    progress_bar,
    resolve_progress,
    resolve_selection,
    slider,
    slider_position,
    sparkline,
    spinner,
    spinner_frames,
    toggle,
)
from livedash.widgets.combo import PLACEHOLDER
from livedash.widgets.progress import clamp_percent, is_relative, slot_row
from livedash.widgets.sparkline import SPARK_CHARS
from livedash.widgets.spinner import SPINNER_STYLES


class TestProgressHelpers:

    @pytest.mark.parametrize("value,width,expected", [
        (0, 40, 0), (50, 40, 20), (100, 40, 40), (33, 10, 3), (150, 10, 10), (-5, 10, 0),
    ])
    def test_fill_width(self, value, width, expected):
        assert fill_width(value, width) == expected

    def test_relative_detection(self):
        assert is_relative("+5")
        assert is_relative("-5")
        assert not is_relative("5")
        assert not is_relative(-5)

    @pytest.mark.parametrize("prior,delta", [(0, 5), (50, 30), (90, 40), (10, -30), (100, -100), (0, -1)])
    def test_relative_update_is_clamped_sum(self, prior, delta):
        assert resolve_progress(delta, True, prior) == clamp_percent(prior + delta)

    def test_absolute_ignores_prior(self):
        assert resolve_progress(30, False, 90) == 30
        assert resolve_progress(250, False, 0) == 100

    def test_slot_rows(self):
        assert [slot_row(i) for i in range(4)] == [2, 4, 6, 8]


class TestProgressBar:

    def test_absolute_value_stored(self, screen):
        assert progress_bar(screen, id="cpu", val=50, width=20, label="CPU")
        assert screen.state.get("cpu", "value") == 50
        assert screen.state.get("cpu", "width") == 20
        assert screen.state.get("cpu", "label") == "CPU"
        assert screen.state.get("cpu", "color") == "green"

    def test_values_clamped(self, screen):
        progress_bar(screen, id="a", val=150)
        progress_bar(screen, id="b", val=-20)
        assert screen.state.get("a", "value") == 100
        assert screen.state.get("b", "value") == 0

    def test_relative_updates_accumulate(self, screen):
        """Stored value is always clamp(prior + delta, 0, 100)."""
        progress_bar(screen, id="cpu", val=50)
        expected = 50
        for delta in ("+5", "+30", "+40", "-10", "-200", "+7"):
            progress_bar(screen, "id=cpu", f"val={delta}")
            expected = max(0, min(100, expected + int(delta)))
            assert screen.state.get("cpu", "value") == expected

    def test_relative_first_update_starts_from_zero(self, screen):
        progress_bar(screen, id="fresh", val="+15")
        assert screen.state.get("fresh", "value") == 15

    def test_bar_rows_follow_first_render_order(self, screen, stream):
        progress_bar(screen, id="first", val=1)
        progress_bar(screen, id="second", val=1)
        raw = stream.getvalue()
        assert raw.index("\033[2;2H") < raw.index("\033[4;2H")

        stream.seek(0)
        stream.truncate()
        progress_bar(screen, id="first", val=2)
        assert stream.getvalue().startswith("\033[2;2H")

    def test_bars_past_separator_skipped_with_one_warning(self, screen, stream):
        for i in range(4):
            progress_bar(screen, id=f"bar{i}", val=10)
        stream.seek(0)
        stream.truncate()

        assert progress_bar(screen, id="bar4", val=10) is True
        assert progress_bar(screen, id="bar4", val=20) is True

        assert "\033[10;2H" not in stream.getvalue()
        warnings = [e for e in screen.log_buffer.snapshot() if "Too many progress bars" in e.text]
        assert len(warnings) == 1
        assert screen.state.get("bar4", "value") == 20

    def test_render_complete_and_incomplete(self, screen, output, stream):
        progress_bar(screen, id="done", val=100, width=10, label="Done")
        text = output()
        assert "Done:" in text
        assert "█" * 10 in text
        assert "100%" in text
        assert "✓" in text

        stream.seek(0)
        stream.truncate()
        progress_bar(screen, id="half", val=50, width=10)
        text = output()
        assert "█" * 5 + "░" * 5 in text
        assert " 50%" in text
        assert "✓" not in text
        assert any(frame in text for frame in SPINNER_STYLES["braille"])

    def test_hide_percent(self, screen, output):
        progress_bar(screen, id="p", val=42, show_percent="false")
        assert "42%" not in output()

    def test_gradient_on_256_colors(self):
        stream = io.StringIO()
        terminal = Terminal(stream=stream, rows=24, cols=80, colors=256, use_terminfo=False)
        screen = Screen(terminal=terminal)
        progress_bar(screen, id="g", val=100, width=4)
        assert "\033[38;5;232m" in stream.getvalue()

    def test_config_defaults_apply(self, terminal):
        config = DashboardConfig(widget_defaults={"progress_width": 12, "progress_color": "blue"})
        screen = Screen(terminal=terminal, config=config)
        progress_bar(screen, id="p", val=1)
        assert screen.state.get("p", "width") == 12
        assert screen.state.get("p", "color") == "blue"


class TestSpinner:

    def test_frames_for_style(self):
        assert spinner_frames("pipe") == ("|", "/", "-", "\\")
        assert spinner_frames("unknown") == SPINNER_STYLES["braille"]

    def test_frame_advances_and_wraps(self, screen, output, stream):
        shown = []
        for _ in range(6):
            stream.seek(0)
            stream.truncate()
            spinner(screen, id="s", style="pipe", message="Working")
            shown.append(output().split(" ")[0])
        assert shown == ["|", "/", "-", "\\", "|", "/"]
        assert screen.state.get("s", "frame") == 2
        assert "Working" in output()

    def test_first_render_fixes_style_and_message(self, screen, output):
        spinner(screen, id="s", style="pipe", message="First")
        spinner(screen, id="s", style="dots", message="Second")
        assert screen.state.get("s", "style") == "pipe"
        assert screen.state.get("s", "message") == "First"
        assert "Second" not in output()

    def test_defaults(self, screen, output):
        spinner(screen, id="s")
        assert "⠋ Loading..." in output()
        assert screen.state.get("s", "active") is True


class TestSparkline:

    def test_normalize_range(self):
        assert normalize_samples([0, 7]) == [0, 7]
        assert normalize_samples([10, 20, 30]) == [0, 3, 7]

    def test_flat_series_is_level_zero(self):
        assert normalize_samples([5, 5, 5]) == [0, 0, 0]

    def test_empty(self):
        assert normalize_samples([]) == []

    @pytest.mark.parametrize("samples", [
        [1, 2, 3, 4, 5, 6, 7, 8],
        [-50, -10, 0, 3, 3, 90],
        [100, 1000, 10000],
        list(range(0, 300, 7)),
    ])
    def test_monotonic(self, samples):
        """Sorted input gives non-decreasing levels inside [0, levels-1]."""
        levels = normalize_samples(sorted(samples))
        assert levels == sorted(levels)
        assert all(0 <= level <= 7 for level in levels)

    def test_explicit_bounds_clamp(self):
        assert normalize_samples([-10, 50, 500], low=0, high=100) == [0, 3, 7]

    def test_render(self, screen, output):
        assert sparkline(screen, id="cpu", data="1,8,4", label="CPU") is True
        text = output()
        assert "CPU:" in text
        assert SPARK_CHARS[0] + SPARK_CHARS[7] + SPARK_CHARS[3] in text
        assert "[1-8]" in text
        assert screen.state.slice("cpu") == {
            "kind": "sparkline", "data": "1,8,4", "min": 1, "max": 8, "width": 40, "height": 8,
        }

    def test_at_most_width_samples(self, screen, output):
        sparkline(screen, id="s", data=list(range(10)), width=4)
        text = output()
        assert SPARK_CHARS[0] + SPARK_CHARS[0] + SPARK_CHARS[1] + SPARK_CHARS[2] + " " in text

    def test_empty_data_is_an_error(self, screen):
        assert sparkline(screen, id="s", data=[]) is False
        assert "non-empty" in screen.log_buffer.snapshot()[-1].text

    def test_non_integer_data_is_an_error(self, screen):
        assert sparkline(screen, id="s", data="1,two,3") is False


class TestSlider:

    @pytest.mark.parametrize("value,low,high,width,expected", [
        (0, 0, 100, 30, 0),
        (50, 0, 100, 30, 14),
        (100, 0, 100, 30, 28),
        (5, 5, 5, 10, 0),
        (15, 10, 20, 12, 5),
    ])
    def test_position(self, value, low, high, width, expected):
        assert slider_position(value, low, high, width) == expected

    def test_value_clamped(self, screen):
        slider(screen, id="v", value=150, min=0, max=100)
        assert screen.state.get("v", "value") == 100
        slider(screen, id="v", value=-3, min=0, max=100)
        assert screen.state.get("v", "value") == 0

    def test_render(self, screen, output):
        slider(screen, id="v", value=50, width=12, label="Volume")
        text = output()
        assert "Volume:" in text
        assert "┌" + "█" * 5 + "●" + "░" * 4 + "┐" in text
        assert " 50" in text
        assert "[0-100]" in text

    def test_handle_stays_on_track_at_max(self, screen, output):
        slider(screen, id="v", value=100, width=6)
        assert "┌███●┐" in output()

    def test_degenerate_range(self, screen):
        assert slider(screen, id="v", value=3, min=3, max=3) is True

    def test_value_required(self, screen):
        assert slider(screen, id="v") is False
        assert "missing required parameters: value" in screen.log_buffer.snapshot()[-1].text


class TestToggle:

    @pytest.mark.parametrize("value,expected", [
        ("true", "on"), ("on", "on"), ("1", "on"), ("yes", "on"), (True, "on"),
        ("off", "off"), ("nope", "off"), (None, "off"), (False, "off"),
    ])
    def test_normalize_state(self, value, expected):
        assert normalize_state(value) == expected

    def test_render_on(self, screen, output):
        toggle(screen, id="t", state="yes", label="Power")
        text = output()
        assert "Power:" in text
        assert "ON" in text
        assert screen.state.get("t", "state") == "on"
        assert screen.state.get("t", "label") == "Power"

    def test_default_off(self, screen, output):
        toggle(screen, id="t")
        assert "OFF" in output()
        assert screen.state.get("t", "state") == "off"

    def test_explicit_position(self, screen, stream):
        toggle(screen, id="t", row=5, col=3)
        assert stream.getvalue().startswith("\033[5;3H")

    def test_position_clamped(self, screen, stream):
        toggle(screen, id="t", row=99, col=3)
        assert stream.getvalue().startswith("\033[24;3H")


class TestComboBox:

    @pytest.mark.parametrize("selected,count,allow_custom,expected", [
        (1, 3, True, 1),
        ("2", 3, False, 2),
        ("abc", 3, True, 0),
        (-1, 3, True, 0),
        (5, 3, False, 0),
        (3, 3, True, 3),
    ])
    def test_resolve_selection(self, selected, count, allow_custom, expected):
        assert resolve_selection(selected, count, allow_custom) == expected

    def test_display_text(self):
        options = ["Auto", "Manual"]
        assert display_text(options, 1, True, "") == "Manual"
        assert display_text(options, 2, True, "Custom mode") == "Custom mode"
        assert display_text(options, 2, True, "") == PLACEHOLDER

    def test_render(self, screen, output):
        combo_box(screen, id="mode", options="Auto,Manual,Debug", selected=1, label="Mode")
        text = output()
        assert "Mode:" in text
        assert "Manual" in text
        assert "▼" in text
        assert screen.state.get("mode", "selected") == 1
        assert screen.state.get("mode", "options") == "Auto,Manual,Debug"
        assert screen.state.get("mode", "expanded") is False

    def test_invalid_selection_resets(self, screen):
        combo_box(screen, id="mode", options="Auto,Manual", selected=9, allow_custom="false")
        assert screen.state.get("mode", "selected") == 0

    def test_custom_text(self, screen, output):
        combo_box(screen, id="mode", options="Auto", selected=1, custom_text="Nightly")
        assert "Nightly" in output()

    def test_long_option_truncated(self, screen, output):
        combo_box(screen, id="mode", options="A really long option label", width=12)
        assert "A rea..." in output()
        assert "A really" not in output()
