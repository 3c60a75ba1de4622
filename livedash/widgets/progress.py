"""Progress bars drawn in the reserved area.

Usage::

    progress_bar(screen, id="cpu", val=50, width=40, color="green", label="CPU")
    progress_bar(screen, "id=cpu", "val=+5")    # relative to the last value

Each bar id takes the next free slot the first time it is rendered; slot N
is drawn on reserved row ``2 + 2*N``. Bars whose row would not fit above the
separator are skipped with a warning.
"""

from ..screen import Screen
from .base import Params, widget
from .params import get_bool, get_int, parse_int
from .spinner import SPINNER_STYLES

KIND = "progress_bar"

SOLID = "█"
LIGHT = "░"
LEFT_CAP = "┌"
RIGHT_CAP = "┐"
CHECK = "✓"


def clamp_percent(value: int) -> int:
    return max(0, min(100, value))


def is_relative(raw: object) -> bool:
    """A string value with a leading sign is a delta, not an absolute value."""
    return isinstance(raw, str) and raw.strip()[:1] in ("+", "-")


def resolve_progress(value: int, relative: bool, prior: int) -> int:
    """Apply a relative update against the prior value, then clamp."""
    if relative:
        value = prior + value
    return clamp_percent(value)


def fill_width(value: int, width: int) -> int:
    """Number of filled cells for a percentage."""
    return clamp_percent(value) * width // 100


def slot_row(slot: int) -> int:
    return 2 + slot * 2


@widget(KIND, required=("id", "val"))
def progress_bar(screen: Screen, params: Params) -> None:
    widget_id = params["id"]
    raw = params["val"]
    defaults = screen.config

    delta = parse_int(KIND, "val", raw, signed=True)
    prior = screen.state.get(widget_id, "value", 0)
    value = resolve_progress(delta, is_relative(raw), prior)

    width = get_int(params, KIND, "width", defaults.widget_default("progress_width", 40))
    width = max(1, width)
    color = params.get("color") or defaults.widget_default("progress_color", "green")
    label = params.get("label") or "Progress"
    show_percent = get_bool(params, "show_percent", True)

    frame = screen.state.get(widget_id, "frame", -1) + 1
    screen.state.update(widget_id, value=value, width=width, color=color, label=label, frame=frame)

    row = slot_row(screen.progress_slot(widget_id))
    if row >= screen.layout.separator_row:
        if not screen.state.get(widget_id, "overflow_warned", False):
            screen.state.set(widget_id, "overflow_warned", True)
            screen.log(f"Warning: Too many progress bars, {widget_id} not displayed", "yellow")
        return

    screen.goto(row, 2)
    screen.terminal.clear_line()
    screen.write(render_bar(screen, value, width, color, label, show_percent, frame))


def render_bar(
    screen: Screen,
    value: int,
    width: int,
    color: str,
    label: str,
    show_percent: bool,
    frame: int,
) -> str:
    filled = fill_width(value, width)
    empty = width - filled
    bold, white, reset = screen.color("bold"), screen.color("white"), screen.reset
    bar_color = screen.color(color)
    gradient = screen.terminal.has_256_colors and screen.config.enable_colors

    parts = [f"{bold}{white}{label + ':':<12}{reset} ", f"{bar_color}{LEFT_CAP}"]
    for i in range(filled):
        if gradient:
            intensity = 232 + (i * 23 // width)
            parts.append(f"\033[38;5;{intensity}m{SOLID}")
        else:
            parts.append(f"{bar_color}{SOLID}")
    if empty > 0:
        parts.append(screen.color("dim") + LIGHT * empty)
    parts.append(f"{reset}{bar_color}{RIGHT_CAP}{reset}")

    if show_percent:
        parts.append(f" {bold}{white}{value:3d}%{reset}")

    if value < 100:
        if screen.config.enable_animations:
            frames = SPINNER_STYLES["braille"]
            parts.append(f" {screen.color('cyan')}{frames[frame % len(frames)]}{reset}")
    else:
        parts.append(f" {screen.color('green')}{CHECK}{reset}")

    return "".join(parts)
