"""Slider showing an integer within a range.

Usage::

    slider(screen, id="volume", value=75, min=0, max=100, label="Volume")
"""

from ..screen import Screen
from .base import Params, label_text, place, widget
from .params import get_bool, get_int, parse_int

KIND = "slider"

HANDLE = "●"
SOLID = "█"
LIGHT = "░"


def slider_position(value: int, low: int, high: int, width: int) -> int:
    """Handle offset inside the track: floor((value - min) * (width - 2) / range)."""
    span = max(1, high - low)
    return (value - low) * (width - 2) // span


@widget(KIND, required=("id", "value"))
def slider(screen: Screen, params: Params) -> None:
    widget_id = params["id"]
    value = parse_int(KIND, "value", params["value"])
    low = get_int(params, KIND, "min", 0)
    high = get_int(params, KIND, "max", 100)
    width = max(3, get_int(params, KIND, "width", screen.config.widget_default("slider_width", 30)))
    label = params.get("label") or "Slider"
    color = screen.color(params.get("color") or "blue")
    show_value = get_bool(params, "show_value", True)

    value = max(low, min(high, value))
    screen.state.update(widget_id, value=value, min=low, max=high, width=width)

    # At max the handle sits on the last track cell
    position = min(slider_position(value, low, high, width), width - 3)
    bold, reverse, noreverse = screen.color("bold"), screen.color("reverse"), screen.color("noreverse")
    dim, reset = screen.color("dim"), screen.reset

    track = []
    for i in range(width - 2):
        if i == position:
            track.append(f"{reset}{color}{reverse}{bold}{HANDLE}{noreverse}{reset}{color}")
        elif i < position:
            track.append(SOLID)
        else:
            track.append(f"{dim}{LIGHT}")

    place(screen, params, KIND)
    screen.write(label_text(screen, label))
    screen.write(f"{color}┌{''.join(track)}{reset}{color}┐{reset}")
    if show_value:
        screen.write(f" {bold}{screen.color('white')}{value:3d}{reset}")
    screen.write(f" {dim}[{low}-{high}]{reset}")
