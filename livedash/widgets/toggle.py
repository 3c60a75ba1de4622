"""On/off toggle switch."""

from ..screen import Screen
from .base import Params, label_text, place, widget
from .params import get_int, parse_bool

KIND = "toggle"

KNOB = "●"
SOLID = "█"


def normalize_state(value: object) -> str:
    """true/on/1/yes -> 'on', anything else -> 'off'."""
    return "on" if value is not None and parse_bool(value) else "off"


@widget(KIND)
def toggle(screen: Screen, params: Params) -> None:
    widget_id = params["id"]
    state = normalize_state(params.get("state", "off"))
    label = params.get("label") or "Toggle"
    on_color = screen.color(params.get("on_color") or "green")
    off_color = screen.color(params.get("off_color") or "red")
    width = get_int(params, KIND, "width", 6)

    screen.state.update(widget_id, state=state, label=label, width=width)

    bold, reverse, noreverse, reset = (
        screen.color("bold"),
        screen.color("reverse"),
        screen.color("noreverse"),
        screen.reset,
    )
    track = max(0, width - 3)

    place(screen, params, KIND)
    screen.write(label_text(screen, label))
    if state == "on":
        screen.write(f"{on_color}{reverse}{' ' * track}{KNOB}{SOLID * 2}{noreverse}{reset}")
        screen.write(f" {bold}{on_color}ON{reset}")
    else:
        screen.write(f"{off_color}{reverse}{SOLID * 2}{KNOB}{' ' * track}{noreverse}{reset}")
        screen.write(f" {bold}{off_color}OFF{reset}")
