"""Animated spinner. Each call draws the current frame and advances it."""

from ..screen import Screen
from .base import Params, place, widget

KIND = "spinner"

SPINNER_STYLES = {
    "braille": ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"),
    "dots": ("⠈", "⠐", "⠠", "⢀", "⡀", "⠄", "⠂", "⠁"),
    "pipe": ("|", "/", "-", "\\"),
    "clock": ("🕐", "🕑", "🕒", "🕓", "🕔", "🕕", "🕖", "🕗", "🕘", "🕙", "🕚", "🕛"),
}


def spinner_frames(style: str) -> tuple[str, ...]:
    """Frames for a style; unknown styles fall back to braille."""
    return SPINNER_STYLES.get(style, SPINNER_STYLES["braille"])


@widget(KIND)
def spinner(screen: Screen, params: Params) -> None:
    widget_id = params["id"]
    state = screen.state

    # Style, message and color are fixed by the first render of an id
    if not state.has(widget_id, "frame"):
        state.update(
            widget_id,
            frame=0,
            active=True,
            style=params.get("style") or "braille",
            message=params.get("message") or "Loading...",
            color=params.get("color") or "cyan",
        )

    frames = spinner_frames(state.get(widget_id, "style"))
    current = state.get(widget_id, "frame") % len(frames)
    state.set(widget_id, "frame", (current + 1) % len(frames))

    place(screen, params, KIND)
    color = screen.color(state.get(widget_id, "color"))
    screen.write(f"{color}{frames[current]}{screen.reset} {state.get(widget_id, 'message')}")
