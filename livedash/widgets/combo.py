"""Combo box: a selection from a list, or free text when allowed.

Usage::

    combo_box(screen, id="mode", options="Auto,Manual,Debug", selected=0)
"""

from ..screen import Screen
from .base import Params, label_text, place, truncate, widget
from .params import get_bool, get_int, is_missing, split_list

KIND = "combo_box"

PLACEHOLDER = "<Select Option>"
ARROW_DOWN = "▼"
ARROW_UP = "▲"


def resolve_selection(selected: object, option_count: int, allow_custom: bool) -> int:
    """Validate the selected index.

    Non-numeric or negative selections reset to 0. An index past the options
    is kept only when custom text is allowed (it selects the custom entry).
    """
    try:
        index = int(str(selected).strip())
    except ValueError:
        return 0
    if index < 0:
        return 0
    if index >= option_count and not allow_custom:
        return 0
    return index


def display_text(options: list[str], selected: int, allow_custom: bool, custom_text: str) -> str:
    if selected < len(options):
        return options[selected]
    if allow_custom and custom_text:
        return custom_text
    return PLACEHOLDER


@widget(KIND, required=("id", "options"))
def combo_box(screen: Screen, params: Params) -> None:
    widget_id = params["id"]
    options = split_list(params["options"])
    allow_custom = get_bool(params, "allow_custom", True)
    raw_selected = params.get("selected")
    selected = resolve_selection(0 if is_missing(raw_selected) else raw_selected, len(options), allow_custom)
    width = max(5, get_int(params, KIND, "width", screen.config.widget_default("combo_width", 30)))
    label = params.get("label") or "Select"
    custom_text = str(params.get("custom_text") or "")

    expanded = screen.state.get(widget_id, "expanded", False)
    screen.state.update(
        widget_id,
        selected=selected,
        options=",".join(options),
        custom_text=custom_text,
        allow_custom=allow_custom,
        expanded=expanded,
    )

    text = truncate(display_text(options, selected, allow_custom, custom_text), width - 4)
    blue, white, reset = screen.color("blue"), screen.color("white"), screen.reset
    arrow = ARROW_UP if expanded else ARROW_DOWN

    place(screen, params, KIND)
    screen.write(label_text(screen, label))
    screen.write(f"{blue}┌{white} {text:<{width - 4}} {blue}{arrow}┐{reset}")
