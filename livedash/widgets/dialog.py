"""Centered dialog box with a drop shadow, wrapped message and buttons.

Usage::

    dialog(screen, id="confirm", title="Confirm Delete",
           message="Are you sure?", buttons="Delete,Cancel")
"""

from ..screen import Screen
from .base import Params, truncate, widget
from .params import get_bool, get_int, split_list

KIND = "dialog"

H_LINE = "─"
V_LINE = "│"
TOP_LEFT, TOP_RIGHT = "┌", "┐"
BOTTOM_LEFT, BOTTOM_RIGHT = "└", "┘"
SHADOW = "▒"

MIN_WIDTH = 8
MIN_HEIGHT = 5


def wrap_text(message: str, content_width: int) -> list[str]:
    """Greedy word wrap.

    A word joins the current line if the result fits in ``content_width``;
    otherwise the line is flushed and the word starts a new one. A word
    longer than the width gets a line of its own.
    """
    lines: list[str] = []
    current = ""
    for word in message.split():
        if current and len(current) + 1 + len(word) > content_width:
            lines.append(current)
            current = word
        elif current:
            current = f"{current} {word}"
        else:
            current = word
    if current:
        lines.append(current)
    return lines


def dialog_origin(rows: int, cols: int, height: int, width: int) -> tuple[int, int]:
    """Top-left corner that centers the dialog, kept on screen."""
    row = (rows - height) // 2
    col = (cols - width) // 2
    row = min(max(row, 1), max(1, rows - height))
    col = min(max(col, 1), max(1, cols - width))
    return row, col


def button_layout(buttons: list[str], col: int, width: int) -> list[tuple[int, str]]:
    """Column of each button, centered as a group."""
    total = sum(len(b) + 4 for b in buttons)
    current = col + (width - total) // 2
    placed = []
    for button in buttons:
        placed.append((current, button))
        current += len(button) + 6
    return placed


@widget(KIND, required=("id", "title", "message"))
def dialog(screen: Screen, params: Params) -> None:
    widget_id = params["id"]
    title = str(params["title"])
    message = str(params["message"])
    buttons = split_list(params.get("buttons") or "OK")
    defaults = screen.config
    width = max(MIN_WIDTH, get_int(params, KIND, "width", defaults.widget_default("dialog_width", 50)))
    height = max(MIN_HEIGHT, get_int(params, KIND, "height", defaults.widget_default("dialog_height", 10)))
    shadow = get_bool(params, "shadow", True)

    layout = screen.layout
    width = min(width, layout.cols)
    height = min(height, layout.rows)
    row, col = dialog_origin(layout.rows, layout.cols, height, width)

    screen.state.update(widget_id, visible=True, row=row, col=col, width=width, height=height)

    if shadow:
        _draw_block(screen, row + 1, col + 2, height, width, screen.color("dim") + SHADOW)
    _draw_frame(screen, row, col, height, width, title)
    _draw_content(screen, row, col, height, width, message)
    _draw_buttons(screen, row, col, height, width, buttons)


def _draw_block(screen: Screen, row: int, col: int, height: int, width: int, fill: str) -> None:
    """Fill a rectangle, skipping whatever falls off-screen."""
    layout = screen.layout
    if col > layout.cols:
        return
    visible_width = min(width, layout.available_width(col))
    for r in range(row, row + height):
        if r > layout.rows:
            break
        screen.goto(r, col)
        screen.write(fill * visible_width + screen.reset)


def _draw_frame(screen: Screen, row: int, col: int, height: int, width: int, title: str) -> None:
    frame = screen.color("bold") + screen.color("blue")
    reset = screen.reset

    title_space = width - 4
    title = truncate(title, title_space - 2)
    left = (title_space - len(title)) // 2

    screen.goto(row, col)
    screen.write(
        f"{frame}{TOP_LEFT}{H_LINE * left}"
        f"{screen.color('white')}{screen.color('reverse')} {title} {screen.color('noreverse')}"
        f"{frame}{H_LINE * (width - 4 - left - len(title))}{TOP_RIGHT}"
    )

    for r in range(row + 1, row + height - 1):
        screen.goto(r, col)
        screen.write(f"{frame}{V_LINE}{reset}{' ' * (width - 2)}{frame}{V_LINE}")

    screen.goto(row + height - 1, col)
    screen.write(f"{frame}{BOTTOM_LEFT}{H_LINE * (width - 2)}{BOTTOM_RIGHT}{reset}")


def _draw_content(screen: Screen, row: int, col: int, height: int, width: int, message: str) -> None:
    content_width = width - 4
    # Title row, one blank row, then text down to just above the buttons
    max_lines = max(0, height - 5)
    white, reset = screen.color("white"), screen.reset
    for offset, line in enumerate(wrap_text(message, content_width)[:max_lines]):
        screen.goto(row + 2 + offset, col + 2)
        screen.write(f"{white}{truncate(line, content_width):<{content_width}}{reset}")


def _draw_buttons(screen: Screen, row: int, col: int, height: int, width: int, buttons: list[str]) -> None:
    button_row = row + height - 3
    bold, reverse, reset = screen.color("bold"), screen.color("reverse"), screen.reset
    for index, (button_col, button) in enumerate(button_layout(buttons, col, width)):
        screen.goto(button_row, button_col)
        # First button is the default
        style = reverse + bold if index == 0 else bold
        screen.write(f"{style}[ {button} ]{reset}")
