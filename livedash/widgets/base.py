"""The calling convention shared by all widget renderers."""

import functools
import logging
from collections.abc import Callable
from typing import Any

from ..errors import InvalidValueError, WidgetError
from ..screen import Screen
from .params import get_int, is_missing, parse_params, require

logger = logging.getLogger(__name__)

Params = dict[str, Any]
Renderer = Callable[[Screen, Params], None]

LABEL_WIDTH = 12


def widget(kind: str, required: tuple[str, ...] = ("id",)) -> Callable[[Renderer], Callable[..., bool]]:
    """Wrap a renderer ``fn(screen, params)`` into ``fn(screen, *args, **kwargs) -> bool``.

    The wrapper parses parameters, checks required keys, claims the widget
    id for this kind, and turns any WidgetError into a red log entry and a
    False return so one bad widget never stops the caller.
    """

    def decorator(render: Renderer) -> Callable[..., bool]:
        @functools.wraps(render)
        def wrapper(screen: Screen, *args: Any, **kwargs: Any) -> bool:
            params, warnings = parse_params(args, kwargs)
            for warning in warnings:
                screen.log(f"Warning: {warning}", "yellow")

            try:
                require(params, kind, required)
                params["id"] = str(params["id"])
                claim_id(screen, kind, params["id"])
                render(screen, params)
            except WidgetError as e:
                logger.debug(f"Widget call failed: {e}")
                screen.log(f"Error: {e}", "red")
                return False
            finally:
                screen.flush()
            return True

        wrapper.kind = kind  # type: ignore[attr-defined]
        wrapper.required = required  # type: ignore[attr-defined]
        return wrapper

    return decorator


def claim_id(screen: Screen, kind: str, widget_id: str) -> None:
    """Record which widget kind owns an id.

    Raises:
        InvalidValueError: if the id already belongs to another kind
    """
    owner = screen.state.get(widget_id, "kind")
    if owner is not None and owner != kind:
        raise InvalidValueError(kind, "id", widget_id, expected=f"unused by the {owner} widget")
    screen.state.set(widget_id, "kind", kind)


def place(screen: Screen, params: Params, kind: str) -> None:
    """Move to an explicit row/col when given; otherwise draw at the cursor."""
    if is_missing(params.get("row")) and is_missing(params.get("col")):
        return
    row = get_int(params, kind, "row", 1)
    col = get_int(params, kind, "col", 1)
    screen.goto(row, col)


def label_text(screen: Screen, label: str) -> str:
    """Bold, padded ``Label:`` prefix used by inline widgets."""
    return f"{screen.color('bold')}{screen.color('white')}{label + ':':<{LABEL_WIDTH}}{screen.reset} "


def truncate(text: str, width: int) -> str:
    """Cut text to ``width`` characters, marking the cut with '...'."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    return text[: width - 3] + "..."
