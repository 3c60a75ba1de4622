"""One-line sparkline graph.

Usage::

    sparkline(screen, id="cpu_history", data="45,52,48,61,59,43", width=60)
"""

from collections.abc import Sequence

from ..errors import InvalidValueError
from ..screen import Screen
from .base import Params, place, widget
from .params import get_int, parse_int, split_list

KIND = "sparkline"

SPARK_CHARS = ("▁", "▂", "▃", "▄", "▅", "▆", "▇", "█")


def normalize_samples(
    samples: Sequence[int],
    levels: int = len(SPARK_CHARS),
    low: int | None = None,
    high: int | None = None,
) -> list[int]:
    """Scale samples to integer levels in [0, levels - 1].

    level = floor((sample - min) * (levels - 1) / range), with range floored
    at 1 so a flat series maps to level 0.
    """
    if not samples:
        return []
    low = min(samples) if low is None else low
    high = max(samples) if high is None else high
    span = max(1, high - low)

    result = []
    for sample in samples:
        level = (sample - low) * (levels - 1) // span
        result.append(max(0, min(levels - 1, level)))
    return result


@widget(KIND, required=("id", "data"))
def sparkline(screen: Screen, params: Params) -> None:
    widget_id = params["id"]
    samples = [parse_int(KIND, "data", point) for point in split_list(params["data"])]
    if not samples:
        raise InvalidValueError(KIND, "data", params["data"], expected="a non-empty list")

    width = max(1, get_int(params, KIND, "width", 40))
    height = get_int(params, KIND, "height", 8)
    color = params.get("color") or "green"
    label = params.get("label") or "Graph"

    low, high = min(samples), max(samples)
    screen.state.update(
        widget_id,
        data=",".join(str(s) for s in samples),
        min=low,
        max=high,
        width=width,
        height=height,
    )

    levels = normalize_samples(samples[:width], low=low, high=high)
    bold, white, reset = screen.color("bold"), screen.color("white"), screen.reset

    place(screen, params, KIND)
    screen.write(
        f"{bold}{white}{label + ':':<10}{reset} "
        f"{screen.color(color)}{''.join(SPARK_CHARS[level] for level in levels)}{reset}"
        f" {screen.color('dim')}[{low}-{high}]{reset}"
    )
