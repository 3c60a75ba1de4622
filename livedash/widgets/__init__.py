"""Widget renderers.

Every renderer is called as ``fn(screen, *args, **kwargs) -> bool`` where
args are ``"key=value"`` strings and kwargs are parameters by name. See
widgets.base.widget for the shared contract.
"""

from .combo import combo_box, display_text, resolve_selection
from .dialog import dialog, wrap_text
from .progress import fill_width, progress_bar, resolve_progress
from .slider import slider, slider_position
from .sparkline import normalize_samples, sparkline
from .spinner import SPINNER_STYLES, spinner, spinner_frames
from .toggle import normalize_state, toggle

WIDGETS = {
    fn.kind: fn
    for fn in (progress_bar, dialog, spinner, sparkline, combo_box, toggle, slider)
}

__all__ = [
    "WIDGETS",
    "SPINNER_STYLES",
    "combo_box",
    "dialog",
    "display_text",
    "fill_width",
    "normalize_samples",
    "normalize_state",
    "progress_bar",
    "resolve_progress",
    "resolve_selection",
    "slider",
    "slider_position",
    "sparkline",
    "spinner",
    "spinner_frames",
    "toggle",
    "wrap_text",
]
