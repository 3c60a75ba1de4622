"""Parameter parsing shared by every widget.

Widgets accept an unordered mix of ``"key=value"`` strings and keyword
arguments::

    progress_bar(screen, "id=cpu", "val=+5", label="CPU Usage")

Keyword arguments win over positional ones with the same key. Positional
arguments without ``=`` are reported as warnings and otherwise ignored.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from ..errors import InvalidValueError, MissingParameterError

_INT_RE = re.compile(r"^-?[0-9]+$")
_SIGNED_INT_RE = re.compile(r"^[+-]?[0-9]+$")

TRUE_VALUES = {"true", "on", "1", "yes"}


def parse_params(args: Iterable[Any], kwargs: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Merge positional key=value strings and keyword arguments.

    Returns:
        (params, warnings) where warnings name each malformed positional
    """
    params: dict[str, Any] = {}
    warnings: list[str] = []

    for arg in args:
        text = str(arg)
        key, sep, value = text.partition("=")
        if not sep or not key:
            warnings.append(f"Invalid parameter format: {text}")
            continue
        params[key] = value

    params.update(kwargs)
    return params, warnings


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def require(params: Mapping[str, Any], widget: str, keys: Iterable[str]) -> None:
    """Check required keys.

    Raises:
        MissingParameterError: listing every missing key, in ``keys`` order
    """
    missing = [key for key in keys if is_missing(params.get(key))]
    if missing:
        raise MissingParameterError(widget, missing)


def parse_int(widget: str, key: str, value: Any, signed: bool = False) -> int:
    """Parse an integer parameter.

    With ``signed`` a leading ``+`` is accepted as well as ``-``.

    Raises:
        InvalidValueError: if value is not an integer
    """
    if isinstance(value, bool):
        raise InvalidValueError(widget, key, value)
    if isinstance(value, int):
        return value

    text = str(value).strip()
    pattern = _SIGNED_INT_RE if signed else _INT_RE
    if not pattern.match(text):
        raise InvalidValueError(widget, key, value)
    return int(text)


def get_int(params: Mapping[str, Any], widget: str, key: str, default: int) -> int:
    value = params.get(key)
    if is_missing(value):
        return default
    return parse_int(widget, key, value)


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def get_bool(params: Mapping[str, Any], key: str, default: bool) -> bool:
    value = params.get(key)
    if is_missing(value):
        return default
    return parse_bool(value)


def split_list(value: Any) -> list[str]:
    """Split a comma-separated parameter (lists and tuples pass through)."""
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    text = str(value)
    if text == "":
        return []
    return text.split(",")
