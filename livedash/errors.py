"""
livedash exceptions
"""


class LiveDashError(Exception):
    """Base exception for all livedash errors"""

    pass


class ConfigError(LiveDashError):
    """Raised when the config file cannot be parsed or holds invalid values"""

    pass


class WidgetError(LiveDashError):
    """Raised when a widget call cannot be rendered"""

    def __init__(self, widget: str, message: str):
        super().__init__(f"{widget}: {message}")
        self.widget = widget


class MissingParameterError(WidgetError):
    """Raised when one or more required widget parameters are absent"""

    def __init__(self, widget: str, missing: list[str]):
        super().__init__(widget, f"missing required parameters: {' '.join(missing)}")
        self.missing = list(missing)


class InvalidValueError(WidgetError):
    """Raised when a widget parameter fails to parse"""

    def __init__(self, widget: str, key: str, value: object, expected: str = "integer"):
        super().__init__(widget, f"{key} must be {expected}: {value!r}")
        self.key = key
        self.value = value


class DuplicateTaskError(LiveDashError):
    """Raised when a task name (or its derived channel paths) is already registered"""

    def __init__(self, name: str, existing: str | None = None):
        if existing is None or existing == name:
            message = f"task already registered: {name}"
        else:
            message = f"task {name!r} collides with {existing!r}"
        super().__init__(message)
        self.name = name
        self.existing = existing


class UnknownTaskError(LiveDashError):
    """Raised when a task name was never registered"""

    def __init__(self, name: str):
        super().__init__(f"unknown task: {name}")
        self.name = name


class TaskStateError(LiveDashError):
    """Raised when a task is asked to do something its lifecycle forbids"""

    pass


class ChannelReadError(LiveDashError):
    """Raised when a channel location is missing or unreadable"""

    def __init__(self, path: object, reason: str = ""):
        message = f"cannot read channel {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path


class LayoutOverflowError(LiveDashError):
    """Raised when a draw position falls outside the terminal"""

    def __init__(self, row: int, col: int, rows: int, cols: int):
        super().__init__(f"position ({row}, {col}) outside {rows}x{cols} terminal")
        self.row = row
        self.col = col
