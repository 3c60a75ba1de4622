"""The rendering authority's state: terminal, layout, widget state, log stream.

A Screen is the single object allowed to write to the terminal. Widgets and
the dashboard loop receive it explicitly; there is no module-level state.
"""

from .config import DashboardConfig
from .layout import RegionLayout
from .log_buffer import LogEntry, LogRingBuffer
from .state_store import KeyedStateStore
from .terminal import Terminal

H_LINE = "─"


class Screen:
    """Owns everything a redraw needs.

    Args:
        terminal: Output terminal (probed from stdout when omitted)
        config: Dashboard settings (defaults when omitted)
    """

    def __init__(self, terminal: Terminal | None = None, config: DashboardConfig | None = None):
        self.config = config or DashboardConfig()
        self.terminal = terminal or Terminal(enable_colors=self.config.enable_colors)
        self.layout = RegionLayout.for_terminal(self.terminal, self.config.reserved_rows)
        self.state = KeyedStateStore()
        self.log_buffer = LogRingBuffer(self.config.log_buffer_size)
        self._progress_ids: list[str] = []
        self._lines_logged = 0

    # -- helpers used by renderers ----------------------------------------

    def color(self, name: str) -> str:
        """Escape sequence for a color or theme role name."""
        return self.terminal.color(self.config.theme_color(name))

    @property
    def reset(self) -> str:
        return self.terminal.color("reset")

    def goto(self, row: int, col: int) -> tuple[int, int]:
        return self.layout.goto(self.terminal, row, col)

    def write(self, text: str) -> None:
        self.terminal.write(text)

    def flush(self) -> None:
        self.terminal.flush()

    def progress_slot(self, widget_id: str) -> int:
        """Reserved-area slot for a progress bar, assigned in first-render order."""
        if widget_id not in self._progress_ids:
            self._progress_ids.append(widget_id)
        return self._progress_ids.index(widget_id)

    @property
    def progress_ids(self) -> list[str]:
        return list(self._progress_ids)

    # -- regions ---------------------------------------------------------

    def init_reserved_area(self) -> None:
        """Paint the reserved area background and the separator rule."""
        cols = self.layout.cols
        for row in range(1, self.layout.reserved_rows):
            self.goto(row, 1)
            self.write(self.color("bg_reserved") + " " * cols + self.reset)
        self.draw_separator()
        self.flush()

    def draw_separator(self, label: str = "") -> None:
        """Rule across the last reserved row, optionally opening with a label."""
        cols = self.layout.cols
        text = f"{H_LINE * 2} {label} " if label else ""
        if len(text) > cols:
            text = ""
        self.goto(self.layout.separator_row, 1)
        self.write(
            self.color("cyan") + self.color("bold") + text + H_LINE * (cols - len(text)) + self.reset
        )

    def clear_log_area(self) -> None:
        for index in range(self.layout.log_capacity):
            self.goto(self.layout.log_row(index), 1)
            self.terminal.clear_line()

    # -- log stream ------------------------------------------------------

    def log(self, message: str, color: str = "white") -> LogEntry:
        """Append a timestamped entry to the log stream and draw it.

        Lines are written top-down below the reserved area. Once the log
        area is full the visible rows are repainted with the newest entries;
        older entries stay in the buffer but are no longer drawn.
        """
        entry = LogEntry.create(message, color)
        self.log_buffer.append(entry)

        index = self._lines_logged
        self._lines_logged += 1
        if self.layout.is_log_index_visible(index):
            self._draw_log_line(index, entry)
        else:
            self.redraw_log()
        self.flush()
        return entry

    def redraw_log(self) -> None:
        """Repaint the visible log rows from the tail of the buffer."""
        entries = self.log_buffer.tail(self.layout.log_capacity)
        for index, entry in enumerate(entries):
            self._draw_log_line(index, entry)

    def format_log_line(self, entry: LogEntry) -> str:
        prefix = f"[{entry.timestamp}] "
        room = max(0, self.layout.cols - len(prefix))
        return (
            f"{self.color('dim')}{prefix}{self.reset}"
            f"{self.color(entry.color)}{entry.text[:room]}{self.reset}"
        )

    def _draw_log_line(self, index: int, entry: LogEntry) -> None:
        self.goto(self.layout.log_row(index), 1)
        self.terminal.clear_line()
        self.write(self.format_log_line(entry))
