"""Screen partitioning: a fixed reserved area on top, a log area below.

Rows and columns are 1-based, like ``tput cup`` after adding one. Every cursor
move made by a renderer goes through RegionLayout.goto(), which clamps the
position into the terminal so no widget can draw off-screen.
"""

import logging

from .errors import LayoutOverflowError
from .terminal import Terminal

logger = logging.getLogger(__name__)


class RegionLayout:
    """Maps logical slots and log lines to absolute terminal rows.

    The reserved height is fixed at construction. On a terminal too short
    to hold it, the reserved area shrinks so at least one log row remains.
    """

    def __init__(self, rows: int, cols: int, reserved_rows: int):
        self.rows = max(2, rows)
        self.cols = max(1, cols)
        self.reserved_rows = max(1, min(reserved_rows, self.rows - 1))
        self._warned: set[tuple[int, int]] = set()

    @classmethod
    def for_terminal(cls, terminal: Terminal, reserved_rows: int) -> "RegionLayout":
        return cls(terminal.rows, terminal.cols, reserved_rows)

    # -- logical -> absolute ---------------------------------------------

    @property
    def first_log_row(self) -> int:
        return self.reserved_rows + 1

    @property
    def separator_row(self) -> int:
        """Last reserved row, drawn as a rule between the two regions."""
        return self.reserved_rows

    @property
    def log_capacity(self) -> int:
        """Number of visible log rows."""
        return self.rows - self.reserved_rows

    def reserved_slot_row(self, index: int) -> int:
        return _clamp(index + 1, 1, self.reserved_rows)

    def log_row(self, index: int) -> int:
        return _clamp(self.first_log_row + index, self.first_log_row, self.rows)

    def in_reserved(self, row: int) -> bool:
        return 1 <= row <= self.reserved_rows

    def is_log_index_visible(self, index: int) -> bool:
        return 0 <= index < self.log_capacity

    # -- bounds ----------------------------------------------------------

    def is_visible(self, row: int, col: int) -> bool:
        return 1 <= row <= self.rows and 1 <= col <= self.cols

    def check(self, row: int, col: int) -> None:
        """Raise LayoutOverflowError if (row, col) is off-screen."""
        if not self.is_visible(row, col):
            raise LayoutOverflowError(row, col, self.rows, self.cols)

    def clamp(self, row: int, col: int) -> tuple[int, int]:
        return _clamp(row, 1, self.rows), _clamp(col, 1, self.cols)

    def available_width(self, col: int) -> int:
        """Columns left on a row starting at ``col`` (inclusive)."""
        return max(0, self.cols - _clamp(col, 1, self.cols) + 1)

    def goto(self, terminal: Terminal, row: int, col: int) -> tuple[int, int]:
        """Move the cursor, clamping off-screen positions.

        Returns:
            The (row, col) actually used
        """
        try:
            self.check(row, col)
        except LayoutOverflowError as e:
            if (row, col) not in self._warned:
                self._warned.add((row, col))
                logger.warning(f"Layout overflow: {e}, clamping")
            row, col = self.clamp(row, col)
        terminal.move(row, col)
        return row, col


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))
