"""Board topology: square numbering on a serpentine grid."""

from __future__ import annotations

import logging

from snakes_ladders.errors import InvalidConfiguration, InvalidShortcut
from snakes_ladders.shortcuts import ShortcutEntry, ShortcutKind

logger = logging.getLogger(__name__)

# fmt: off
TRADITIONAL_SHORTCUTS: list[ShortcutEntry] = [
    # Ladders (go UP)
    ShortcutEntry( 2,  23, ShortcutKind.LADDER),
    ShortcutEntry( 8,  34, ShortcutKind.LADDER),
    ShortcutEntry(20,  77, ShortcutKind.LADDER),
    ShortcutEntry(32,  68, ShortcutKind.LADDER),
    ShortcutEntry(41,  79, ShortcutKind.LADDER),
    ShortcutEntry(74,  88, ShortcutKind.LADDER),
    ShortcutEntry(82, 100, ShortcutKind.LADDER),
    # Snakes (go DOWN)
    ShortcutEntry(29,   9, ShortcutKind.SNAKE),
    ShortcutEntry(38,  15, ShortcutKind.SNAKE),
    ShortcutEntry(47,   5, ShortcutKind.SNAKE),
    ShortcutEntry(53,  33, ShortcutKind.SNAKE),
    ShortcutEntry(62,  37, ShortcutKind.SNAKE),
    ShortcutEntry(86,  54, ShortcutKind.SNAKE),
    ShortcutEntry(92,  70, ShortcutKind.SNAKE),
    ShortcutEntry(97,  25, ShortcutKind.SNAKE),
]
# fmt: on


class BoardTopology:
    """Maps square numbers 1..N onto a ``size`` x ``size`` grid.

    Square 1 sits at row 0, column 0. Rows alternate direction, so odd
    rows run right-to-left. Square 0 is the off-board start and has no
    grid position.
    """

    def __init__(self, size: int = 10, last_square: int | None = None):
        if size < 2:
            raise InvalidConfiguration(f"Board size must be at least 2, got {size}.")
        capacity = size * size
        if last_square is None:
            last_square = capacity
        if not 2 <= last_square <= capacity:
            raise InvalidConfiguration(
                f"Last square {last_square} does not fit a {size}x{size} board.",
                last_square=last_square, size=size,
            )
        self.size = size
        self.last_square = last_square
        self._grid: dict[int, tuple[int, int]] = {}

    def generate(self) -> None:
        self._grid = {
            square: self._row_col(square)
            for square in range(1, self.last_square + 1)
        }
        logger.debug("Generated %dx%d board with %d squares", self.size, self.size, len(self._grid))

    def clear(self) -> None:
        self._grid = {}

    def is_ready(self) -> bool:
        return bool(self._grid)

    def _row_col(self, square: int) -> tuple[int, int]:
        row = (square - 1) // self.size
        col = (square - 1) % self.size
        if row % 2 == 1:
            col = self.size - 1 - col
        return row, col

    def is_on_board(self, square: int) -> bool:
        return 1 <= square <= self.last_square

    def grid_position(self, square: int) -> tuple[int, int] | None:
        """(row, column) of *square*, or ``None`` off board / before generate()."""
        return self._grid.get(square)

    def validate_shortcut(self, entry: ShortcutEntry) -> InvalidShortcut | None:
        for square in (entry.start_square, entry.end_square):
            if not self.is_on_board(square):
                return InvalidShortcut(
                    f"{entry.describe()} uses square {square}, outside 1..{self.last_square}.",
                    entry=entry,
                )
        if entry.start_square == self.last_square:
            return InvalidShortcut(
                f"{entry.describe()} starts on the last square.",
                entry=entry,
            )
        return None
