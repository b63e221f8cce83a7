from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)

EMPTY = 0
OUT_OF_BOUNDS = -1


class GameGrid:
    """Fixed-size board of locked cells.

    The grid uses 0 for empty cells and the piece id (1..7) for locked
    cells. Row 0 is the top of the board. The falling piece is never
    written here; it is overlaid at read time.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> int:
        if not self.is_inside(x, y):
            return OUT_OF_BOUNDS
        return int(self.grid[y, x])

    def lock(self, shape: np.ndarray, x: int, y: int, value: int) -> None:
        """Write every occupied sub-cell of `shape` anchored at (x, y) as `value`.

        The caller must have checked for collisions; locking over an occupied
        or out-of-bounds cell is a contract violation.
        """
        cells = [(x + dx, y + dy) for dy, dx in zip(*np.nonzero(shape))]
        for cx, cy in cells:
            if self.cell(cx, cy) != EMPTY:
                raise ValueError(f"cannot lock piece {value} over cell ({cx}, {cy})")
        for cx, cy in cells:
            self.grid[cy, cx] = value

    def sweep_completed_rows(self) -> int:
        full_rows = np.where(np.all(self.grid != EMPTY, axis=1))[0]
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Remove full rows and add empty rows at the top
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        logger.debug("swept rows %s", full_rows.tolist())
        return num

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != EMPTY, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
