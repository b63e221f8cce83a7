from __future__ import annotations

import numpy as np

from .grid import EMPTY, GameGrid


def collides(shape: np.ndarray, x: int, y: int, grid: GameGrid, dx: int = 0, dy: int = 0) -> bool:
    """Return True if `shape` anchored at (x + dx, y + dy) leaves the board or hits a locked cell."""
    for sy, sx in zip(*np.nonzero(shape)):
        # cell() reports OUT_OF_BOUNDS (-1) for anything off the board
        if grid.cell(x + int(sx) + dx, y + int(sy) + dy) != EMPTY:
            return True
    return False
