from __future__ import annotations

import logging
from typing import Iterator

from .collision import collides
from .grid import GameGrid
from .pieces import ActivePiece, rotate

logger = logging.getLogger(__name__)


def kick_offsets(columns: int) -> Iterator[int]:
    """Yield cumulative x shifts tried after a blocked rotation.

    Steps alternate +1, -2, +3, -4, ... The search gives up, without
    testing the shift just reached, as soon as the upcoming step is larger
    than the shape's column count. For a 3 or 4 column shape this tries
    +1, -1 and +2 relative to the original anchor.
    """
    shift = 0
    step = 1
    while True:
        shift += step
        step = -(step + (1 if step > 0 else -1))
        if step > columns:
            return
        yield shift


def resolve_rotation(piece: ActivePiece, grid: GameGrid, direction: int) -> bool:
    """Rotate `piece` in place if a legal kicked anchor exists; leave it untouched otherwise."""
    rotated = rotate(piece.shape, direction)
    if not collides(rotated, piece.x, piece.y, grid):
        piece.shape = rotated
        return True
    for shift in kick_offsets(rotated.shape[1]):
        if not collides(rotated, piece.x + shift, piece.y, grid):
            piece.shape = rotated
            piece.x += shift
            return True
    logger.debug("rotation of %s at (%d, %d) rejected", piece.kind.name, piece.x, piece.y)
    return False
