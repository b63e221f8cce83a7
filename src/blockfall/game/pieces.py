from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Shape = np.ndarray
Color = Tuple[int, int, int]

CW = 1
CCW = -1


def _shape(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _shape([[0, 1, 0, 0], [0, 1, 0, 0], [0, 1, 0, 0], [0, 1, 0, 0]]),
    TetrominoType.J: _shape([[0, 1, 0], [0, 1, 0], [1, 1, 0]]),
    TetrominoType.L: _shape([[0, 1, 0], [0, 1, 0], [0, 1, 1]]),
    TetrominoType.O: _shape([[1, 1], [1, 1]]),
    TetrominoType.S: _shape([[0, 1, 1], [1, 1, 0], [0, 0, 0]]),
    TetrominoType.T: _shape([[0, 0, 0], [1, 1, 1], [0, 1, 0]]),
    TetrominoType.Z: _shape([[1, 1, 0], [0, 1, 1], [0, 0, 0]]),
}

COLORS: Dict[TetrominoType, Color] = {
    TetrominoType.I: (80, 227, 230),
    TetrominoType.J: (36, 95, 223),
    TetrominoType.L: (223, 173, 36),
    TetrominoType.O: (223, 217, 36),
    TetrominoType.S: (48, 211, 56),
    TetrominoType.T: (132, 61, 198),
    TetrominoType.Z: (227, 78, 78),
}


def validate_catalog(shapes: Dict[TetrominoType, Shape]) -> None:
    """Reject malformed catalog data: every shape is a square 0/1 matrix of four cells."""
    missing = set(TetrominoType) - set(shapes)
    if missing:
        raise ValueError(f"catalog is missing shapes for {sorted(t.name for t in missing)}")
    for kind, shape in shapes.items():
        if shape.ndim != 2 or shape.shape[0] != shape.shape[1]:
            raise ValueError(f"shape for {kind.name} must be a square matrix, got {shape.shape}")
        if not np.isin(shape, (0, 1)).all():
            raise ValueError(f"shape for {kind.name} may only contain 0 and 1")
        if int(shape.sum()) != 4:
            raise ValueError(f"shape for {kind.name} must occupy exactly 4 cells")


validate_catalog(BASE_SHAPES)


def color_for(kind: TetrominoType) -> Color:
    return COLORS[TetrominoType(kind)]


def random_kind(rng: random.Random) -> TetrominoType:
    # Independent uniform draw, no bag.
    return rng.choice(list(TetrominoType))


def rotate(shape: Shape, direction: int) -> Shape:
    """Rotate a shape matrix by 90 degrees.

    The matrix is transposed first. Clockwise rotation then reverses each row,
    counter-clockwise rotation reverses the row order instead.
    """
    if direction not in (CW, CCW):
        raise ValueError(f"rotation direction must be {CW} or {CCW}, got {direction!r}")
    transposed = np.asarray(shape).T
    if direction == CW:
        return np.ascontiguousarray(transposed[:, ::-1])
    return np.ascontiguousarray(transposed[::-1, :])


@dataclass
class ActivePiece:
    kind: TetrominoType
    shape: Shape
    x: int
    y: int
    collided: bool = False

    @classmethod
    def spawn(cls, kind: TetrominoType, board_width: int) -> "ActivePiece":
        return cls(kind=kind, shape=BASE_SHAPES[kind].copy(), x=board_width // 2 - 2, y=0)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        cells: List[Tuple[int, int]] = []
        h, w = self.shape.shape
        for dy in range(h):
            for dx in range(w):
                if self.shape[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def cells(self) -> List[Tuple[int, int]]:
        return self.cells_at(self.x, self.y)

    def copy(self) -> "ActivePiece":
        return ActivePiece(self.kind, self.shape.copy(), self.x, self.y, self.collided)
