from __future__ import annotations

from typing import Optional

import pytest

from blockfall.game import ActivePiece, BlockfallGame, GameConfig, TetrominoType


@pytest.fixture
def game() -> BlockfallGame:
    g = BlockfallGame(GameConfig(random_seed=1234))
    g.start()
    return g


def place_piece(game: BlockfallGame, kind: TetrominoType, x: Optional[int] = None, y: int = 0) -> ActivePiece:
    """Replace the falling piece with a known one."""
    piece = ActivePiece.spawn(kind, game.grid.width)
    if x is not None:
        piece.x = x
    piece.y = y
    game.current_piece = piece
    return piece


def fill_row_except(game: BlockfallGame, row: int, *holes: int, value: int = 7) -> None:
    for x in range(game.grid.width):
        if x not in holes:
            game.grid.grid[row, x] = value
