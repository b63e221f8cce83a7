"""Game module for Blockfall.

Exports the engine core and supporting classes:
- GameGrid: Board of locked cells and row sweeping
- ActivePiece: The falling piece (type, shape, anchor)
- TetrominoType: Enum of the seven catalog pieces
- collides: Collision test used for every positional change
- resolve_rotation: Rotation with the horizontal kick search
- ScoringRules: Line-clear scoring, leveling and gravity interval
- BlockfallGame: Session and scheduler
"""

from .grid import GameGrid
from .pieces import ActivePiece, TetrominoType, rotate, color_for
from .collision import collides
from .rotation import resolve_rotation
from .rules import ScoringRules
from .timer import GravityTimer
from .core import Action, BlockfallGame, GameConfig, GameSnapshot, GameStatus, GHOST_VALUE, compose_board

__all__ = [
    "GameGrid",
    "ActivePiece",
    "TetrominoType",
    "rotate",
    "color_for",
    "collides",
    "resolve_rotation",
    "ScoringRules",
    "GravityTimer",
    "Action",
    "BlockfallGame",
    "GameConfig",
    "GameSnapshot",
    "GameStatus",
    "GHOST_VALUE",
    "compose_board",
]
