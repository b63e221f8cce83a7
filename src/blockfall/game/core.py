from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Deque, Optional

import numpy as np

from .collision import collides
from .grid import GameGrid
from .pieces import CCW, CW, ActivePiece, Shape, TetrominoType, random_kind
from .rotation import resolve_rotation
from .rules import ScoringRules
from .timer import GravityTimer

logger = logging.getLogger(__name__)

GHOST_VALUE = 8


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6
    TOGGLE_PAUSE = 7
    RESET = 8


class GameStatus(Enum):
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")


@dataclass(frozen=True)
class GameSnapshot:
    board: np.ndarray
    piece_kind: Optional[TetrominoType]
    piece_shape: Optional[Shape]
    piece_x: int
    piece_y: int
    next_kind: TetrominoType
    score: int
    lines: int
    level: int
    status: GameStatus
    ghost_y: Optional[int]

    @property
    def paused(self) -> bool:
        return self.status is GameStatus.PAUSED

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    def compose(self, include_ghost: bool = False) -> np.ndarray:
        if self.piece_kind is None or self.piece_shape is None or self.game_over:
            return self.board.copy()
        ghost = self.ghost_y if include_ghost else None
        return compose_board(self.board, self.piece_kind, self.piece_shape, self.piece_x, self.piece_y, ghost)


def compose_board(board: np.ndarray, kind: TetrominoType, shape: Shape, x: int, y: int,
                  ghost_y: Optional[int] = None) -> np.ndarray:
    """Overlay a falling piece on a copy of `board`.

    Locked cells keep their positive id, the piece is written as its negated
    id and, when `ghost_y` is given, free cells under the landing position
    are marked with GHOST_VALUE. `board` itself is never modified.
    """
    state = np.array(board, dtype=np.int8, copy=True)
    h, w = state.shape
    rows, cols = np.nonzero(shape)
    if ghost_y is not None:
        for sy, sx in zip(rows, cols):
            gx, gy = x + int(sx), ghost_y + int(sy)
            if 0 <= gx < w and 0 <= gy < h and state[gy, gx] == 0:
                state[gy, gx] = GHOST_VALUE
    for sy, sx in zip(rows, cols):
        px, py = x + int(sx), y + int(sy)
        if 0 <= px < w and 0 <= py < h:
            # Use negative to indicate falling piece overlay
            state[py, px] = -int(kind)
    return state


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr = arr.copy()
    arr.setflags(write=False)
    return arr


class BlockfallGame:
    """Game session: owns the board, the falling piece and all counters.

    Commands and gravity ticks are applied one at a time through `apply`.
    Consumers either call `dispatch` or queue with `submit` and let
    `update` drain the queue before advancing the gravity clock.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.timer = GravityTimer()
        self.score = 0
        self.lines_cleared_total = 0
        self.level = 1
        self.pieces_locked = 0
        self.status = GameStatus.READY
        self.current_piece: Optional[ActivePiece] = None
        self.next_kind: TetrominoType = random_kind(self.rng)
        self._pending: Deque[Action] = deque()

    @property
    def paused(self) -> bool:
        return self.status is GameStatus.PAUSED

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    @property
    def gravity_interval_ms(self) -> float:
        return self.rules.gravity_interval_ms(self.level)

    # Lifecycle

    def start(self) -> None:
        if self.status is not GameStatus.READY:
            return
        self.status = GameStatus.RUNNING
        self._spawn_piece()
        if self.status is GameStatus.RUNNING:
            self.timer.arm(self.gravity_interval_ms)

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.grid.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.level = 1
        self.pieces_locked = 0
        self.current_piece = None
        self.next_kind = random_kind(self.rng)
        self.status = GameStatus.READY
        logger.info("session reset")
        self.start()

    # Command stream

    def submit(self, action: Action) -> None:
        self._pending.append(Action(action))

    def process_pending(self) -> None:
        while self._pending:
            self.apply(self._pending.popleft())

    def dispatch(self, action: Action) -> None:
        self.submit(action)
        self.process_pending()

    def update(self, elapsed_ms: float) -> int:
        """Apply queued commands, then any gravity ticks that fall due. Returns the tick count."""
        self.process_pending()
        self.timer.advance(elapsed_ms)
        ticks = 0
        while self.timer.pop_due():
            self.gravity_tick()
            ticks += 1
        return ticks

    def apply(self, action: Action) -> None:
        if action == Action.RESET:
            self.reset()
            return
        if action == Action.TOGGLE_PAUSE:
            self.toggle_pause()
            return
        if self.status is not GameStatus.RUNNING:
            return

        if action == Action.LEFT:
            self._move(-1)
        elif action == Action.RIGHT:
            self._move(1)
        elif action == Action.ROTATE_CW:
            self._rotate(CW)
        elif action == Action.ROTATE_CCW:
            self._rotate(CCW)
        elif action == Action.SOFT_DROP:
            self._drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.NONE:
            pass

    def toggle_pause(self) -> None:
        if self.status is GameStatus.RUNNING:
            self.status = GameStatus.PAUSED
            self.timer.cancel()
            logger.info("paused")
        elif self.status is GameStatus.PAUSED:
            self.status = GameStatus.RUNNING
            self.timer.arm(self.gravity_interval_ms)
            logger.info("resumed")

    def gravity_tick(self) -> None:
        if self.status is GameStatus.RUNNING:
            self._drop()

    # Movement

    def _move(self, dx: int) -> None:
        piece = self.current_piece
        assert piece is not None
        if not collides(piece.shape, piece.x, piece.y, self.grid, dx=dx):
            piece.x += dx

    def _rotate(self, direction: int) -> None:
        assert self.current_piece is not None
        resolve_rotation(self.current_piece, self.grid, direction)

    def _drop(self) -> None:
        piece = self.current_piece
        assert piece is not None
        if not collides(piece.shape, piece.x, piece.y, self.grid, dy=1):
            piece.y += 1
        else:
            piece.collided = True
            self._lock_piece()

    def _drop_distance(self, piece: ActivePiece) -> int:
        dy = 0
        while not collides(piece.shape, piece.x, piece.y, self.grid, dy=dy + 1):
            dy += 1
        return dy

    def hard_drop(self) -> None:
        piece = self.current_piece
        if piece is None or self.status is not GameStatus.RUNNING:
            return
        piece.y += self._drop_distance(piece)
        piece.collided = True
        self._lock_piece()

    def ghost_y(self) -> Optional[int]:
        piece = self.current_piece
        if piece is None:
            return None
        return piece.y + self._drop_distance(piece)

    # Lock & sweep

    def _lock_piece(self) -> None:
        piece = self.current_piece
        assert piece is not None and piece.collided
        self.grid.lock(piece.shape, piece.x, piece.y, int(piece.kind))
        self.pieces_locked += 1
        lines = self.grid.sweep_completed_rows()
        self._apply_score(lines)
        logger.debug("locked %s at (%d, %d)", piece.kind.name, piece.x, piece.y)

        # The piece that just locked with its anchor in the top row ends the game
        topped_out = piece.y < 1
        self._spawn_piece()
        if topped_out and self.status is GameStatus.RUNNING:
            self._end_game("piece locked in the top row")

    def _apply_score(self, lines: int) -> None:
        delta = self.rules.evaluate(lines, self.level, self.lines_cleared_total)
        if delta.lines == 0:
            return
        self.score += delta.points
        self.lines_cleared_total += delta.lines
        logger.info("cleared %d row(s) for %d points", delta.lines, delta.points)
        if delta.level_up:
            self.level += 1
            self.timer.arm(self.gravity_interval_ms)
            logger.info("level %d, gravity every %.1f ms", self.level, self.gravity_interval_ms)

    def _spawn_piece(self) -> None:
        self.current_piece = ActivePiece.spawn(self.next_kind, self.grid.width)
        self.next_kind = random_kind(self.rng)
        piece = self.current_piece
        logger.debug("spawned %s, next %s", piece.kind.name, self.next_kind.name)
        if collides(piece.shape, piece.x, piece.y, self.grid):
            self._end_game("spawn position is blocked")

    def _end_game(self, reason: str) -> None:
        self.status = GameStatus.GAME_OVER
        self.timer.cancel()
        logger.info("game over (%s): score %d, lines %d, level %d",
                    reason, self.score, self.lines_cleared_total, self.level)

    # Read side

    def compose(self, include_ghost: bool = False) -> np.ndarray:
        """Board with the falling piece overlaid as negative ids (and optional ghost cells)."""
        piece = self.current_piece
        if piece is None or self.game_over:
            return self.grid.clone_state()
        ghost = self.ghost_y() if include_ghost else None
        return compose_board(self.grid.grid, piece.kind, piece.shape, piece.x, piece.y, ghost)

    def snapshot(self) -> GameSnapshot:
        piece = self.current_piece
        return GameSnapshot(
            board=_frozen(self.grid.grid),
            piece_kind=piece.kind if piece is not None else None,
            piece_shape=_frozen(piece.shape) if piece is not None else None,
            piece_x=piece.x if piece is not None else 0,
            piece_y=piece.y if piece is not None else 0,
            next_kind=self.next_kind,
            score=self.score,
            lines=self.lines_cleared_total,
            level=self.level,
            status=self.status,
            ghost_y=self.ghost_y(),
        )
