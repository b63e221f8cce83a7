from __future__ import annotations

import numpy as np
import pytest

from blockfall.game import (
    GHOST_VALUE,
    Action,
    BlockfallGame,
    GameConfig,
    GameStatus,
    TetrominoType,
)

from conftest import fill_row_except, place_piece


def test_new_session_waits_in_ready():
    g = BlockfallGame(GameConfig(random_seed=3))
    assert g.status is GameStatus.READY
    assert g.current_piece is None
    assert g.next_kind in TetrominoType
    g.dispatch(Action.LEFT)
    g.dispatch(Action.TOGGLE_PAUSE)
    assert g.update(10_000) == 0
    assert g.status is GameStatus.READY
    assert g.snapshot().ghost_y is None


def test_start_spawns_from_next_slot():
    g = BlockfallGame(GameConfig(random_seed=3))
    pending = g.next_kind
    g.start()
    assert g.status is GameStatus.RUNNING
    assert g.current_piece.kind is pending
    assert (g.current_piece.x, g.current_piece.y) == (3, 0)
    assert g.timer.armed


def test_small_boards_are_rejected():
    with pytest.raises(ValueError):
        GameConfig(width=3)


def test_same_seed_same_piece_sequence():
    def sequence(seed):
        g = BlockfallGame(GameConfig(random_seed=seed))
        g.start()
        kinds = []
        for _ in range(10):
            kinds.append(g.current_piece.kind)
            g.dispatch(Action.HARD_DROP)
        return kinds

    assert sequence(42) == sequence(42)


def test_move_stops_at_the_wall(game):
    place_piece(game, TetrominoType.I)
    for _ in range(4):
        game.dispatch(Action.LEFT)
    assert game.current_piece.x == -1
    game.dispatch(Action.LEFT)
    assert game.current_piece.x == -1
    for _ in range(20):
        game.dispatch(Action.RIGHT)
    # Occupied column 1 of the I ends on board column 9
    assert game.current_piece.x == 8


def test_rotate_command(game):
    place_piece(game, TetrominoType.I, y=5)
    game.dispatch(Action.ROTATE_CW)
    assert sorted(game.current_piece.cells()) == [(3, 6), (4, 6), (5, 6), (6, 6)]
    game.dispatch(Action.ROTATE_CCW)
    assert sorted(game.current_piece.cells()) == [(4, 5), (4, 6), (4, 7), (4, 8)]


def test_hard_drop_locks_at_the_bottom_in_one_step(game):
    place_piece(game, TetrominoType.I)
    assert game.ghost_y() == 16
    game.dispatch(Action.HARD_DROP)
    assert game.pieces_locked == 1
    assert (game.grid.grid[16:20, 4] == int(TetrominoType.I)).all()
    assert int((game.grid.grid != 0).sum()) == 4
    assert game.grid.grid.shape == (20, 10)
    assert (game.current_piece.x, game.current_piece.y) == (3, 0)
    assert not game.current_piece.collided
    assert game.status is GameStatus.RUNNING


def test_soft_drop_moves_one_row_then_locks(game):
    place_piece(game, TetrominoType.O, y=17)
    game.dispatch(Action.SOFT_DROP)
    assert game.current_piece.y == 18
    assert game.pieces_locked == 0
    game.dispatch(Action.SOFT_DROP)
    assert game.pieces_locked == 1
    assert game.grid.cell(3, 18) == int(TetrominoType.O)


def test_clearing_two_rows_at_level_three(game):
    game.level = 3
    fill_row_except(game, 19, 4)
    fill_row_except(game, 18, 4)
    place_piece(game, TetrominoType.I)
    game.dispatch(Action.HARD_DROP)
    assert game.score == 300
    assert game.lines_cleared_total == 2
    # The two I cells left over slid to the bottom
    assert game.grid.cell(4, 19) == game.grid.cell(4, 18) == int(TetrominoType.I)
    assert not game.grid.grid[:18].any()


def test_level_up_once_per_threshold(game):
    game.lines_cleared_total = 9
    fill_row_except(game, 19, 4)
    place_piece(game, TetrominoType.I)
    game.dispatch(Action.HARD_DROP)
    assert game.lines_cleared_total == 10
    assert game.level == 2
    assert game.timer.interval_ms == pytest.approx(400.0)

    fill_row_except(game, 19, 3)
    place_piece(game, TetrominoType.I, x=2)
    game.dispatch(Action.HARD_DROP)
    assert game.lines_cleared_total == 11
    assert game.level == 2
    assert game.score == 40 + 40 * 2


def test_gravity_ticks_follow_elapsed_time(game):
    place_piece(game, TetrominoType.T)
    assert game.update(600) == 0
    assert game.update(100) == 1
    assert game.current_piece.y == 1
    assert game.update(2 * game.gravity_interval_ms) == 2
    assert game.current_piece.y == 3


def test_queued_commands_apply_in_order_on_update(game):
    place_piece(game, TetrominoType.O)
    game.submit(Action.LEFT)
    game.submit(Action.LEFT)
    assert game.current_piece.x == 3
    game.update(0)
    assert game.current_piece.x == 1


def test_pause_suspends_commands_and_gravity(game):
    place_piece(game, TetrominoType.O)
    game.dispatch(Action.TOGGLE_PAUSE)
    assert game.paused and game.status is GameStatus.PAUSED
    assert not game.timer.armed
    game.dispatch(Action.LEFT)
    game.dispatch(Action.HARD_DROP)
    assert game.update(10_000) == 0
    assert (game.current_piece.x, game.current_piece.y) == (3, 0)
    assert game.pieces_locked == 0

    game.dispatch(Action.TOGGLE_PAUSE)
    assert game.status is GameStatus.RUNNING
    assert game.timer.armed
    game.dispatch(Action.LEFT)
    assert game.current_piece.x == 2


def test_lock_in_the_top_row_ends_the_game(game):
    place_piece(game, TetrominoType.O, x=0)
    game.grid.grid[2, 0] = 5
    game.gravity_tick()
    assert game.game_over
    assert game.status is GameStatus.GAME_OVER
    assert not game.timer.armed
    assert game.grid.cell(0, 0) == int(TetrominoType.O)

    piece = game.current_piece
    x, y = piece.x, piece.y
    game.dispatch(Action.LEFT)
    game.dispatch(Action.TOGGLE_PAUSE)
    assert game.update(10_000) == 0
    assert (piece.x, piece.y) == (x, y)
    assert game.status is GameStatus.GAME_OVER


def test_blocked_spawn_ends_the_game(game):
    game.grid.grid[0:4, 3:7] = 2
    place_piece(game, TetrominoType.O, x=0, y=5)
    game.dispatch(Action.HARD_DROP)
    assert game.grid.cell(0, 19) == int(TetrominoType.O)
    assert game.game_over


def test_reset_starts_a_fresh_running_session(game):
    game.grid.grid[19, :5] = 1
    game.score, game.lines_cleared_total, game.level = 500, 12, 2
    game.dispatch(Action.TOGGLE_PAUSE)
    game.dispatch(Action.RESET)
    assert game.status is GameStatus.RUNNING
    assert (game.score, game.lines_cleared_total, game.level) == (0, 0, 1)
    assert not game.grid.grid.any()
    assert game.current_piece is not None
    assert game.timer.interval_ms == pytest.approx(1000 / 1.5)


def test_reset_after_game_over_in_the_same_batch(game):
    game.grid.grid[0:4, 3:7] = 2
    place_piece(game, TetrominoType.O, x=0, y=5)
    game.submit(Action.HARD_DROP)
    game.submit(Action.RESET)
    game.update(0)
    assert game.status is GameStatus.RUNNING


def test_snapshot_is_read_only(game):
    place_piece(game, TetrominoType.T)
    snap = game.snapshot()
    assert snap.piece_kind is TetrominoType.T
    assert (snap.piece_x, snap.piece_y, snap.ghost_y) == (3, 0, 17)
    assert snap.status is GameStatus.RUNNING
    assert not snap.paused and not snap.game_over
    with pytest.raises(ValueError):
        snap.board[0, 0] = 1
    with pytest.raises(ValueError):
        snap.piece_shape[0, 0] = 1
    game.dispatch(Action.HARD_DROP)
    assert not snap.board.any()


def test_compose_overlays_piece_and_ghost_without_touching_board(game):
    place_piece(game, TetrominoType.O)
    game.grid.grid[19, 0] = 6
    state = game.compose(include_ghost=True)
    assert state[0, 3] == state[1, 4] == -int(TetrominoType.O)
    assert state[18, 3] == state[19, 4] == GHOST_VALUE
    assert state[19, 0] == 6
    assert int((game.grid.grid != 0).sum()) == 1

    plain = game.compose()
    assert not (plain == GHOST_VALUE).any()
    np.testing.assert_array_equal(game.snapshot().compose(include_ghost=True), state)
