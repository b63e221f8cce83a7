from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockfall.game import Action, BlockfallGame, GameConfig, GHOST_VALUE, TetrominoType, color_for

# Player-facing actions in Discrete order; pause and reset stay outside the agent's control.
PLAY_ACTIONS = (
    Action.LEFT,
    Action.RIGHT,
    Action.ROTATE_CW,
    Action.ROTATE_CCW,
    Action.SOFT_DROP,
    Action.HARD_DROP,
    Action.NONE,
)


class BlockfallEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = BlockfallGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.game.grid.height, self.game.grid.width
        n_kinds = len(TetrominoType)

        # Observation space: composed board (locked > 0, falling < 0) and the pending piece id
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_kinds, high=GHOST_VALUE, shape=(h, w), dtype=np.int8),
                "next_piece": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(PLAY_ACTIONS))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "board": self.game.compose().astype(np.int8),
            "next_piece": int(self.game.next_kind),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines": self.game.lines_cleared_total,
            "level": self.game.level,
            "pieces_locked": self.game.pieces_locked,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.game.score
        self.game.dispatch(PLAY_ACTIONS[int(action)])
        # One gravity interval of simulated time per step
        self.game.update(self.game.gravity_interval_ms)
        self._steps += 1

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            # human rendering delegated to external UI; noop
            return None
        state = self.game.compose(include_ghost=True)
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                if v == GHOST_VALUE:
                    color = (70, 70, 80)
                elif v != 0:
                    color = color_for(TetrominoType(abs(v)))
                else:
                    color = (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
