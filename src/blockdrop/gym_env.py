"""Gymnasium-compatible wrapper driving the engine one tick per step.

Observation is a flat vector suitable for SB3 MlpPolicy by default.
It includes:
  - board occupancy (rows x cols, 220 on the default board)
  - active piece one-hot (7)
  - preview piece one-hot (7)

Action space is Discrete(6): the integer values of :class:`Command`.  Reward
is the score gained during the tick.
"""

from __future__ import annotations

import random
from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import COLS, ROWS
from .engine import DROP_INTERVAL, BoardEngine, Command, KickPolicy
from .tetromino import PLAYABLE_TYPES, Tetromino, TetrominoType
from .utils import render_text


class BlockDropTickEnv(gym.Env):
    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 60,
    }

    def __init__(
        self,
        *,
        rows: int = ROWS,
        cols: int = COLS,
        drop_interval: int = DROP_INTERVAL,
        kick_policy: KickPolicy = KickPolicy.REVERT,
        max_steps: Optional[int] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.rows = rows
        self.cols = cols
        self.drop_interval = drop_interval
        self.kick_policy = kick_policy
        self.render_mode = render_mode
        self.action_space = spaces.Discrete(len(Command))
        self._obs_size = rows * cols + 2 * len(PLAYABLE_TYPES)
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(self._obs_size,), dtype=np.float32
        )
        self._rng = random.Random()
        self._engine = self._new_engine()
        self._steps = 0
        self._max_steps = max_steps

    @property
    def engine(self) -> BoardEngine:
        return self._engine

    def _new_engine(self) -> BoardEngine:
        return BoardEngine(
            self.rows,
            self.cols,
            drop_interval=self.drop_interval,
            kick_policy=self.kick_policy,
            rng=self._rng,
        )

    # ----------------------- Env API -----------------------
    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        if seed is not None:
            self._rng.seed(seed)
        self._engine = self._new_engine()
        self._steps = 0
        return self._observation(), self._info()

    def step(self, action: int):
        before = self._engine.score
        running = self._engine.advance(Command(int(action)))
        self._steps += 1
        reward = float(self._engine.score - before)
        terminated = not running
        truncated = self._max_steps is not None and self._steps >= self._max_steps
        return self._observation(), reward, terminated, truncated, self._info()

    def render(self):
        return render_text(self._engine)

    def close(self):
        return None

    # -------------------- Helpers -------------------------
    def _one_hot(self, piece: Tetromino) -> np.ndarray:
        out = np.zeros((len(PLAYABLE_TYPES),), dtype=np.float32)
        if piece.shape is not TetrominoType.EMPTY:
            out[int(piece.shape) - 1] = 1.0
        return out

    def _observation(self) -> np.ndarray:
        board = (np.asarray(self._engine.grid) != 0).astype(np.float32).reshape(-1)
        parts = [board, self._one_hot(self._engine.active), self._one_hot(self._engine.preview)]
        return np.concatenate(parts, dtype=np.float32)

    def _info(self) -> Dict:
        return {
            "score": self._engine.score,
            "lines_cleared": self._engine.last_cleared,
            "game_over": self._engine.game_over,
        }
