"""Simple pygame front-end for the block engine.

This module provides a minimal playable version of the game on top of
:class:`~blockdrop.engine.BoardEngine`.  Key presses are buffered into a single
pending command (the last key before a frame wins) and every frame advances the
engine by exactly one tick.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

import pygame

from .engine import BoardEngine, Command
from .tetromino import PLAYABLE_TYPES, TetrominoType, shape_cells

LOGGER = logging.getLogger(__name__)

# Size of a single board cell in pixels
CELL_SIZE = 30
# Frames per second; one engine tick per frame
FPS = 60
# Ticks between gravity steps, half a second at the default frame rate
DROP_TICKS = 30
# Width in pixels of the side panel holding the preview and score
PANEL_WIDTH = 6 * CELL_SIZE

SHAPE_COLORS = {
    TetrominoType.I: (0, 255, 255),
    TetrominoType.S: (0, 255, 0),
    TetrominoType.Z: (255, 0, 0),
    TetrominoType.O: (255, 255, 0),
    TetrominoType.T: (128, 0, 128),
    TetrominoType.J: (0, 0, 255),
    TetrominoType.L: (255, 165, 0),
}

# Mapping from the integer stored in the board grid to a colour
CELL_COLORS = {int(TetrominoType.EMPTY): (0, 0, 0)}
for shape in PLAYABLE_TYPES:
    CELL_COLORS[int(shape)] = SHAPE_COLORS[shape]

KEY_COMMANDS = {
    pygame.K_LEFT: Command.LEFT,
    pygame.K_RIGHT: Command.RIGHT,
    pygame.K_UP: Command.ROTATE_CW,
    pygame.K_z: Command.ROTATE_CCW,
    pygame.K_DOWN: Command.DROP,
    pygame.K_SPACE: Command.DROP,
}


def command_for_key(key: int) -> Command:
    """Return the tick command bound to ``key`` (``NONE`` if unbound)."""

    return KEY_COMMANDS.get(key, Command.NONE)


def _draw_cell(screen: pygame.Surface, x: int, y: int, value: int) -> None:
    rect = pygame.Rect(x, y, CELL_SIZE, CELL_SIZE)
    pygame.draw.rect(screen, CELL_COLORS[value], rect)
    pygame.draw.rect(screen, (50, 50, 50), rect, 1)


def draw_board(screen: pygame.Surface, engine: BoardEngine) -> None:
    """Render the grid; the active piece is already stamped into it."""

    for r in range(engine.rows):
        for c in range(engine.cols):
            _draw_cell(screen, c * CELL_SIZE, r * CELL_SIZE, engine.cell_at(r, c))


def draw_preview(screen: pygame.Surface, engine: BoardEngine) -> None:
    """Render the next piece from the shape table in the side panel."""

    left = engine.cols * CELL_SIZE + CELL_SIZE
    preview = engine.preview
    for x, y in shape_cells(preview.shape, preview.rotation):
        _draw_cell(screen, left + y * CELL_SIZE, CELL_SIZE + x * CELL_SIZE, int(preview.shape))


class GameRunner:
    """Manage the game loop with start/stop controls."""

    def __init__(self, *, seed: Optional[int] = None, drop_interval: int = DROP_TICKS) -> None:
        self._running = False
        self._task: asyncio.Task | None = None
        self._screen: pygame.Surface | None = None
        self._engine: BoardEngine | None = None
        self._clock: pygame.time.Clock | None = None
        self._pending = Command.NONE
        self._seed = seed
        self._drop_interval = drop_interval

    @property
    def running(self) -> bool:
        return self._running

    @property
    def engine(self) -> BoardEngine | None:
        return self._engine

    def queue_key(self, key: int) -> None:
        """Buffer the command for ``key``, replacing any unconsumed one."""

        command = command_for_key(key)
        if command is not Command.NONE:
            self._pending = command

    def take_command(self) -> Command:
        """Return the buffered command and reset the buffer to ``NONE``."""

        command, self._pending = self._pending, Command.NONE
        return command

    async def _run_loop(self) -> None:
        pygame.init()
        self._engine = BoardEngine(
            drop_interval=self._drop_interval, rng=random.Random(self._seed)
        )
        width = self._engine.cols * CELL_SIZE + PANEL_WIDTH
        height = self._engine.rows * CELL_SIZE
        self._screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("blockdrop")
        self._clock = pygame.time.Clock()
        LOGGER.info("Game started")

        self._running = True
        alive = True
        while self._running:
            if self._clock:
                self._clock.tick(FPS)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN:
                    self.queue_key(event.key)

            if alive:
                alive = self._engine.advance(self.take_command())

            if self._screen:
                self._screen.fill((0, 0, 0))
                draw_board(self._screen, self._engine)
                draw_preview(self._screen, self._engine)
                status = "Game Over - " if not alive else ""
                pygame.display.set_caption(f"blockdrop - {status}Score: {self._engine.score}")
                pygame.display.flip()

            # Yield to the host event loop to keep the UI responsive
            await asyncio.sleep(0)

        pygame.quit()
        LOGGER.info("Game stopped with score %d", self._engine.score)

    def start(self) -> None:
        if self._task and not self._task.done():
            LOGGER.warning("Game already running")
            return
        try:
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._run_loop())
        except RuntimeError:
            # No running loop (plain Python); run synchronously
            asyncio.run(self._run_loop())

    def stop(self) -> None:
        if not self._running:
            LOGGER.info("Stop ignored: game not running")
            return
        self._running = False


def main() -> None:
    """Run a desktop game until the window is closed."""

    GameRunner().start()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
