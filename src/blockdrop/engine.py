"""Tick-driven board engine.

:class:`BoardEngine` owns the board, the active and preview pieces, the score
and the drop timer.  A driver calls :meth:`BoardEngine.advance` once per tick
with at most one :class:`Command`; the engine applies gravity, the command and
any line clears, then reports whether the game continues.

The active piece is kept stamped into the board between ticks.  Every
operation that changes its placement runs inside :meth:`BoardEngine._lifted`,
which erases the piece first and stamps it again on exit, so callers never
observe a half-moved piece.
"""

from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from enum import Enum, IntEnum
from typing import Iterator, Optional, Protocol, Sequence, Union

from .board import COLS, ROWS, Board
from .tetromino import WINDOW, PLAYABLE_TYPES, Tetromino, TetrominoType


LOGGER = logging.getLogger(__name__)

# Ticks between forced one-row gravity steps.
DROP_INTERVAL = 500

# Reward indexed by rows cleared in a single tick.
LINE_REWARDS = (0, 40, 100, 300, 1200)
MAX_LINES = len(LINE_REWARDS) - 1

# Rows that must stay empty, ignoring the active piece, for play to continue.
GAME_OVER_ROWS = 2

# Column nudges tried in order when a rotation does not fit in place.  The
# offsets are cumulative: left one, right two, left one again.
KICK_STEPS = (-1, 2, -1)


class Command(IntEnum):
    """Input supplied by the driver for a single tick."""

    NONE = 0
    LEFT = 1
    RIGHT = 2
    ROTATE_CW = 3
    ROTATE_CCW = 4
    DROP = 5


class KickPolicy(str, Enum):
    """What a rotation does when no nudged column fits.

    ``REVERT`` restores the previous rotation and column.  ``CYCLE`` keeps
    turning in the requested direction and repeats the nudge search, which
    always ends because the starting configuration fits.
    """

    REVERT = "revert"
    CYCLE = "cycle"


class RandomSource(Protocol):
    def randrange(self, start: int, stop: int) -> int: ...


class BoardEngine:
    """Falling-block simulation on a fixed ``rows x cols`` grid."""

    def __init__(
        self,
        rows: int = ROWS,
        cols: int = COLS,
        *,
        drop_interval: int = DROP_INTERVAL,
        kick_policy: Union[KickPolicy, str] = KickPolicy.REVERT,
        rng: Optional[RandomSource] = None,
    ) -> None:
        if rows < WINDOW or cols < WINDOW:
            raise ValueError(f"Board must be at least {WINDOW}x{WINDOW}, got {rows}x{cols}")
        if drop_interval < 1:
            raise ValueError("drop_interval must be positive")
        self.board = Board(rows, cols)
        self.drop_interval = drop_interval
        self.kick_policy = KickPolicy(kick_policy)
        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._score = 0
        self._lines = 0
        self._last_cleared = 0
        self._game_over = False
        self._timer = drop_interval
        self.active = Tetromino()
        self.preview = Tetromino()
        # False while a freshly spawned piece waits off the board for room.
        self._placed = True
        self._spawn()
        self._spawn()

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------
    @property
    def rows(self) -> int:
        return self.board.rows

    @property
    def cols(self) -> int:
        return self.board.cols

    @property
    def grid(self):
        """Read-only 2-D view of the cell tags, active piece included."""

        return self.board.grid

    @property
    def score(self) -> int:
        return self._score

    @property
    def lines_cleared(self) -> int:
        return self._lines

    @property
    def last_cleared(self) -> int:
        return self._last_cleared

    @property
    def drop_timer(self) -> int:
        return self._timer

    @property
    def game_over(self) -> bool:
        return self._game_over

    def cell_at(self, row: int, col: int) -> int:
        """Return the tag at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """

        return self.board.get_cell(row, col)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def advance(self, command: Union[Command, int] = Command.NONE) -> bool:
        """Run one tick and return ``True`` while the game continues.

        Raises:
            ValueError: If ``command`` is not a :class:`Command` value.
        """

        command = Command(command)
        if self._game_over:
            return False

        self._last_cleared = 0
        self._timer -= 1
        if self._timer <= 0:
            self._gravity()
        if self._placed:
            self._dispatch(command)

        cleared = self._clear_lines()
        self._award(cleared)

        # A spawn blocked by a row that just cleared gets its cells now.
        if not self._placed:
            self._place()
        if not self._placed:
            # Never stamp over locked cells; leave the blocked piece off the board.
            self.active = Tetromino()
            self._placed = True
            self._end_game("spawn position is blocked")
        elif self._topped_out():
            self._end_game("stack reached the spawn rows")
        return not self._game_over

    def _dispatch(self, command: Command) -> None:
        if command is Command.LEFT:
            self.move(-1)
        elif command is Command.RIGHT:
            self.move(1)
        elif command is Command.ROTATE_CW:
            self.rotate(1)
        elif command is Command.ROTATE_CCW:
            self.rotate(-1)
        elif command is Command.DROP:
            self.drop()

    # ------------------------------------------------------------------
    # Piece operations
    # ------------------------------------------------------------------
    @contextmanager
    def _lifted(self) -> Iterator[Tetromino]:
        """Erase the active piece for the duration of the block.

        The piece is stamped again on exit at whatever placement the block
        left it in, so the fit test inside the block never sees the piece's
        own cells.  A piece still waiting for room is left untouched.
        """

        placed = self._placed
        if placed:
            self.board.erase(self.active)
        try:
            yield self.active
        finally:
            if placed:
                self.board.stamp(self.active)

    def _gravity(self) -> None:
        with self._lifted() as piece:
            piece.move(0, 1)
            landed = not self.board.fits(piece)
            if landed:
                piece.move(0, -1)
            else:
                self._timer = self.drop_interval
        if landed:
            self._lock()

    def move(self, direction: int) -> None:
        """Shift the active piece one column left (``-1``) or right (``1``)."""

        with self._lifted() as piece:
            piece.move(direction, 0)
            if not self.board.fits(piece):
                piece.move(-direction, 0)

    def rotate(self, direction: int) -> None:
        """Turn the active piece a quarter in ``direction``, nudging if needed."""

        with self._lifted() as piece:
            start_rotation, start_position = piece.rotation, piece.position
            attempts = 1 if self.kick_policy is KickPolicy.REVERT else WINDOW
            for _ in range(attempts):
                piece.rotate(direction)
                if self._kick(piece):
                    return
            piece.rotation, piece.position = start_rotation, start_position

    def _kick(self, piece: Tetromino) -> bool:
        if self.board.fits(piece):
            return True
        for step in KICK_STEPS:
            piece.move(step, 0)
            if self.board.fits(piece):
                return True
        return False

    def drop(self) -> None:
        """Hard drop: fall until blocked, lock and spawn the next piece."""

        with self._lifted() as piece:
            while self.board.fits(piece):
                piece.move(0, 1)
            piece.move(0, -1)
        self._lock()

    def _lock(self) -> None:
        LOGGER.debug(
            "Locked %s at %s rotation %d",
            self.active.shape.name,
            self.active.position,
            self.active.rotation,
        )
        self._spawn()

    def _spawn(self) -> None:
        """Promote the preview piece to active and draw a new preview.

        If the spawn cells are occupied the piece stays off the board; the
        tick retries after clearing rows and ends the game if it still fails.
        """

        self.active = self.preview
        self.active.position = (0, self.cols // 2 - 2)
        self.preview = Tetromino(
            TetrominoType(self._rng.randrange(1, len(PLAYABLE_TYPES) + 1)),
            rotation=0,
            position=(0, self.cols // 2 - 2),
        )
        self._timer = self.drop_interval
        self._placed = False
        self._place()
        if self.active.shape is not TetrominoType.EMPTY:
            LOGGER.debug(
                "Spawned %s (%s), next %s",
                self.active.shape.name,
                "placed" if self._placed else "blocked",
                self.preview.shape.name,
            )

    def _place(self) -> None:
        if self.board.fits(self.active):
            self.board.stamp(self.active)
            self._placed = True

    # ------------------------------------------------------------------
    # Rows, score and game over
    # ------------------------------------------------------------------
    def _clear_lines(self) -> int:
        with self._lifted():
            cleared = self.board.clear_full_rows()
        return cleared

    def _award(self, cleared: int) -> None:
        self._last_cleared = cleared
        if not cleared:
            return
        reward = LINE_REWARDS[min(cleared, MAX_LINES)]
        self._lines += cleared
        self._score += reward
        LOGGER.debug("Cleared %d row(s) for %d points. Score: %d", cleared, reward, self._score)

    def _topped_out(self) -> bool:
        with self._lifted():
            return self.board.occupied_in_rows(GAME_OVER_ROWS)

    def _end_game(self, reason: str) -> None:
        self._game_over = True
        LOGGER.info("Game over (%s). Score: %d", reason, self._score)

    # ------------------------------------------------------------------
    # Testing conveniences
    # ------------------------------------------------------------------
    def load_grid(self, grid: Sequence[Sequence[int]]) -> None:
        """Replace the locked board contents, keeping the active piece.

        The active piece is stamped back on top of ``grid``.  This helper
        exists for tests that need to craft specific board states.
        """

        with self._lifted():
            self.board.load(grid)

    def set_active(
        self,
        shape: TetrominoType,
        *,
        rotation: int = 0,
        position: Optional[tuple[int, int]] = None,
    ) -> Tetromino:
        """Replace the active piece without any fit check and return it."""

        if position is None:
            position = (0, self.cols // 2 - 2)
        if self._placed:
            self.board.erase(self.active)
        self.active = Tetromino(TetrominoType(shape), rotation % 4, position)
        self.board.stamp(self.active)
        self._placed = True
        return self.active


__all__ = [
    "BoardEngine",
    "Command",
    "KickPolicy",
    "DROP_INTERVAL",
    "LINE_REWARDS",
    "GAME_OVER_ROWS",
]
