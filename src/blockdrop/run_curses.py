"""Curses front-end for the block engine.

Draws a bordered playfield, a next-piece box and a score box, and feeds the
engine one command per tick from non-blocking key reads.  Arrow keys move,
rotate (up) and drop (down); ``z`` rotates counter-clockwise and ``q`` quits.
"""

from __future__ import annotations

import curses
import logging
import random
from time import sleep
from typing import Optional

from .board import COLS, ROWS
from .engine import BoardEngine, Command, KickPolicy
from .tetromino import PLAYABLE_TYPES, TetrominoType, shape_cells

LOGGER = logging.getLogger(__name__)

# Seconds between ticks.
TICK_DELAY = 0.001
# Gravity in ticks for interactive play.
DROP_TICKS = 500

QUIT_KEYS = (ord("q"), ord("Q"))

KEY_COMMANDS = {
    curses.KEY_LEFT: Command.LEFT,
    curses.KEY_RIGHT: Command.RIGHT,
    curses.KEY_UP: Command.ROTATE_CW,
    curses.KEY_DOWN: Command.DROP,
    ord("z"): Command.ROTATE_CCW,
    ord("Z"): Command.ROTATE_CCW,
    ord(" "): Command.DROP,
}

CURSES_COLORS = {
    TetrominoType.I: curses.COLOR_CYAN,
    TetrominoType.S: curses.COLOR_GREEN,
    TetrominoType.Z: curses.COLOR_RED,
    TetrominoType.O: curses.COLOR_YELLOW,
    TetrominoType.T: curses.COLOR_MAGENTA,
    TetrominoType.J: curses.COLOR_BLUE,
    TetrominoType.L: curses.COLOR_WHITE,
}


def command_for_key(key: int) -> Command:
    """Map a curses key code to a tick command; unknown keys are ``NONE``."""

    return KEY_COMMANDS.get(key, Command.NONE)


class CursesView:
    """Paint the engine's read-only state into three curses windows."""

    def __init__(self, stdscr, engine: BoardEngine) -> None:
        self.engine = engine
        self.stdscr = stdscr
        curses.curs_set(0)
        stdscr.nodelay(True)
        stdscr.keypad(True)
        curses.start_color()
        for shape in PLAYABLE_TYPES:
            curses.init_pair(int(shape), CURSES_COLORS[shape], curses.COLOR_BLACK)
        side_x = 2 * (engine.cols + 1) + 1
        self.field = curses.newwin(engine.rows + 2, 2 * engine.cols + 2, 0, 0)
        self.next = curses.newwin(6, 10, 0, side_x)
        self.score = curses.newwin(6, 12, 7, side_x)

    def _block(self, window, row: int, col: int, tag: int) -> None:
        try:
            if tag:
                attr = curses.A_REVERSE | curses.color_pair(tag)
                window.addstr(row, col, "  ", attr)
            else:
                window.addstr(row, col, "  ")
        except curses.error:
            # Terminal too small for the board; skip the cell.
            pass

    def draw(self) -> None:
        engine = self.engine
        self.field.erase()
        self.field.box()
        for row in range(engine.rows):
            for col in range(engine.cols):
                self._block(self.field, row + 1, col * 2 + 1, engine.cell_at(row, col))
        self.field.noutrefresh()

        self.next.erase()
        self.next.box()
        preview = engine.preview
        for x, y in shape_cells(preview.shape, preview.rotation):
            self._block(self.next, x + 1, y * 2 + 1, int(preview.shape))
        self.next.noutrefresh()

        self.score.erase()
        self.score.addstr(0, 0, f"Score\n{engine.score}\nLines\n{engine.lines_cleared}")
        if engine.game_over:
            self.score.addstr(4, 0, "GAME OVER")
        self.score.noutrefresh()
        curses.doupdate()


def _loop(stdscr, engine: BoardEngine) -> int:
    view = CursesView(stdscr, engine)
    running = True
    while running:
        view.draw()
        sleep(TICK_DELAY)
        key = stdscr.getch()
        if key in QUIT_KEYS:
            break
        running = engine.advance(command_for_key(key))
    view.draw()
    if not running:
        stdscr.nodelay(False)
        stdscr.getch()
    return engine.score


def play(
    *,
    rows: int = ROWS,
    cols: int = COLS,
    seed: Optional[int] = None,
    drop_interval: int = DROP_TICKS,
    kick_policy: str = KickPolicy.REVERT.value,
) -> int:
    """Run an interactive game in the terminal and return the process exit code."""

    engine = BoardEngine(
        rows,
        cols,
        drop_interval=drop_interval,
        kick_policy=kick_policy,
        rng=random.Random(seed),
    )
    score = curses.wrapper(_loop, engine)
    print(f"Score: {score}")
    LOGGER.info("Terminal game finished with score %d", score)
    return 0
