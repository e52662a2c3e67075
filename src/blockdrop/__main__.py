"""Headless autoplay demo for the block engine.

Run with: `python -m blockdrop`

A seeded random driver feeds one command per tick until the game ends or the
tick budget runs out, printing text frames along the way.  Pass ``--curses``
to play interactively in the terminal instead.
"""

from __future__ import annotations

import argparse
import logging
import random
from time import sleep
from typing import Optional, Sequence

from .board import COLS, ROWS
from .engine import DROP_INTERVAL, BoardEngine, Command, KickPolicy
from .utils import render_text


LOGGER = logging.getLogger(__name__)

# Most ticks carry no input; movement and rotation are spread evenly.
COMMAND_WEIGHTS = {
    Command.NONE: 12,
    Command.LEFT: 3,
    Command.RIGHT: 3,
    Command.ROTATE_CW: 2,
    Command.ROTATE_CCW: 1,
    Command.DROP: 1,
}


def random_commands(rng: random.Random):
    """Yield an endless stream of weighted random commands."""

    commands = list(COMMAND_WEIGHTS)
    weights = list(COMMAND_WEIGHTS.values())
    while True:
        yield rng.choices(commands, weights=weights)[0]


def run_autoplay(
    engine: BoardEngine,
    *,
    ticks: int,
    rng: random.Random,
    show_every: int = 0,
    tick_delay: float = 0.0,
) -> int:
    """Drive ``engine`` for up to ``ticks`` ticks and return how many ran."""

    played = 0
    for command in random_commands(rng):
        if played >= ticks:
            break
        running = engine.advance(command)
        played += 1
        if show_every > 0 and played % show_every == 0:
            print(render_text(engine))
            print()
        if not running:
            break
        if tick_delay > 0:
            sleep(tick_delay)
    return played


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="blockdrop", description=__doc__)
    parser.add_argument("--rows", type=int, default=ROWS, help="Board height in cells.")
    parser.add_argument("--cols", type=int, default=COLS, help="Board width in cells.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for pieces and autoplay.")
    parser.add_argument("--ticks", type=int, default=20000, help="Maximum ticks to simulate.")
    parser.add_argument(
        "--drop-interval",
        type=int,
        default=DROP_INTERVAL,
        help="Ticks between gravity steps.",
    )
    parser.add_argument(
        "--kick-policy",
        choices=[policy.value for policy in KickPolicy],
        default=KickPolicy.REVERT.value,
        help="Rotation fallback when no nudged column fits.",
    )
    parser.add_argument(
        "--tick-delay",
        type=float,
        default=0.0,
        help="Seconds to sleep between autoplay ticks.",
    )
    parser.add_argument(
        "--show-every",
        type=int,
        default=0,
        help="Print a frame every N ticks (0 prints only the final frame).",
    )
    parser.add_argument(
        "--curses",
        action="store_true",
        help="Play interactively in the terminal instead of autoplaying.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(message)s"
    )

    if args.curses:
        from .run_curses import play

        return play(
            rows=args.rows,
            cols=args.cols,
            seed=args.seed,
            drop_interval=args.drop_interval,
            kick_policy=args.kick_policy,
        )

    rng = random.Random(args.seed)
    engine = BoardEngine(
        args.rows,
        args.cols,
        drop_interval=args.drop_interval,
        kick_policy=args.kick_policy,
        rng=random.Random(args.seed),
    )
    played = run_autoplay(
        engine,
        ticks=args.ticks,
        rng=rng,
        show_every=args.show_every,
        tick_delay=args.tick_delay,
    )
    print(render_text(engine))
    LOGGER.info(
        "Autoplay finished after %d ticks: score=%d lines=%d game_over=%s",
        played,
        engine.score,
        engine.lines_cleared,
        engine.game_over,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
