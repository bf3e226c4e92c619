"""
Command-line entry point for the roulette engine.

Spins the wheel (or runs the arcade chase) once over the names given on
the command line and prints the winner:

    roulette Alice Bob:2 Carol:0.5
    roulette --arcade --max-time 3 --seed 7 Alice Bob Carol
"""

import argparse
import asyncio
import logging
import math
import random
import sys
from typing import Optional, Sequence

from roulette.arcade import ArcadeAnimator
from roulette.config import Settings, get_settings
from roulette.core.events import Event, EventBus, EventType
from roulette.core.scheduler import AsyncioScheduler
from roulette.core.timing import to_float
from roulette.selection import Entry
from roulette.wheel import SpinAnimator

logger = logging.getLogger(__name__)

EXIT_NO_ENTRIES = 2


def setup_logging(debug: bool = False, level_name: str = "INFO") -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_entry(token: str) -> Entry:
    """Parse ``NAME`` or ``NAME:WEIGHT``. A bad weight falls back to 1."""
    name, sep, weight_text = token.rpartition(":")
    if not sep:
        return Entry(token.strip())
    weight = to_float(weight_text)
    if math.isnan(weight):
        return Entry(token.strip())
    return Entry(name.strip(), weight)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roulette",
        description="Pick one name with a weighted roulette spin.",
    )
    parser.add_argument("names", nargs="+", help="NAME or NAME:WEIGHT (weight 0.1-10)")
    parser.add_argument("--arcade", action="store_true", help="Use the light-chase board")
    parser.add_argument("--max-time", type=float, default=None, help="Total spin seconds (1-20)")
    parser.add_argument("--decel-time", type=float, default=None, help="Slow-down seconds (0.2-3)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible spin")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


async def run_spin(
    entries: Sequence[Entry],
    settings: Settings,
    arcade: bool = False,
    max_time: Optional[float] = None,
    decel_time: Optional[float] = None,
    seed: Optional[int] = None,
) -> Optional[str]:
    """Run one spin to completion. Returns the winner, None if nothing can spin."""
    rng = random.Random(seed)
    scheduler = AsyncioScheduler()
    event_bus = EventBus()

    animator: SpinAnimator | ArcadeAnimator
    if arcade:
        animator = ArcadeAnimator(
            scheduler, rng.random, event_bus, settings.arcade, settings.timing, entries
        )
    else:
        animator = SpinAnimator(
            scheduler, rng.random, event_bus, settings.spin, settings.timing, entries
        )

    def on_highlight(event: Event) -> None:
        logger.debug(f"Under pointer: {event.data.get('current', '')}")

    event_bus.subscribe(EventType.HIGHLIGHT_CHANGED, on_highlight)

    done: asyncio.Future[str] = asyncio.get_running_loop().create_future()

    def on_finalize(winner: str) -> None:
        if not done.done():
            done.set_result(winner)

    animator.set_on_finalize(on_finalize)

    if animator.start(max_time, decel_time) is None:
        return None

    winner = await done

    # Let the confirmation blink play out on the arcade board
    if arcade:
        while animator.blink.active:
            await asyncio.sleep(settings.arcade.blink_interval_sec)

    return winner


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.debug or settings.debug, settings.log_level)

    seed = args.seed if args.seed is not None else settings.seed
    entries = [parse_entry(token) for token in args.names]

    try:
        winner = asyncio.run(run_spin(
            entries,
            settings,
            arcade=args.arcade,
            max_time=args.max_time,
            decel_time=args.decel_time,
            seed=seed,
        ))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    if winner is None:
        print("No eligible entries to spin", file=sys.stderr)
        sys.exit(EXIT_NO_ENTRIES)

    print(winner or "(none)")


if __name__ == "__main__":
    main()
