"""
Play the tank duel in an Arcade window

Usage:
    python -m tankduel --preset sudden_death --rounds 3
"""

import argparse
import logging

from .config import DEFAULT_PRESET, MATCH_PRESETS, ROUND_CHOICES, parse_max_rounds
from .match import MatchController


def main(argv=None):
    parser = argparse.ArgumentParser(description="Tank Duel - human vs bot")
    parser.add_argument("--preset", type=str, default=DEFAULT_PRESET,
                        choices=sorted(MATCH_PRESETS),
                        help="Rule set (default: %(default)s)")
    parser.add_argument("--rounds", type=str, default="5",
                        help=f"Rounds per match, one of {ROUND_CHOICES[:-1]} or 'endless'")
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    controller = MatchController(preset=args.preset)
    print(f"Preset: {args.preset} - {MATCH_PRESETS[args.preset]['description']}")

    from .window import run_game
    run_game(controller, max_rounds=parse_max_rounds(args.rounds))


if __name__ == "__main__":
    main()
