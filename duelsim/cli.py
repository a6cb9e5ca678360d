from __future__ import annotations
import argparse
import json
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from duelsim.battle.render import render_battle
from duelsim.battle.service import battle_service
from duelsim.core.errors import DuelsimError
from duelsim.core.logging import LEVELS, logger
from duelsim.data.loader import demo_matchup, load_matchup
from duelsim.system.settings import Settings

EXIT_OK = 0
EXIT_ERROR = 2

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="duelsim",
        description="Run a seeded one-on-one battle from a matchup file and print the log.",
        epilog="Without a matchup path the bundled demo matchup is used.",
    )
    parser.add_argument("matchup", nargs="?", default=None,
                        help="Path to a matchup JSON file")
    parser.add_argument("--seed", type=int, default=None,
                        help="Override the matchup seed (integer)")
    parser.add_argument("--max-turns", type=int, default=None,
                        help="Stop after this many turns if nobody has fainted")
    parser.add_argument("--log-level", choices=LEVELS, default=None,
                        help="Logger threshold (defaults to the settings file)")
    parser.add_argument("--json", action="store_true",
                        help="Print the final battle state as JSON instead of the rich view")
    return parser

def run(argv: Optional[List[str]] = None, *, console: Optional[Console] = None,
        settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or Settings.load()
    settings.apply()
    if args.log_level:
        logger.set_level(args.log_level)
    console = console or Console()

    try:
        matchup = load_matchup(args.matchup) if args.matchup else demo_matchup()
        seed = next((s for s in (args.seed, matchup.seed, settings.data.default_seed) if s is not None), None)
        max_turns = next(t for t in (args.max_turns, matchup.max_turns, settings.data.max_turns) if t is not None)
        c1, c2 = matchup.combatants
        battle = battle_service.run_scripted(c1, c2, matchup.sides[0].moves, matchup.sides[1].moves,
                                             seed=seed, max_turns=max_turns)
    except DuelsimError as e:
        logger.error("BattleFailed", error=str(e))
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        return EXIT_ERROR

    if args.json:
        console.print_json(json.dumps(battle.to_dict()))
    else:
        render_battle(battle, console, bar_width=settings.data.hp_bar_width)
    return EXIT_OK

if __name__ == "__main__":
    sys.exit(run())
