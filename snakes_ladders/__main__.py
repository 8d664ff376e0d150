"""CLI entry point: python -m snakes_ladders {play,simulate,stats,chart}."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from snakes_ladders.chart import make_win_rate_chart, win_rates
from snakes_ladders.config import GameConfig
from snakes_ladders.engine import DiceRolled, GameEvent, PlayerMoved, PlayerWon, TurnStarted
from snakes_ladders.errors import InvalidConfiguration
from snakes_ladders.persistence import ResultsDB
from snakes_ladders.players import Player
from snakes_ladders.rules import GameRules
from snakes_ladders.simulate import GameRunner, simulate_games


RESULTS_DIR = Path("results")
DB_PATH = RESULTS_DIR / "simulations.db"


def _open_db(path: Path) -> ResultsDB:
    return ResultsDB(path)


# ── play ─────────────────────────────────────────────────────────────

class TerminalView:
    """Prints engine events for a human at the terminal."""

    def __init__(self, rules: GameRules):
        self.rules = rules

    def on_event(self, event: GameEvent) -> None:
        if isinstance(event, TurnStarted):
            player = event.player
            where = (
                f"on square {player.current_square}" if player.has_started
                else f"off the board (roll a {self.rules.starting_dice_value} to start)"
            )
            print(f"\n=== {player.name}'s turn ===  {player.name} is {where}.")
        elif isinstance(event, DiceRolled):
            print(f"{event.player.name} rolled a {event.value}.")
        elif isinstance(event, PlayerMoved):
            if event.via is None:
                print(f"{event.player.name} moves to {event.square}.")
            elif event.via.is_ladder:
                print(f"  Ladder! {event.player.name} climbs to {event.square}.")
            else:
                print(f"  Snake! {event.player.name} slides down to {event.square}.")
        elif isinstance(event, PlayerWon):
            print(f"\n{event.player.name} WINS!")


def _prompt(player: Player) -> None:
    input(f"{player.name}: press Enter to roll ")


def cmd_play(args: argparse.Namespace) -> None:
    """Interactive game at the terminal."""
    rules = GameRules(
        starting_dice_value=args.start_value,
        bonus_turn_enabled=not args.no_bonus,
    )
    config = GameConfig.traditional(
        number_of_players=args.players,
        number_of_ai_players=args.ai,
        rules=rules,
    )
    runner = GameRunner(
        config,
        seed=args.seed,
        prompt=_prompt,
        observers=[TerminalView(rules)],
    )
    try:
        result = runner.play()
    except (KeyboardInterrupt, EOFError):
        print("\nGame abandoned.")
        return
    print(f"\nGame over: {result.reason} after {result.rolls} rolls.")


# ── simulate ─────────────────────────────────────────────────────────

def cmd_simulate(args: argparse.Namespace) -> None:
    """Run AI-only games and record them."""
    db = _open_db(args.db)
    results = simulate_games(
        args.games,
        number_of_players=args.players,
        seed=args.seed,
        max_rolls=args.max_rolls,
    )
    for i, result in enumerate(results):
        db.record_game(result, players=args.players)
        label = f"[{i + 1}/{len(results)}]"
        print(f"{label} {result.reason} → {result.winner_name or 'nobody'} ({result.rolls} rolls)")
    db.close()
    print(f"\nDone. {len(results)} games recorded in {args.db}.")


# ── stats ────────────────────────────────────────────────────────────

def _load_counts(path: Path) -> dict[int, int]:
    if not path.exists():
        print(f"No database found at {path}. Run some simulations first.", file=sys.stderr)
        sys.exit(1)
    db = _open_db(path)
    counts = db.win_counts_by_seat()
    db.close()
    if not counts:
        print("No finished games yet.", file=sys.stderr)
        sys.exit(1)
    return counts


def cmd_stats(args: argparse.Namespace) -> None:
    """Print win rate by seat from the database."""
    counts = _load_counts(args.db)
    rates = win_rates(counts)
    print("\nWin rate by seat")
    print("=" * 40)
    for seat in sorted(rates):
        print(f"  Seat {seat + 1:<3d} {counts[seat]:6d} wins  {rates[seat] * 100:6.1f}%")


# ── chart ────────────────────────────────────────────────────────────

def cmd_chart(args: argparse.Namespace) -> None:
    """Generate the win-rate chart from the database."""
    counts = _load_counts(args.db)
    out = args.output or "win_rate_by_seat.png"
    make_win_rate_chart(counts, output_path=out)
    print(f"Chart saved to {out}")


# ── main ─────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(
        prog="snakes_ladders",
        description="Snakes & Ladders turn and rules engine",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging (-vv for debug)")
    sub = parser.add_subparsers(dest="command")

    p_play = sub.add_parser("play", help="Play at the terminal")
    p_play.add_argument("--players", type=int, default=2, help="Number of players 2–10 (default 2)")
    p_play.add_argument("--ai", type=int, default=1, help="How many of them are AI (default 1)")
    p_play.add_argument("--start-value", type=int, default=1, help="Roll needed to enter the board")
    p_play.add_argument("--no-bonus", action="store_true", help="No extra turn for rolling a 6")
    p_play.add_argument("--seed", type=int, help="Dice seed")

    p_sim = sub.add_parser("simulate", help="Run AI-only games and record results")
    p_sim.add_argument("--games", type=int, default=100, help="Games to play (default 100)")
    p_sim.add_argument("--players", type=int, default=2, help="Players per game (default 2)")
    p_sim.add_argument("--seed", type=int, help="Master seed")
    p_sim.add_argument("--max-rolls", type=int, default=2000, help="Max rolls per game")
    p_sim.add_argument("--db", type=Path, default=DB_PATH, help="Results database path")

    p_stats = sub.add_parser("stats", help="Print win rate by seat")
    p_stats.add_argument("--db", type=Path, default=DB_PATH, help="Results database path")

    p_chart = sub.add_parser("chart", help="Generate win-rate chart")
    p_chart.add_argument("--output", "-o", help="Output PNG path")
    p_chart.add_argument("--db", type=Path, default=DB_PATH, help="Results database path")

    args = parser.parse_args()
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    commands = {
        "play": cmd_play,
        "simulate": cmd_simulate,
        "stats": cmd_stats,
        "chart": cmd_chart,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return
    try:
        command(args)
    except InvalidConfiguration as e:
        print(f"Invalid configuration: {e.message}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
