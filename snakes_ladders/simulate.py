"""Game runner: plays whole games on the simulated clock and logs each turn."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable

from snakes_ladders.ai import AIController
from snakes_ladders.config import Game, GameConfig, build_game
from snakes_ladders.driver import EventQueue, QueuedMover, RandomDice
from snakes_ladders.engine import (
    DiceRolled,
    GameEvent,
    GameObserver,
    GamePhase,
    PlayerMoved,
    PlayerWon,
    TurnStarted,
)
from snakes_ladders.players import Player

logger = logging.getLogger(__name__)


# ── Structured types ────────────────────────────────────────────────

@dataclass
class TurnRecord:
    """One player-turn: from TurnStarted to the next TurnStarted."""

    turn_number: int
    player: int  # seat index, 0-based
    start_square: int
    end_square: int
    dice_value: int | None = None
    started: bool = False
    hops: int = 0
    won: bool = False


@dataclass
class GameResult:
    winner: int | None  # seat index, or None if nobody won
    winner_name: str | None
    reason: str  # "win" | "max_rolls" | "no_active_players" | "not_started" | "stalled"
    rolls: int = 0
    turns: int = 0
    seed: int | None = None
    log: list[TurnRecord] = field(default_factory=list)


# ── Observer ────────────────────────────────────────────────────────

class TurnLogObserver:
    """Folds engine events into one TurnRecord per turn."""

    def __init__(self) -> None:
        self.records: list[TurnRecord] = []
        self.rolls = 0

    def on_event(self, event: GameEvent) -> None:
        if isinstance(event, TurnStarted):
            square = event.player.current_square
            self.records.append(TurnRecord(
                turn_number=event.turn_number,
                player=event.player.id - 1,
                start_square=square,
                end_square=square,
            ))
            return

        if not self.records:
            return
        current = self.records[-1]
        if isinstance(event, DiceRolled):
            self.rolls += 1
            current.dice_value = event.value
        elif isinstance(event, PlayerMoved):
            current.end_square = event.square
            if event.via is not None:
                current.hops += 1
            elif current.start_square == 0:
                current.started = True
        elif isinstance(event, PlayerWon):
            current.won = True


# ── Runner ───────────────────────────────────────────────────────────

DEFAULT_MAX_ROLLS = 2000  # safety valve against games that never end


class GameRunner:
    """Play one full game.

    AI seats roll through :class:`AIController`. For human seats the
    runner calls *prompt* (if any) and then requests the roll itself, so
    an all-human game still runs to completion.
    """

    def __init__(
        self,
        config: GameConfig,
        seed: int | None = None,
        max_rolls: int = DEFAULT_MAX_ROLLS,
        think_delay: float = 0.0,
        step_delay: float = 0.0,
        prompt: Callable[[Player], None] | None = None,
        observers: list[GameObserver] | None = None,
    ):
        self.config = config
        self.seed = seed
        self.max_rolls = max_rolls
        self.prompt = prompt
        self.queue = EventQueue()
        self.log = TurnLogObserver()
        self.game: Game = build_game(
            config,
            dice=RandomDice(self.queue, random.Random(seed)),
            mover=QueuedMover(self.queue, step_delay),
            observers=[self.log, *(observers or [])],
        )
        self.ai = AIController(self.game.scheduler, self.queue, think_delay)

    def play(self) -> GameResult:
        scheduler = self.game.scheduler
        start = scheduler.start_game()
        if not start.ok:
            logger.error("Could not start game: %s", start.error)
            return GameResult(winner=None, winner_name=None, reason="not_started")

        while not self._finished():
            if self.queue.step():
                continue
            # Nothing scheduled: a human seat is waiting for its roll.
            player = scheduler.current_player
            if not scheduler.is_waiting_for_roll() or player is None or player.is_ai:
                break
            if self.prompt is not None:
                self.prompt(player)
            scheduler.request_roll()

        return self._result()

    def _finished(self) -> bool:
        phase = self.game.scheduler.phase
        if phase in (GamePhase.GAME_OVER, GamePhase.IDLE):
            return True
        return self.log.rolls >= self.max_rolls

    def _result(self) -> GameResult:
        state = self.game.scheduler.state
        if state.winner is not None:
            winner, name, reason = state.winner.id - 1, state.winner.name, "win"
        elif state.phase is GamePhase.IDLE:
            winner, name, reason = None, None, "no_active_players"
        elif self.log.rolls >= self.max_rolls:
            winner, name, reason = None, None, "max_rolls"
        else:
            winner, name, reason = None, None, "stalled"
        return GameResult(
            winner=winner,
            winner_name=name,
            reason=reason,
            rolls=self.log.rolls,
            turns=state.turn_number,
            seed=self.seed,
            log=list(self.log.records),
        )


def simulate_games(
    games: int,
    number_of_players: int = 2,
    seed: int | None = None,
    max_rolls: int = DEFAULT_MAX_ROLLS,
) -> list[GameResult]:
    """Run *games* all-AI games on the traditional board."""
    rng = random.Random(seed)
    results = []
    for _ in range(games):
        config = GameConfig.traditional(
            number_of_players=number_of_players,
            number_of_ai_players=number_of_players,
        )
        runner = GameRunner(config, seed=rng.randrange(2**32), max_rolls=max_rolls)
        results.append(runner.play())
    return results
