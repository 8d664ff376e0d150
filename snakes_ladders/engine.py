"""Turn scheduler, the state machine that runs a Snakes & Ladders game."""

from __future__ import annotations

import enum
import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, Union, runtime_checkable

from snakes_ladders.errors import (
    CommandResult,
    EngineError,
    GameAlreadyStarted,
    InvalidConfiguration,
    InvalidDiceValue,
    MoveInProgress,
    NoActivePlayers,
    NotAwaitingRoll,
    NotReady,
    RollAlreadyPending,
    SequencingError,
    StaleArrival,
    UnexpectedArrival,
)
from snakes_ladders.players import MIN_PLAYERS, Player, PlayerRegistry
from snakes_ladders.rules import DICE_FACES, GameRules, RollOutcome, resolve
from snakes_ladders.shortcuts import ShortcutEntry, ShortcutTable

logger = logging.getLogger(__name__)


# ── Boundary contracts ───────────────────────────────────────────────

@runtime_checkable
class BoardStatus(Protocol):
    def is_ready(self) -> bool: ...


class DiceSource(Protocol):
    """Produces a value 1–6 for *player* and hands it to *submit*.

    May answer synchronously or later (animation, thinking delay).
    """

    def request_roll(
        self, player: Player, submit: Callable[[int], CommandResult],
    ) -> None: ...


class Mover(Protocol):
    """Moves a pawn on screen.

    When *on_arrived* is given the mover must call it once the pawn has
    reached *square*. Teleports along shortcuts pass ``None``.
    """

    def move_to(
        self,
        player: Player,
        square: int,
        animate: bool,
        on_arrived: Callable[[], Any] | None,
    ) -> None: ...


class Timer(Protocol):
    """Anything with ``call_later``, such as an asyncio loop or driver.EventQueue."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Any: ...


# ── Events ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TurnStarted:
    player: Player
    turn_number: int


@dataclass(frozen=True)
class DiceRolled:
    player: Player
    value: int


@dataclass(frozen=True)
class PlayerMoved:
    player: Player
    square: int
    via: ShortcutEntry | None = None  # None = dice move


@dataclass(frozen=True)
class PlayerWon:
    player: Player


GameEvent = Union[TurnStarted, DiceRolled, PlayerMoved, PlayerWon]


class GameObserver(Protocol):
    """Receives events as the game is played."""

    def on_event(self, event: GameEvent) -> None: ...


@dataclass
class ListObserver:
    """Default observer: collects events into a list."""

    events: list[GameEvent] = field(default_factory=list)

    def on_event(self, event: GameEvent) -> None:
        self.events.append(event)

    def of_type(self, kind: type) -> list:
        return [e for e in self.events if isinstance(e, kind)]


# ── State ────────────────────────────────────────────────────────────

class GamePhase(enum.Enum):
    IDLE = "idle"
    AWAITING_ROLL = "awaiting_roll"
    RESOLVING_MOVE = "resolving_move"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """Mutable state that evolves during a game.

    ``players`` is the registry's own list, never a copy.
    """

    players: list[Player] = field(default_factory=list)
    current_player_index: int = 0
    phase: GamePhase = GamePhase.IDLE
    last_dice_value: int | None = None
    winner: Player | None = None
    turn_number: int = 0


# ── Scheduler ────────────────────────────────────────────────────────

class TurnScheduler:
    """Owns whose turn it is and drives one turn at a time.

    Commands (``start_game``, ``request_roll``, ``submit_roll``,
    ``on_arrived``, ``reset_game``) return a :class:`CommandResult`;
    a rejected command leaves the state untouched.
    """

    def __init__(
        self,
        registry: PlayerRegistry,
        shortcuts: ShortcutTable,
        rules: GameRules,
        board: BoardStatus,
        dice: DiceSource,
        mover: Mover,
        observers: list[GameObserver] | None = None,
    ):
        self.registry = registry
        self.shortcuts = shortcuts
        self.rules = rules
        self.board = board
        self.dice = dice
        self.mover = mover
        self.state = GameState(players=registry.players)
        self._observers: list[GameObserver] = list(observers or [])
        # Bumped on reset; callbacks carrying an older epoch are ignored.
        self._epoch = 0
        # Id of the outstanding dice request; only that answer is accepted.
        self._roll_requests = 0
        self._pending_request: int | None = None
        self._pending_outcome: RollOutcome | None = None

    # ── Observers ───────────────────────────────────────────────────

    def subscribe(self, observer: GameObserver) -> None:
        if not any(o is observer for o in self._observers):
            self._observers.append(observer)

    def unsubscribe(self, observer: GameObserver) -> None:
        self._observers = [o for o in self._observers if o is not observer]

    def _emit(self, event: GameEvent) -> None:
        for observer in list(self._observers):
            observer.on_event(event)

    # ── Queries ─────────────────────────────────────────────────────

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def current_player(self) -> Player | None:
        players = self.state.players
        if 0 <= self.state.current_player_index < len(players):
            return players[self.state.current_player_index]
        return None

    def is_waiting_for_roll(self) -> bool:
        return self.state.phase is GamePhase.AWAITING_ROLL

    def is_active(self) -> bool:
        return self.state.phase in (GamePhase.AWAITING_ROLL, GamePhase.RESOLVING_MOVE)

    # ── Commands ────────────────────────────────────────────────────

    def start_game(self) -> CommandResult:
        if self.state.phase is not GamePhase.IDLE:
            return self._reject(GameAlreadyStarted(
                f"Cannot start: game is {self.state.phase.value}. Reset it first.",
            ))
        if len(self.registry) < MIN_PLAYERS:
            return self._reject(NotReady(
                f"Not enough players: have {len(self.registry)}, need at least {MIN_PLAYERS}.",
            ))
        if not self.board.is_ready():
            return self._reject(NotReady("Board not generated."))
        if self.shortcuts.rejected:
            entry, error = self.shortcuts.rejected[0]
            return self._reject(InvalidConfiguration(
                f"{len(self.shortcuts.rejected)} shortcut(s) were rejected; first: {error.message}",
                entry=entry,
            ))

        self.state.winner = None
        self.state.last_dice_value = None
        self.state.turn_number = 0
        logger.info("Game started with %d players", len(self.registry))
        return self._begin_turn(0)

    def request_roll(self) -> CommandResult:
        """Ask the dice source for a value for the current player."""
        error = self._roll_phase_error()
        if error is None and self._pending_request is not None:
            error = RollAlreadyPending("A roll has already been requested this turn.")
        if error is not None:
            return self._reject(error)

        player = self.current_player
        if player is None:
            return self._reject(NoActivePlayers("No current player to roll for."))
        self._roll_requests += 1
        self._pending_request = self._roll_requests
        logger.debug("Requesting roll for %s", player.name)
        self.dice.request_roll(
            player,
            functools.partial(self._submit_from_source, self._epoch, self._pending_request),
        )
        return CommandResult()

    def submit_roll(self, dice_value: int) -> CommandResult:
        """Apply a roll made outside the dice source."""
        if self._pending_request is not None and self.is_waiting_for_roll():
            return self._reject(RollAlreadyPending(
                "Waiting for the dice source to answer the requested roll.",
            ))
        return self._apply_roll(dice_value)

    def _apply_roll(self, dice_value: int) -> CommandResult:
        error = self._roll_phase_error()
        if error is not None:
            return self._reject(error)
        if isinstance(dice_value, bool) or dice_value not in DICE_FACES:
            return self._reject(InvalidDiceValue(
                f"Dice value must be 1–6, got {dice_value!r}.", value=dice_value,
            ))

        player = self.current_player
        if player is None:
            return self._reject(NoActivePlayers("No current player to roll for."))
        self._pending_request = None
        self.state.last_dice_value = dice_value
        logger.debug("%s rolled %d", player.name, dice_value)
        self._emit(DiceRolled(player, dice_value))

        outcome = resolve(player, dice_value, self.rules)

        if outcome.turn_passed:
            logger.debug(
                "%s needs %d to start. Turn passed.",
                player.name, self.rules.starting_dice_value,
            )
            next_turn = self._advance()
            return CommandResult(ok=next_turn.ok, error=next_turn.error, outcome=outcome)

        if outcome.started:
            player.start()
            logger.debug("%s started on square 1", player.name)
        else:
            player.move_to(outcome.new_square)
        self._emit(PlayerMoved(player, outcome.new_square))

        # Phase must be set before the mover runs: it may call back at once.
        self.state.phase = GamePhase.RESOLVING_MOVE
        self._pending_outcome = outcome
        self.mover.move_to(
            player,
            outcome.new_square,
            animate=True,
            on_arrived=functools.partial(self.on_arrived, self._epoch),
        )
        return CommandResult(outcome=outcome)

    def on_arrived(self, epoch: int | None = None) -> CommandResult:
        """The mover reports the pawn reached the square it was sent to."""
        if epoch is not None and epoch != self._epoch:
            logger.debug("Ignoring arrival from epoch %d (now %d)", epoch, self._epoch)
            return CommandResult.failure(StaleArrival("Arrival belongs to a reset game."))
        outcome = self._pending_outcome
        if self.state.phase is not GamePhase.RESOLVING_MOVE or outcome is None:
            return self._reject(UnexpectedArrival(
                f"No move in progress (game is {self.state.phase.value}).",
            ))

        self._pending_outcome = None
        player = self.current_player
        if player is None:
            self.state.phase = GamePhase.IDLE
            return self._reject(NoActivePlayers("No current player to move."))

        # A dice win ends the game before any shortcut is looked at
        if outcome.won:
            return self._declare_winner(player, CommandResult(outcome=outcome))

        # Only the winner may stand on the last square
        avoid = None if self.rules.shortcut_can_win else self.rules.winning_square
        chain = self.shortcuts.resolve_chain(player.current_square, avoid=avoid)
        for hop in chain.hops:
            player.move_to(hop.end_square)
            logger.debug("%s took %s", player.name, hop.describe())
            self.mover.move_to(player, hop.end_square, animate=False, on_arrived=None)
            self._emit(PlayerMoved(player, hop.end_square, via=hop))

        result = CommandResult(outcome=outcome, chain=chain)
        if chain.warning is not None:
            result.warnings.append(chain.warning)

        if chain.hops and player.current_square == self.rules.winning_square:
            return self._declare_winner(player, result)

        if outcome.bonus_turn:
            logger.debug("%s gets another turn", player.name)
            next_turn = self._begin_turn(self.state.current_player_index)
        else:
            next_turn = self._advance()
        if not next_turn.ok:
            result.ok = False
            result.error = next_turn.error
        return result

    def reset_game(self) -> CommandResult:
        """Back to IDLE from any phase; in-flight callbacks become stale."""
        self._epoch += 1
        self._pending_request = None
        self._pending_outcome = None
        self.registry.reset_all()
        self.state.current_player_index = 0
        self.state.phase = GamePhase.IDLE
        self.state.last_dice_value = None
        self.state.winner = None
        self.state.turn_number = 0
        for player in self.registry:
            self.mover.move_to(player, 0, animate=False, on_arrived=None)
        logger.info("Game reset")
        return CommandResult()

    # ── Internals ───────────────────────────────────────────────────

    def _roll_phase_error(self) -> SequencingError | None:
        phase = self.state.phase
        if phase is GamePhase.RESOLVING_MOVE:
            return MoveInProgress("A move is still being resolved.")
        if phase is not GamePhase.AWAITING_ROLL:
            return NotAwaitingRoll(f"Not waiting for a roll (game is {phase.value}).")
        return None

    def _submit_from_source(self, epoch: int, request: int, dice_value: int) -> CommandResult:
        if epoch != self._epoch:
            logger.debug("Ignoring roll of %d from epoch %d", dice_value, epoch)
            return CommandResult.failure(StaleArrival("Roll belongs to a reset game."))
        if request != self._pending_request:
            logger.debug("Ignoring roll of %d for request %d", dice_value, request)
            return CommandResult.failure(StaleArrival(
                "Roll answers a request that is no longer outstanding.",
            ))
        return self._apply_roll(dice_value)

    def _begin_turn(self, start_index: int) -> CommandResult:
        index = self.registry.next_active_index(start_index)
        if index is None:
            self.state.phase = GamePhase.IDLE
            return self._reject(NoActivePlayers("No active players left."))

        self.state.current_player_index = index
        self.state.phase = GamePhase.AWAITING_ROLL
        self.state.turn_number += 1
        self._pending_request = None
        player = self.state.players[index]
        logger.debug("=== %s's turn ===", player.name)
        self._emit(TurnStarted(player, self.state.turn_number))
        return CommandResult()

    def _advance(self) -> CommandResult:
        count = len(self.state.players)
        return self._begin_turn((self.state.current_player_index + 1) % count)

    def _declare_winner(self, player: Player, result: CommandResult) -> CommandResult:
        self.state.phase = GamePhase.GAME_OVER
        self.state.winner = player
        logger.info("%s wins on turn %d!", player.name, self.state.turn_number)
        self._emit(PlayerWon(player))
        return result

    def _reject(self, error: EngineError) -> CommandResult:
        logger.warning("Rejected: %s", error)
        return CommandResult.failure(error)
