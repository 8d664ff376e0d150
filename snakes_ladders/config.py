"""Game configuration and assembly of the engine from it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from snakes_ladders.board import TRADITIONAL_SHORTCUTS, BoardTopology
from snakes_ladders.engine import DiceSource, GameObserver, Mover, TurnScheduler
from snakes_ladders.errors import InvalidConfiguration
from snakes_ladders.players import MAX_PLAYERS, MIN_PLAYERS, PlayerRegistry
from snakes_ladders.rules import GameRules
from snakes_ladders.shortcuts import ShortcutEntry, ShortcutTable

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """Everything needed to set up one game. In-process only."""

    number_of_players: int = 2
    number_of_ai_players: int = 0
    player_names: list[str] = field(default_factory=list)
    board_size: int = 10
    rules: GameRules = field(default_factory=GameRules)
    shortcuts: list[ShortcutEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not MIN_PLAYERS <= self.number_of_players <= MAX_PLAYERS:
            raise InvalidConfiguration(
                f"number_of_players must be {MIN_PLAYERS}–{MAX_PLAYERS}, "
                f"got {self.number_of_players}.",
            )
        if not 0 <= self.number_of_ai_players <= self.number_of_players:
            raise InvalidConfiguration(
                f"number_of_ai_players must be 0–{self.number_of_players}, "
                f"got {self.number_of_ai_players}.",
            )
        if self.rules.winning_square > self.board_size * self.board_size:
            raise InvalidConfiguration(
                f"winning_square {self.rules.winning_square} does not fit "
                f"a {self.board_size}x{self.board_size} board.",
            )

    @classmethod
    def traditional(cls, **kwargs) -> GameConfig:
        """Standard 10x10 board with the classic snakes and ladders."""
        kwargs.setdefault("shortcuts", list(TRADITIONAL_SHORTCUTS))
        return cls(**kwargs)


@dataclass
class Game:
    """The wired-up engine for one game."""

    config: GameConfig
    board: BoardTopology
    shortcuts: ShortcutTable
    registry: PlayerRegistry
    scheduler: TurnScheduler


def build_game(
    config: GameConfig,
    dice: DiceSource,
    mover: Mover,
    observers: list[GameObserver] | None = None,
    generate_board: bool = True,
) -> Game:
    """Create board, shortcut table, players and scheduler from *config*.

    Rejected shortcuts are kept on the table; ``start_game`` refuses to
    run while any are present.
    """
    rules = config.rules
    board = BoardTopology(size=config.board_size, last_square=rules.winning_square)
    if generate_board:
        board.generate()

    shortcuts = ShortcutTable.from_entries(
        config.shortcuts,
        max_chain_length=rules.max_shortcut_chain_length,
        board=board,
    )
    registry = PlayerRegistry.create(
        config.number_of_players,
        config.number_of_ai_players,
        names=config.player_names,
    )
    scheduler = TurnScheduler(
        registry=registry,
        shortcuts=shortcuts,
        rules=rules,
        board=board,
        dice=dice,
        mover=mover,
        observers=observers,
    )
    logger.info(
        "Game initialized with %d players (%d AI)",
        config.number_of_players, config.number_of_ai_players,
    )
    return Game(
        config=config,
        board=board,
        shortcuts=shortcuts,
        registry=registry,
        scheduler=scheduler,
    )
