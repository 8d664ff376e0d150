"""Player entities and the registry that owns them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

from snakes_ladders.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 10

DEFAULT_PLAYER_NAMES: tuple[str, ...] = tuple(
    f"Player {i}" for i in range(1, MAX_PLAYERS + 1)
)


@dataclass
class Player:
    """A pawn in the race. Square 0 means not on the board yet."""

    id: int
    name: str
    is_ai: bool = False
    current_square: int = 0
    has_started: bool = False
    is_active: bool = True

    def start(self) -> None:
        self.has_started = True
        self.current_square = 1

    def move_to(self, square: int) -> None:
        self.current_square = square

    def reset(self) -> None:
        self.current_square = 0
        self.has_started = False
        self.is_active = True


class PlayerRegistry:
    """Ordered list of players. The scheduler only ever holds references."""

    def __init__(self, players: Sequence[Player] = ()):
        self._players: list[Player] = list(players)

    @classmethod
    def create(
        cls,
        number_of_players: int,
        number_of_ai_players: int = 0,
        names: Sequence[str] | None = None,
    ) -> PlayerRegistry:
        """Create seats 1..n; the first ``number_of_ai_players`` are AI."""
        if not MIN_PLAYERS <= number_of_players <= MAX_PLAYERS:
            raise InvalidConfiguration(
                f"Number of players ({number_of_players}) must be "
                f"between {MIN_PLAYERS} and {MAX_PLAYERS}.",
            )
        if not 0 <= number_of_ai_players <= number_of_players:
            raise InvalidConfiguration(
                f"Number of AI players ({number_of_ai_players}) must be "
                f"between 0 and {number_of_players}.",
            )
        names = list(names or DEFAULT_PLAYER_NAMES)
        if len(names) < number_of_players:
            names += DEFAULT_PLAYER_NAMES[len(names):number_of_players]

        players = [
            Player(id=i + 1, name=names[i], is_ai=i < number_of_ai_players)
            for i in range(number_of_players)
        ]
        logger.debug(
            "Created %d players (%d AI)", number_of_players, number_of_ai_players,
        )
        return cls(players)

    @property
    def players(self) -> list[Player]:
        return self._players

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)

    def __getitem__(self, index: int) -> Player:
        return self._players[index]

    def get(self, player_id: int) -> Player | None:
        for player in self._players:
            if player.id == player_id:
                return player
        return None

    def index_of(self, player: Player) -> int:
        return self._players.index(player)

    def active_players(self) -> list[Player]:
        return [p for p in self._players if p.is_active]

    def next_active_index(self, start: int) -> int | None:
        """First active seat at or after *start*, wrapping once around."""
        count = len(self._players)
        for offset in range(count):
            index = (start + offset) % count
            if self._players[index].is_active:
                return index
        return None

    def deactivate(self, player_id: int) -> bool:
        player = self.get(player_id)
        if player is None:
            return False
        player.is_active = False
        logger.info("%s removed from the turn rotation", player.name)
        return True

    def reset_all(self) -> None:
        for player in self._players:
            player.reset()
