"""Game rules and the pure dice-roll resolver."""

from __future__ import annotations

from dataclasses import dataclass

from snakes_ladders.errors import InvalidConfiguration
from snakes_ladders.players import Player
from snakes_ladders.shortcuts import DEFAULT_MAX_CHAIN_LENGTH

DICE_FACES = range(1, 7)


@dataclass(frozen=True)
class GameRules:
    """Immutable per-game rule set."""

    starting_dice_value: int = 1
    winning_square: int = 100
    bonus_turn_value: int = 6
    max_shortcut_chain_length: int = DEFAULT_MAX_CHAIN_LENGTH
    bonus_turn_enabled: bool = True
    # Landing on winning_square at the end of a shortcut chain wins.
    shortcut_can_win: bool = True

    def __post_init__(self) -> None:
        for name in ("starting_dice_value", "bonus_turn_value"):
            value = getattr(self, name)
            if value not in DICE_FACES:
                raise InvalidConfiguration(f"{name} must be a dice face 1–6, got {value}.")
        if self.winning_square < 2:
            raise InvalidConfiguration(
                f"winning_square must be at least 2, got {self.winning_square}.",
            )
        if self.max_shortcut_chain_length < 1:
            raise InvalidConfiguration(
                "max_shortcut_chain_length must be at least 1, "
                f"got {self.max_shortcut_chain_length}.",
            )


@dataclass
class RollOutcome:
    """What a roll does to a player, before any shortcut is followed."""

    new_square: int
    started: bool = False
    won: bool = False
    bonus_turn: bool = False
    turn_passed: bool = False


def resolve(player: Player, dice_value: int, rules: GameRules) -> RollOutcome:
    """Compute the outcome of *player* rolling *dice_value*.

    Does NOT mutate *player* and never looks at shortcuts; the scheduler
    commits the move and resolves the chain once the pawn has arrived.
    """
    if dice_value not in DICE_FACES:
        raise ValueError(f"Dice value must be 1–6, got {dice_value}.")

    # Off board → only the starting value lets you in, and you roll again
    if not player.has_started:
        if dice_value == rules.starting_dice_value:
            return RollOutcome(new_square=1, started=True, bonus_turn=True)
        return RollOutcome(new_square=0, turn_passed=True)

    candidate = player.current_square + dice_value

    # Reaching or overshooting the last square wins
    if candidate >= rules.winning_square:
        return RollOutcome(new_square=rules.winning_square, won=True)

    bonus = rules.bonus_turn_enabled and dice_value == rules.bonus_turn_value
    return RollOutcome(new_square=candidate, bonus_turn=bonus)
