"""AI seats: roll on their own after a short thinking delay."""

from __future__ import annotations

import logging

from snakes_ladders.engine import GameEvent, Timer, TurnScheduler, TurnStarted
from snakes_ladders.players import Player

logger = logging.getLogger(__name__)

DEFAULT_THINK_DELAY = 1.0


class AIController:
    """Observer that requests a roll whenever an AI player's turn starts.

    The delayed request is dropped if the game was reset or the turn
    moved on before the timer fired.
    """

    def __init__(
        self,
        scheduler: TurnScheduler,
        timer: Timer,
        think_delay: float = DEFAULT_THINK_DELAY,
    ):
        self.scheduler = scheduler
        self.timer = timer
        self.think_delay = think_delay
        scheduler.subscribe(self)

    def on_event(self, event: GameEvent) -> None:
        if isinstance(event, TurnStarted) and event.player.is_ai:
            self.timer.call_later(
                self.think_delay,
                self._take_turn,
                self.scheduler.epoch,
                event.player,
                event.turn_number,
            )

    def _take_turn(self, epoch: int, player: Player, turn_number: int) -> None:
        scheduler = self.scheduler
        if (
            epoch != scheduler.epoch
            or scheduler.current_player is not player
            or scheduler.state.turn_number != turn_number
        ):
            logger.debug("Dropping stale AI turn for %s", player.name)
            return
        result = scheduler.request_roll()
        if not result.ok:
            logger.warning("AI %s could not roll: %s", player.name, result.error)

    def detach(self) -> None:
        self.scheduler.unsubscribe(self)
