"""Headless collaborators: a simulated clock, dice sources and a mover.

Everything that would be an animation in a real front end becomes a
callback on :class:`EventQueue`, so a whole game runs as a flat loop
instead of nested calls.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from snakes_ladders.errors import CommandResult
from snakes_ladders.players import Player

logger = logging.getLogger(__name__)


# ── Clock ────────────────────────────────────────────────────────────

@dataclass
class TimerHandle:
    when: float
    callback: Callable[..., Any]
    args: tuple = ()
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class EventQueue:
    """Deterministic simulated clock. Same-time callbacks run FIFO."""

    def __init__(self) -> None:
        self.now = 0.0
        self._heap: list[tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(self.now + max(delay, 0.0), callback, args)
        heapq.heappush(self._heap, (handle.when, next(self._seq), handle))
        return handle

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        return self.call_later(0.0, callback, *args)

    def __len__(self) -> int:
        return sum(1 for _, _, h in self._heap if not h.cancelled)

    def step(self) -> bool:
        """Run the next callback. Returns False when nothing is left."""
        while self._heap:
            when, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self.now = when
            handle.callback(*handle.args)
            return True
        return False

    def run(
        self,
        until: Callable[[], bool] | None = None,
        max_steps: int | None = None,
    ) -> int:
        """Run callbacks until the queue drains, *until* holds, or *max_steps*."""
        steps = 0
        while until is None or not until():
            if max_steps is not None and steps >= max_steps:
                break
            if not self.step():
                break
            steps += 1
        return steps


# ── Dice ─────────────────────────────────────────────────────────────

class RandomDice:
    """Fair six-sided die that answers after ``roll_duration`` seconds."""

    def __init__(
        self,
        queue: EventQueue,
        rng: random.Random | None = None,
        roll_duration: float = 0.0,
    ):
        self.queue = queue
        self.rng = rng or random.Random()
        self.roll_duration = roll_duration

    def request_roll(
        self, player: Player, submit: Callable[[int], CommandResult],
    ) -> None:
        self.queue.call_later(self.roll_duration, self._roll, submit)

    def _roll(self, submit: Callable[[int], CommandResult]) -> None:
        submit(self.rng.randint(1, 6))


@dataclass
class ScriptedDice:
    """Replays fixed values. Answers synchronously unless given a queue."""

    values: list[int] = field(default_factory=list)
    queue: EventQueue | None = None
    requests: list[Player] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.values = list(self.values)

    def extend(self, values: Iterable[int]) -> None:
        self.values.extend(values)

    def request_roll(
        self, player: Player, submit: Callable[[int], CommandResult],
    ) -> None:
        self.requests.append(player)
        if not self.values:
            logger.debug("Scripted dice exhausted; %s waits", player.name)
            return
        value = self.values.pop(0)
        if self.queue is None:
            submit(value)
        else:
            self.queue.call_soon(submit, value)


# ── Mover ────────────────────────────────────────────────────────────

class QueuedMover:
    """Pretends to walk a pawn square by square on the simulated clock."""

    def __init__(self, queue: EventQueue, step_delay: float = 0.0):
        self.queue = queue
        self.step_delay = step_delay
        self.positions: dict[int, int] = {}

    def move_to(
        self,
        player: Player,
        square: int,
        animate: bool,
        on_arrived: Callable[[], Any] | None,
    ) -> None:
        previous = self.positions.get(player.id, 0)
        self.positions[player.id] = square
        if on_arrived is None:
            return
        steps = abs(square - previous) if animate else 0
        self.queue.call_later(steps * self.step_delay, on_arrived)
