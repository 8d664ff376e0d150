"""Tests for snakes_ladders.driver (simulated clock, dice, mover)."""

import random

from snakes_ladders.driver import EventQueue, QueuedMover, RandomDice, ScriptedDice
from snakes_ladders.players import Player


# ── EventQueue ───────────────────────────────────────────────────────

def test_callbacks_run_in_time_order():
    queue = EventQueue()
    seen = []
    queue.call_later(2.0, seen.append, "late")
    queue.call_later(1.0, seen.append, "early")
    queue.run()
    assert seen == ["early", "late"]
    assert queue.now == 2.0


def test_same_time_is_fifo():
    queue = EventQueue()
    seen = []
    for label in "abc":
        queue.call_soon(seen.append, label)
    queue.run()
    assert seen == ["a", "b", "c"]


def test_cancelled_callback_is_skipped():
    queue = EventQueue()
    seen = []
    handle = queue.call_soon(seen.append, "x")
    handle.cancel()
    assert len(queue) == 0
    assert queue.run() == 0
    assert seen == []


def test_run_until_and_max_steps():
    queue = EventQueue()
    seen = []
    for i in range(5):
        queue.call_later(i, seen.append, i)
    queue.run(until=lambda: len(seen) == 2)
    assert seen == [0, 1]
    queue.run(max_steps=1)
    assert seen == [0, 1, 2]


def test_step_on_empty_queue():
    assert EventQueue().step() is False


# ── dice ─────────────────────────────────────────────────────────────

def test_random_dice_values_in_range():
    queue = EventQueue()
    dice = RandomDice(queue, random.Random(42))
    got = []
    for _ in range(200):
        dice.request_roll(Player(1, "P"), got.append)
    queue.run()
    assert len(got) == 200
    assert set(got) <= set(range(1, 7))


def test_random_dice_answers_after_roll_duration():
    queue = EventQueue()
    dice = RandomDice(queue, random.Random(1), roll_duration=0.5)
    got = []
    dice.request_roll(Player(1, "P"), got.append)
    assert got == []
    queue.run()
    assert len(got) == 1
    assert queue.now == 0.5


def test_scripted_dice_sync():
    dice = ScriptedDice([4, 2])
    got = []
    dice.request_roll(Player(1, "P"), got.append)
    dice.request_roll(Player(1, "P"), got.append)
    dice.request_roll(Player(1, "P"), got.append)  # exhausted
    assert got == [4, 2]
    assert len(dice.requests) == 3


# ── mover ────────────────────────────────────────────────────────────

def test_mover_arrival_takes_one_delay_per_square():
    queue = EventQueue()
    mover = QueuedMover(queue, step_delay=0.25)
    player = Player(1, "P")
    arrived = []
    mover.move_to(player, 4, animate=True, on_arrived=lambda: arrived.append(queue.now))
    queue.run()
    assert arrived == [1.0]
    assert mover.positions[1] == 4


def test_mover_teleport_is_instant_and_silent():
    queue = EventQueue()
    mover = QueuedMover(queue, step_delay=0.25)
    mover.move_to(Player(1, "P"), 50, animate=False, on_arrived=None)
    assert mover.positions[1] == 50
    assert len(queue) == 0
