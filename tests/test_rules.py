"""Tests for snakes_ladders.rules (the dice roll resolver)."""

import pytest

from snakes_ladders.errors import InvalidConfiguration
from snakes_ladders.players import Player
from snakes_ladders.rules import GameRules, resolve


def _on_square(square: int) -> Player:
    return Player(id=1, name="P", current_square=square, has_started=True)


# ── starting ─────────────────────────────────────────────────────────

def test_starting_value_enters_board_with_bonus():
    out = resolve(Player(id=1, name="P"), 1, GameRules())
    assert out.started
    assert out.new_square == 1
    assert out.bonus_turn
    assert not out.turn_passed


@pytest.mark.parametrize("value", [2, 3, 4, 5, 6])
def test_other_values_pass_the_turn(value):
    out = resolve(Player(id=1, name="P"), value, GameRules())
    assert not out.started
    assert out.new_square == 0
    assert out.turn_passed
    assert not out.bonus_turn


def test_custom_starting_value():
    rules = GameRules(starting_dice_value=6)
    assert resolve(Player(id=1, name="P"), 6, rules).started
    assert resolve(Player(id=1, name="P"), 1, rules).turn_passed


def test_resolve_does_not_mutate_player():
    p = Player(id=1, name="P")
    resolve(p, 1, GameRules())
    assert p.current_square == 0
    assert not p.has_started


# ── moving ───────────────────────────────────────────────────────────

def test_normal_move():
    out = resolve(_on_square(10), 4, GameRules())
    assert out.new_square == 14
    assert not out.won
    assert not out.bonus_turn


def test_six_grants_bonus():
    out = resolve(_on_square(10), 6, GameRules())
    assert out.new_square == 16
    assert out.bonus_turn


def test_bonus_can_be_disabled():
    out = resolve(_on_square(10), 6, GameRules(bonus_turn_enabled=False))
    assert not out.bonus_turn


def test_exact_landing_wins():
    out = resolve(_on_square(96), 4, GameRules())
    assert out.won
    assert out.new_square == 100


def test_overshoot_wins_clamped():
    """95 + 6 = 101 → clamped to 100, a win, no bonus."""
    out = resolve(_on_square(95), 6, GameRules())
    assert out.won
    assert out.new_square == 100
    assert not out.bonus_turn


def test_shorter_race():
    out = resolve(_on_square(47), 3, GameRules(winning_square=50))
    assert out.won
    assert out.new_square == 50


def test_dice_value_out_of_range():
    with pytest.raises(ValueError):
        resolve(_on_square(10), 7, GameRules())


# ── rules validation ─────────────────────────────────────────────────

@pytest.mark.parametrize("kwargs", [
    {"starting_dice_value": 0},
    {"bonus_turn_value": 7},
    {"winning_square": 1},
    {"max_shortcut_chain_length": 0},
])
def test_invalid_rules(kwargs):
    with pytest.raises(InvalidConfiguration):
        GameRules(**kwargs)
