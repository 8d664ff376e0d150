"""Tests for snakes_ladders.shortcuts (registry + chain resolution)."""

from snakes_ladders.board import BoardTopology
from snakes_ladders.errors import ChainLimitExceeded, DuplicateStart, InvalidShortcut
from snakes_ladders.shortcuts import ShortcutEntry, ShortcutKind, ShortcutTable


# ── entries ──────────────────────────────────────────────────────────

def test_ladder_must_go_up():
    assert ShortcutEntry(2, 23, ShortcutKind.LADDER).is_valid()
    assert not ShortcutEntry(23, 2, ShortcutKind.LADDER).is_valid()


def test_snake_must_go_down():
    assert ShortcutEntry(29, 9, ShortcutKind.SNAKE).is_valid()
    assert not ShortcutEntry(9, 29, ShortcutKind.SNAKE).is_valid()


# ── registration ─────────────────────────────────────────────────────

def test_register_and_lookup():
    table = ShortcutTable()
    result = table.register(ShortcutEntry.ladder(2, 23))
    assert result.ok
    assert table.lookup(2) == ShortcutEntry.ladder(2, 23)
    assert table.lookup(3) is None
    assert 2 in table
    assert len(table) == 1


def test_invalid_snake_rejected_and_absent():
    """Snake whose end is above its start is reported and never looked up."""
    table = ShortcutTable()
    result = table.register(ShortcutEntry.snake(10, 40))
    assert not result.ok
    assert isinstance(result.error, InvalidShortcut)
    assert table.lookup(10) is None
    assert len(table) == 0
    assert table.rejected[0][0] == ShortcutEntry.snake(10, 40)


def test_duplicate_start_first_wins():
    table = ShortcutTable()
    assert table.register(ShortcutEntry.ladder(8, 34)).ok
    result = table.register(ShortcutEntry.ladder(8, 50))
    assert not result.ok
    assert isinstance(result.error, DuplicateStart)
    assert table.lookup(8).end_square == 34


def test_board_bound_table_rejects_off_board_squares():
    table = ShortcutTable(board=BoardTopology())
    result = table.register(ShortcutEntry.ladder(95, 105))
    assert isinstance(result.error, InvalidShortcut)
    assert table.lookup(95) is None


def test_from_entries_keeps_valid_ones():
    table = ShortcutTable.from_entries([
        ShortcutEntry.ladder(2, 23),
        ShortcutEntry.snake(29, 9),
        ShortcutEntry.snake(5, 50),  # invalid
    ])
    assert len(table) == 2
    assert len(table.rejected) == 1
    assert [e.start_square for e in table.ladders()] == [2]
    assert [e.start_square for e in table.snakes()] == [29]


def test_clear():
    table = ShortcutTable.from_entries([ShortcutEntry.ladder(2, 23), ShortcutEntry.snake(5, 50)])
    table.clear()
    assert len(table) == 0
    assert table.rejected == []


# ── chain resolution ─────────────────────────────────────────────────

def test_no_entry_is_idempotent():
    table = ShortcutTable.from_entries([ShortcutEntry.ladder(2, 23)])
    chain = table.resolve_chain(17)
    assert chain.final_square == 17
    assert chain.hops == []
    assert not chain.truncated


def test_single_hop():
    table = ShortcutTable.from_entries([ShortcutEntry.snake(29, 9)])
    chain = table.resolve_chain(29)
    assert chain.final_square == 9
    assert chain.hops == [ShortcutEntry.snake(29, 9)]


def test_two_ladders_chain():
    """Ladder 2→23 then ladder 23→50 resolve in one go."""
    table = ShortcutTable.from_entries([
        ShortcutEntry.ladder(2, 23),
        ShortcutEntry.ladder(23, 50),
    ])
    chain = table.resolve_chain(2)
    assert chain.final_square == 50
    assert [h.start_square for h in chain.hops] == [2, 23]
    assert chain.warning is None


def test_cycle_is_cut_at_limit():
    table = ShortcutTable.from_entries([
        ShortcutEntry.ladder(10, 20),
        ShortcutEntry.snake(20, 10),
    ], max_chain_length=10)
    chain = table.resolve_chain(10)
    assert len(chain.hops) == 10
    assert chain.final_square == 10  # even number of hops brings it back
    assert isinstance(chain.warning, ChainLimitExceeded)
    assert chain.truncated


def test_chain_exactly_at_limit_is_not_a_warning():
    table = ShortcutTable.from_entries([
        ShortcutEntry.ladder(2, 23),
        ShortcutEntry.ladder(23, 50),
    ], max_chain_length=2)
    chain = table.resolve_chain(2)
    assert chain.final_square == 50
    assert chain.warning is None


def test_chain_longer_than_limit_stops_on_last_square():
    table = ShortcutTable.from_entries([
        ShortcutEntry.ladder(2, 23),
        ShortcutEntry.ladder(23, 50),
        ShortcutEntry.ladder(50, 70),
    ], max_chain_length=2)
    chain = table.resolve_chain(2)
    assert chain.final_square == 50
    assert len(chain.hops) == 2
    assert chain.truncated


def test_chain_does_not_hop_onto_avoided_square():
    table = ShortcutTable.from_entries([
        ShortcutEntry.ladder(40, 82),
        ShortcutEntry.ladder(82, 100),
    ])
    chain = table.resolve_chain(40, avoid=100)
    assert chain.final_square == 82
    assert [h.start_square for h in chain.hops] == [40]
    assert chain.warning is None
    assert table.resolve_chain(40).final_square == 100
