"""Tests for the SQLite results store."""

import sqlite3
import tempfile
from pathlib import Path

from snakes_ladders.persistence import ResultsDB
from snakes_ladders.simulate import GameResult, TurnRecord


def _result(winner: int | None, turns: int = 2) -> GameResult:
    log = [
        TurnRecord(turn_number=i + 1, player=i % 2, start_square=0, end_square=0, dice_value=3)
        for i in range(turns)
    ]
    return GameResult(
        winner=winner,
        winner_name=None if winner is None else f"Player {winner + 1}",
        reason="win" if winner is not None else "max_rolls",
        rolls=turns,
        turns=turns,
        seed=42,
        log=log,
    )


def test_create_db():
    """Creating a DB initializes the schema."""
    with tempfile.TemporaryDirectory() as tmp:
        db_path = Path(tmp) / "test.db"
        db = ResultsDB(db_path)
        conn = sqlite3.connect(db_path)
        tables = {r[0] for r in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()}
        conn.close()
        db.close()
        assert "games" in tables
        assert "turns" in tables


def test_record_and_list_games():
    with tempfile.TemporaryDirectory() as tmp:
        db = ResultsDB(Path(tmp) / "test.db")
        game_id = db.record_game(_result(0, turns=3), players=2)
        db.record_game(_result(None), players=2)

        games = db.list_games()
        db_turns = db.turn_count(game_id)
        db.close()

        assert len(games) == 2
        assert games[0].winner == 0
        assert games[0].winner_name == "Player 1"
        assert games[1].winner is None
        assert games[1].reason == "max_rolls"
        assert db_turns == 3


def test_win_counts_by_seat():
    with tempfile.TemporaryDirectory() as tmp:
        db = ResultsDB(Path(tmp) / "test.db")
        for winner in (0, 1, 1, None):
            db.record_game(_result(winner), players=2)
        counts = db.win_counts_by_seat()
        db.close()
        assert counts == {0: 1, 1: 2}


def test_reopen_keeps_results():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "nested" / "test.db"
        db = ResultsDB(path)
        db.record_game(_result(1), players=2)
        db.close()

        db = ResultsDB(path)
        assert len(db.list_games()) == 1
        db.close()
