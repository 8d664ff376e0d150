"""SQLite store for finished simulation results.

Only completed games are written. An in-progress game is never saved and
cannot be loaded back.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

from snakes_ladders.simulate import GameResult, TurnRecord


@dataclass
class StoredGame:
    id: int
    players: int
    winner: int | None
    winner_name: str | None
    reason: str
    rolls: int
    turns: int


class ResultsDB:
    """Thin wrapper around a SQLite database of simulated games."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.path)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()

    def _create_tables(self) -> None:
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS games (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                players     INTEGER NOT NULL,
                winner      INTEGER,
                winner_name TEXT,
                reason      TEXT NOT NULL,
                rolls       INTEGER NOT NULL,
                turns       INTEGER NOT NULL,
                seed        INTEGER,
                created_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            CREATE TABLE IF NOT EXISTS turns (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                game_id         INTEGER NOT NULL REFERENCES games(id),
                turn_number     INTEGER NOT NULL,
                player_idx      INTEGER NOT NULL,
                start_square    INTEGER NOT NULL,
                end_square      INTEGER NOT NULL,
                dice_value      INTEGER,
                started         INTEGER NOT NULL DEFAULT 0,
                hops            INTEGER NOT NULL DEFAULT 0,
                won             INTEGER NOT NULL DEFAULT 0,
                UNIQUE(game_id, turn_number)
            );
        """)
        self._conn.commit()

    def record_game(
        self,
        result: GameResult,
        players: int,
    ) -> int:
        """Record a finished game and its turn log. Returns the game id."""
        cur = self._conn.execute(
            "INSERT INTO games (players, winner, winner_name, reason, rolls, turns, seed) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (players, result.winner, result.winner_name, result.reason,
             result.rolls, result.turns, result.seed),
        )
        game_id = cur.lastrowid
        self._record_turns(game_id, result.log)  # type: ignore[arg-type]
        self._conn.commit()
        return game_id  # type: ignore[return-value]

    def _record_turns(self, game_id: int, records: list[TurnRecord]) -> None:
        self._conn.executemany(
            "INSERT INTO turns (game_id, turn_number, player_idx, start_square, "
            "end_square, dice_value, started, hops, won) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (game_id, r.turn_number, r.player, r.start_square, r.end_square,
                 r.dice_value, int(r.started), r.hops, int(r.won))
                for r in records
            ],
        )

    def list_games(self) -> list[StoredGame]:
        rows = self._conn.execute(
            "SELECT id, players, winner, winner_name, reason, rolls, turns "
            "FROM games ORDER BY id"
        ).fetchall()
        return [StoredGame(*r) for r in rows]

    def turn_count(self, game_id: int) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) FROM turns WHERE game_id = ?", (game_id,)
        ).fetchone()
        return row[0]

    def win_counts_by_seat(self) -> dict[int, int]:
        """Seat index (0-based) → number of games won from that seat."""
        rows = self._conn.execute(
            "SELECT winner, COUNT(*) FROM games WHERE winner IS NOT NULL "
            "GROUP BY winner ORDER BY winner"
        ).fetchall()
        return {r[0]: r[1] for r in rows}

    def close(self) -> None:
        self._conn.close()
