"""SQLite-backed store for the roster, recorded games and the drafted team batch."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import date as Date
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence
from uuid import uuid4

from pelada.exceptions import PersistenceFailure, RecordNotFound
from pelada.models import DraftedTeam, Game, GameEvent, Player


logger = logging.getLogger(__name__)

DB_PATH_ENV = "PELADA_DB_PATH"
DEFAULT_DB_PATH = Path("pelada.sqlite")

_PLAYER_FIELDS = {"name", "position", "level", "goals", "assists", "games_played", "available_for_draft"}


class ClubStore:
    """Simple SQLite-backed store for players, games and drafted teams.

    Every public method opens its own connection and runs in one transaction,
    so a failed write leaves nothing behind. SQLite errors surface as
    :class:`PersistenceFailure`.
    """

    def __init__(self, db_path: Path | str | None = None):
        self._use_uri = False
        if db_path is None:
            env_db = os.getenv(DB_PATH_ENV)
            db_path = env_db or DEFAULT_DB_PATH
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: Path | str = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise PersistenceFailure(f"Unable to open database {self.db_path}: {exc}") from exc
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            logger.warning("Store write rolled back: %s", exc)
            raise PersistenceFailure(str(exc)) from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._transaction() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                position TEXT NOT NULL,
                level INTEGER NOT NULL,
                goals INTEGER NOT NULL DEFAULT 0,
                assists INTEGER NOT NULL DEFAULT 0,
                games_played INTEGER NOT NULL DEFAULT 0,
                available_for_draft INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS games (
                id TEXT PRIMARY KEY,
                date TEXT NOT NULL,
                home_team TEXT NOT NULL,
                away_team TEXT NOT NULL,
                home_goals INTEGER NOT NULL DEFAULT 0,
                away_goals INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS game_events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                game_id TEXT NOT NULL REFERENCES games(id) ON DELETE CASCADE,
                seq INTEGER NOT NULL,
                player_id TEXT NOT NULL,
                player_name TEXT NOT NULL,
                event_type TEXT NOT NULL,
                minute INTEGER NOT NULL DEFAULT 0
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS drafted_teams (
                seq INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                team_json TEXT NOT NULL,
                level1_count INTEGER NOT NULL,
                level2_count INTEGER NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )

    # -- players -----------------------------------------------------------

    def list_players(self) -> List[Player]:
        with self._transaction() as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY created_at, name").fetchall()
        return [self._row_to_player(row) for row in rows]

    def get_player(self, player_id: str) -> Optional[Player]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
        return self._row_to_player(row) if row is not None else None

    def create_player(
        self,
        *,
        name: str,
        position: str,
        level: int,
        available_for_draft: bool = True,
        player_id: Optional[str] = None,
    ) -> Player:
        player = Player(
            player_id=player_id or uuid4().hex,
            name=name,
            position=position,
            level=level,
            available_for_draft=available_for_draft,
        )
        now = datetime.now(timezone.utc).isoformat()
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO players (
                    id, name, position, level, goals, assists, games_played,
                    available_for_draft, created_at, updated_at
                ) VALUES (?, ?, ?, ?, 0, 0, 0, ?, ?, ?)
                """,
                (
                    player.player_id,
                    player.name,
                    player.position,
                    player.level,
                    int(player.available_for_draft),
                    now,
                    now,
                ),
            )
        return player

    def update_player(self, player_id: str, **fields: Any) -> Player:
        unknown = set(fields) - _PLAYER_FIELDS
        if unknown:
            raise ValueError(f"Unsupported player fields: {sorted(unknown)}")
        current = self.get_player(player_id)
        if current is None:
            raise RecordNotFound("Player", player_id)
        updated = Player.model_validate({**current.model_dump(), **fields})
        with self._transaction() as conn:
            self._write_player(conn, updated)
        return updated

    def delete_player(self, player_id: str) -> None:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM players WHERE id = ?", (player_id,))
            if cursor.rowcount == 0:
                raise RecordNotFound("Player", player_id)

    def save_players(self, players: Iterable[Player]) -> None:
        with self._transaction() as conn:
            for player in players:
                self._write_player(conn, player)

    def reset_all_statistics(self) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._transaction() as conn:
            conn.execute(
                "UPDATE players SET goals = 0, assists = 0, games_played = 0, updated_at = ?",
                (now,),
            )

    def _write_player(self, conn: sqlite3.Connection, player: Player) -> None:
        conn.execute(
            """
            UPDATE players
            SET name = ?, position = ?, level = ?, goals = ?, assists = ?,
                games_played = ?, available_for_draft = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                player.name,
                player.position,
                player.level,
                player.goals,
                player.assists,
                player.games_played,
                int(player.available_for_draft),
                datetime.now(timezone.utc).isoformat(),
                player.player_id,
            ),
        )

    # -- games -------------------------------------------------------------

    def list_games(self) -> List[Game]:
        with self._transaction() as conn:
            rows = conn.execute("SELECT * FROM games ORDER BY date DESC, created_at DESC").fetchall()
            return [self._row_to_game(conn, row) for row in rows]

    def get_game(self, game_id: str) -> Optional[Game]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM games WHERE id = ?", (game_id,)).fetchone()
            return self._row_to_game(conn, row) if row is not None else None

    def create_game(
        self,
        *,
        date: Date,
        home_team: str,
        away_team: str,
        home_goals: int,
        away_goals: int,
        events: Sequence[GameEvent],
        player_counters: Sequence[Player] = (),
        game_id: Optional[str] = None,
    ) -> Game:
        """Insert a game with its events; ``player_counters`` are written in the same transaction."""

        game = Game(
            game_id=game_id or uuid4().hex,
            date=date,
            home_team=home_team,
            away_team=away_team,
            home_goals=home_goals,
            away_goals=away_goals,
            events=list(events),
        )
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO games (id, date, home_team, away_team, home_goals, away_goals, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    game.game_id,
                    game.date.isoformat(),
                    game.home_team,
                    game.away_team,
                    game.home_goals,
                    game.away_goals,
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            self._insert_events(conn, game.game_id, game.events)
            for player in player_counters:
                self._write_player(conn, player)
        return game

    def update_game(
        self,
        game_id: str,
        *,
        date: Date,
        home_team: str,
        away_team: str,
        home_goals: int,
        away_goals: int,
        events: Sequence[GameEvent],
        player_counters: Sequence[Player] = (),
    ) -> Game:
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                UPDATE games
                SET date = ?, home_team = ?, away_team = ?, home_goals = ?, away_goals = ?
                WHERE id = ?
                """,
                (date.isoformat(), home_team, away_team, home_goals, away_goals, game_id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFound("Game", game_id)
            conn.execute("DELETE FROM game_events WHERE game_id = ?", (game_id,))
            self._insert_events(conn, game_id, events)
            for player in player_counters:
                self._write_player(conn, player)
            row = conn.execute("SELECT * FROM games WHERE id = ?", (game_id,)).fetchone()
            return self._row_to_game(conn, row)

    def _insert_events(self, conn: sqlite3.Connection, game_id: str, events: Sequence[GameEvent]) -> None:
        conn.executemany(
            """
            INSERT INTO game_events (game_id, seq, player_id, player_name, event_type, minute)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (game_id, seq, event.player_id, event.player_name, event.kind.value, event.minute)
                for seq, event in enumerate(events)
            ],
        )

    # -- drafted teams -----------------------------------------------------

    def list_teams(self) -> List[DraftedTeam]:
        with self._transaction() as conn:
            rows = conn.execute("SELECT * FROM drafted_teams ORDER BY seq").fetchall()
        return [DraftedTeam.model_validate(json.loads(row["team_json"])) for row in rows]

    def replace_teams(self, teams: Sequence[DraftedTeam]) -> None:
        """Swap the stored batch for ``teams`` in a single transaction."""

        now = datetime.now(timezone.utc).isoformat()
        with self._transaction() as conn:
            conn.execute("DELETE FROM drafted_teams")
            conn.executemany(
                """
                INSERT INTO drafted_teams (seq, name, team_json, level1_count, level2_count, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        seq,
                        team.name,
                        team.model_dump_json(),
                        team.level1_count,
                        team.level2_count,
                        now,
                    )
                    for seq, team in enumerate(teams)
                ],
            )

    def clear_teams(self) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM drafted_teams")

    # -- row mapping -------------------------------------------------------

    def _row_to_player(self, row: sqlite3.Row) -> Player:
        return Player(
            player_id=row["id"],
            name=row["name"],
            position=row["position"],
            level=row["level"],
            goals=row["goals"],
            assists=row["assists"],
            games_played=row["games_played"],
            available_for_draft=bool(row["available_for_draft"]),
        )

    def _row_to_game(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Game:
        event_rows = conn.execute(
            "SELECT * FROM game_events WHERE game_id = ? ORDER BY seq",
            (row["id"],),
        ).fetchall()
        return Game(
            game_id=row["id"],
            date=Date.fromisoformat(row["date"]),
            home_team=row["home_team"],
            away_team=row["away_team"],
            home_goals=row["home_goals"],
            away_goals=row["away_goals"],
            events=[
                GameEvent(
                    player_id=event["player_id"],
                    player_name=event["player_name"],
                    kind=event["event_type"],
                    minute=event["minute"],
                )
                for event in event_rows
            ],
        )


__all__ = ["ClubStore", "DB_PATH_ENV", "DEFAULT_DB_PATH"]
