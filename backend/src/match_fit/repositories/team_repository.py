"""Read-only access to team rosters and events."""

import logging
from pathlib import Path

import duckdb

from match_fit.errors import PersistenceError
from match_fit.models.team import EventRecord, PlayerRecord
from match_fit.repositories.base import DuckDBRepository

logger = logging.getLogger(__name__)


class TeamRepository(DuckDBRepository):
    """Roster and event collaborator backed by the profiles/events tables."""

    def __init__(self, database_path: str | Path):
        """Initialize with path to DuckDB database.

        Args:
            database_path: Path to the .duckdb file
                          (built by scripts/build_duckdb.py)

        Raises:
            FileNotFoundError: If the database file doesn't exist
        """
        super().__init__(database_path)
        if not self._db_path.exists():
            raise FileNotFoundError(
                f"DuckDB database not found: {self._db_path}\n"
                f"Run: cd backend && uv run python scripts/build_duckdb.py"
            )

    def get_roster(self, team_id: str) -> list[PlayerRecord]:
        """Get the players of a team (coaches excluded).

        Returns list of PlayerRecord ordered by jersey number, then name
        """
        try:
            rows = self._query(
                """
                SELECT id, email, first_name, last_name, jersey_number, position
                FROM profiles
                WHERE team_id = ? AND team_role = 'player'
                ORDER BY TRY_CAST(jersey_number AS INTEGER) NULLS LAST, last_name, id
                """,
                [team_id],
            )
        except duckdb.Error as e:
            raise PersistenceError("load roster", str(e)) from e
        return [PlayerRecord(**row) for row in rows]

    def get_event(self, event_id: str) -> EventRecord | None:
        """Get an event by id, or None if it does not exist."""
        try:
            rows = self._query(
                "SELECT id, team_id, title, date, type FROM events WHERE id = ?",
                [event_id],
            )
        except duckdb.Error as e:
            raise PersistenceError("load event", str(e)) from e
        return EventRecord(**rows[0]) if rows else None

    def get_game_events(self, team_id: str) -> list[EventRecord]:
        """Get all game events of a team, earliest first."""
        try:
            rows = self._query(
                """
                SELECT id, team_id, title, date, type
                FROM events
                WHERE team_id = ? AND type = 'game'
                ORDER BY date
                """,
                [team_id],
            )
        except duckdb.Error as e:
            raise PersistenceError("load events", str(e)) from e
        return [EventRecord(**row) for row in rows]
