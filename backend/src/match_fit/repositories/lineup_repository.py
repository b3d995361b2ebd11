"""DuckDB-backed persistence gateway for lineups."""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path

import duckdb

from match_fit.errors import NotFoundError, PersistenceError
from match_fit.models.lineup import Lineup, StartingAssignment
from match_fit.repositories.base import DuckDBRepository
from match_fit.repositories.schema import ensure_schema

logger = logging.getLogger(__name__)

LINEUP_COLUMNS = """
    id, team_id, event_id, formation, starting_lineup, substitutes,
    published, created_at, updated_at
"""


class LineupRepository(DuckDBRepository):
    """Load, save and delete the lineup record of a (team, event) pair.

    One lineup per pair is a convention of this repository, not a database
    constraint. Two sessions saving a brand new lineup for the same pair at
    the same time can both insert; load() then returns the oldest record.
    """

    def __init__(self, database_path: str | Path):
        """Initialize with path to the DuckDB database, creating it if missing.

        Args:
            database_path: Path to the .duckdb file

        Raises:
            PersistenceError: If the database cannot be opened
        """
        super().__init__(database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self._connect() as conn:
                ensure_schema(conn)
        except duckdb.Error as e:
            raise PersistenceError("open lineup database", str(e)) from e
        logger.info(f"LineupRepository: Using {self._db_path}")

    def load(self, team_id: str, event_id: str) -> Lineup | None:
        """Get the lineup for a team's event.

        Returns:
            The stored Lineup, or None if the event has no lineup yet
        """
        try:
            rows = self._query(
                f"""
                SELECT {LINEUP_COLUMNS}
                FROM lineups
                WHERE team_id = ? AND event_id = ?
                ORDER BY created_at, id
                LIMIT 1
                """,
                [team_id, event_id],
            )
        except duckdb.Error as e:
            raise PersistenceError("load lineup", str(e)) from e
        return _row_to_lineup(rows[0]) if rows else None

    def get(self, lineup_id: str) -> Lineup:
        """Get a lineup by id.

        Raises:
            NotFoundError: If no lineup has this id
        """
        try:
            rows = self._query(
                f"SELECT {LINEUP_COLUMNS} FROM lineups WHERE id = ?",
                [lineup_id],
            )
        except duckdb.Error as e:
            raise PersistenceError("load lineup", str(e)) from e
        if not rows:
            raise NotFoundError(f"Lineup {lineup_id} not found")
        return _row_to_lineup(rows[0])

    def list_published(self, team_id: str) -> list[Lineup]:
        """Published lineups of a team, newest first."""
        try:
            rows = self._query(
                f"""
                SELECT {LINEUP_COLUMNS}
                FROM lineups
                WHERE team_id = ? AND published
                ORDER BY created_at DESC
                """,
                [team_id],
            )
        except duckdb.Error as e:
            raise PersistenceError("load lineups", str(e)) from e
        return [_row_to_lineup(row) for row in rows]

    def save(self, lineup: Lineup) -> Lineup:
        """Create or update the lineup for its (team, event) pair.

        The record is matched by id first, then by (team, event). Without a
        match a new record is inserted. Last write wins.

        Returns:
            The stored Lineup, with id and timestamps set
        """
        now = datetime.now()
        starting_json = json.dumps([a.to_dict() for a in lineup.starting_lineup])
        substitutes_json = json.dumps(list(lineup.substitutes))

        try:
            with self._connect() as conn:
                existing_id = self._find_existing_id(conn, lineup)
                if existing_id:
                    conn.execute(
                        """
                        UPDATE lineups
                        SET formation = ?, starting_lineup = ?, substitutes = ?,
                            published = ?, updated_at = ?
                        WHERE id = ?
                        """,
                        [lineup.formation, starting_json, substitutes_json,
                         lineup.published, now, existing_id],
                    )
                    lineup_id = existing_id
                else:
                    lineup_id = f"lineup_{uuid.uuid4().hex[:12]}"
                    conn.execute(
                        f"""
                        INSERT INTO lineups ({LINEUP_COLUMNS})
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        [lineup_id, lineup.team_id, lineup.event_id, lineup.formation,
                         starting_json, substitutes_json, lineup.published, now, now],
                    )
        except duckdb.Error as e:
            logger.error(f"Saving lineup for event {lineup.event_id} failed: {e}")
            raise PersistenceError("save lineup", str(e)) from e

        logger.info(
            f"Saved lineup {lineup_id} (team={lineup.team_id}, event={lineup.event_id}, "
            f"published={lineup.published})"
        )
        return self.get(lineup_id)

    def delete(self, lineup_id: str) -> None:
        """Delete a lineup record. Deleting a missing id is a no-op."""
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM lineups WHERE id = ?", [lineup_id])
        except duckdb.Error as e:
            logger.error(f"Deleting lineup {lineup_id} failed: {e}")
            raise PersistenceError("delete lineup", str(e)) from e
        logger.info(f"Deleted lineup {lineup_id}")

    def _find_existing_id(self, conn: duckdb.DuckDBPyConnection, lineup: Lineup) -> str | None:
        if lineup.id:
            row = conn.execute("SELECT id FROM lineups WHERE id = ?", [lineup.id]).fetchone()
            if row:
                return row[0]
        row = conn.execute(
            """
            SELECT id FROM lineups
            WHERE team_id = ? AND event_id = ?
            ORDER BY created_at, id
            LIMIT 1
            """,
            [lineup.team_id, lineup.event_id],
        ).fetchone()
        return row[0] if row else None


def _row_to_lineup(row: dict) -> Lineup:
    return Lineup(
        id=row["id"],
        team_id=row["team_id"],
        event_id=row["event_id"],
        formation=row["formation"],
        starting_lineup=[
            StartingAssignment.from_dict(a) for a in json.loads(row["starting_lineup"] or "[]")
        ],
        substitutes=list(json.loads(row["substitutes"] or "[]")),
        published=bool(row["published"]),
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
    )


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
