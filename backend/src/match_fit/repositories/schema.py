"""DuckDB schema for lineups and the team collaborator tables."""

import duckdb

# All collaborator columns are VARCHAR so ids keep their string form,
# matching CSV loads with all_varchar=true.
SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS events (
        id VARCHAR,
        team_id VARCHAR,
        title VARCHAR,
        date VARCHAR,
        type VARCHAR
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        id VARCHAR,
        team_id VARCHAR,
        team_role VARCHAR,
        email VARCHAR,
        first_name VARCHAR,
        last_name VARCHAR,
        jersey_number VARCHAR,
        position VARCHAR
    )
    """,
    # No unique constraint on (team_id, event_id): one lineup per pair is an
    # application convention enforced by the repository's lookups.
    """
    CREATE TABLE IF NOT EXISTS lineups (
        id VARCHAR PRIMARY KEY,
        team_id VARCHAR NOT NULL,
        event_id VARCHAR NOT NULL,
        formation VARCHAR NOT NULL,
        starting_lineup VARCHAR NOT NULL,
        substitutes VARCHAR NOT NULL,
        published BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL
    )
    """,
]

TABLES = ("events", "profiles", "lineups")


def ensure_schema(conn: duckdb.DuckDBPyConnection) -> None:
    """Create any missing tables."""
    for statement in SCHEMA_STATEMENTS:
        conn.execute(statement)
