"""Shared fixtures: a seeded DuckDB file and a fixed clock."""

from datetime import datetime

import duckdb
import pytest

from match_fit.models.team import EventRecord
from match_fit.repositories.lineup_repository import LineupRepository
from match_fit.repositories.team_repository import TeamRepository

TEAM_ID = "team_1"
NOW = datetime(2026, 10, 18, 12, 0, 0)

EVENTS = [
    {"id": "evt_future", "team_id": TEAM_ID, "title": "Cup Match", "date": "2026-10-25T15:00:00", "type": "game"},
    {"id": "evt_today", "team_id": TEAM_ID, "title": "Derby", "date": "2026-10-18T09:00:00", "type": "game"},
    {"id": "evt_later", "team_id": TEAM_ID, "title": "League Match", "date": "2026-11-08", "type": "game"},
    {"id": "evt_past", "team_id": TEAM_ID, "title": "Friendly", "date": "2026-10-01T15:00:00", "type": "game"},
    {"id": "evt_practice", "team_id": TEAM_ID, "title": "Training", "date": "2026-10-20T18:00:00", "type": "practice"},
    {"id": "evt_other", "team_id": "team_2", "title": "Other Team Game", "date": "2026-10-26T15:00:00", "type": "game"},
]

POSITIONS = ["goalkeeper"] + ["defender"] * 5 + ["midfielder"] * 4 + ["forward"] * 3


def _players():
    players = []
    for i, position in enumerate(POSITIONS, start=1):
        players.append({
            "id": f"p{i}",
            "team_id": TEAM_ID,
            "team_role": "player",
            "email": f"player{i}@example.com",
            "first_name": f"First{i}",
            "last_name": f"Last{i}",
            "jersey_number": str(i),
            "position": position,
        })
    players.append({
        "id": "coach1",
        "team_id": TEAM_ID,
        "team_role": "coach",
        "email": "coach@example.com",
        "first_name": "Head",
        "last_name": "Coach",
        "jersey_number": None,
        "position": None,
    })
    return players


PLAYERS = _players()


@pytest.fixture
def db_path(tmp_path):
    """DuckDB file with schema, events and profiles."""
    path = tmp_path / "match_fit.duckdb"
    # Creates the file and schema
    LineupRepository(path)
    with duckdb.connect(str(path)) as conn:
        for event in EVENTS:
            conn.execute(
                "INSERT INTO events (id, team_id, title, date, type) VALUES (?, ?, ?, ?, ?)",
                [event["id"], event["team_id"], event["title"], event["date"], event["type"]],
            )
        for p in PLAYERS:
            conn.execute(
                """
                INSERT INTO profiles
                    (id, team_id, team_role, email, first_name, last_name, jersey_number, position)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [p["id"], p["team_id"], p["team_role"], p["email"], p["first_name"],
                 p["last_name"], p["jersey_number"], p["position"]],
            )
    return path


@pytest.fixture
def lineup_repo(db_path):
    return LineupRepository(db_path)


@pytest.fixture
def team_repo(db_path):
    return TeamRepository(db_path)


@pytest.fixture
def clock():
    return lambda: NOW


def event_by_id(event_id: str) -> EventRecord:
    return EventRecord(**next(e for e in EVENTS if e["id"] == event_id))
