"""Interfaces of the persistence and team collaborators."""

from typing import Protocol

from match_fit.models.lineup import Lineup
from match_fit.models.team import EventRecord, PlayerRecord


class LineupGateway(Protocol):
    """Persistence seam for lineup records."""

    def load(self, team_id: str, event_id: str) -> Lineup | None: ...

    def save(self, lineup: Lineup) -> Lineup: ...

    def delete(self, lineup_id: str) -> None: ...


class TeamDirectory(Protocol):
    """Roster and event lookups for a team."""

    def get_roster(self, team_id: str) -> list[PlayerRecord]: ...

    def get_event(self, event_id: str) -> EventRecord | None: ...

    def get_game_events(self, team_id: str) -> list[EventRecord]: ...
