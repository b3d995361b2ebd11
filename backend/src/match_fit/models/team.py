"""Roster and event models supplied by the team collaborators."""

from dataclasses import dataclass


@dataclass
class PlayerRecord:
    """A roster member of a team."""

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    jersey_number: str | None = None
    position: str | None = None  # goalkeeper, defender, midfielder, forward


@dataclass
class DisplayFallback:
    """Stand-in for a player reference that matched nobody on the roster."""

    raw: str

    @property
    def display_name(self) -> str:
        return self.raw


@dataclass
class EventRecord:
    """A scheduled team event."""

    id: str
    team_id: str
    date: str  # ISO date or datetime
    type: str = "game"
    title: str | None = None

    @property
    def is_game(self) -> bool:
        return self.type == "game"
