"""Lineup records, in-memory drafts and publication state."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

DEFAULT_FORMATION = "4-4-2"
DEFAULT_BENCH_SLOTS = 10


class PublicationState(str, Enum):
    """Lifecycle of a lineup as seen by the coach editing it."""

    DRAFT = "draft"
    PUBLISHED = "published"
    EDITING_PUBLISHED = "editing_published"  # Published, with unsaved edits allowed


@dataclass
class StartingAssignment:
    """One player bound to one formation slot.

    Historical records stored the player's email instead of their id, so
    either reference may be set. New assignments use player_id.
    """

    position: str
    player_id: str | None = None
    player_email: str | None = None

    @property
    def player(self) -> str | None:
        return self.player_id or self.player_email

    def to_dict(self) -> dict:
        data = {"position": self.position}
        if self.player_id is not None:
            data["player_id"] = self.player_id
        if self.player_email is not None:
            data["player_email"] = self.player_email
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "StartingAssignment":
        return cls(
            position=data["position"],
            player_id=data.get("player_id"),
            player_email=data.get("player_email"),
        )


@dataclass
class LineupDraft:
    """Mutable snapshot of the lineup being composed for one event."""

    formation: str = DEFAULT_FORMATION
    starting: list[StartingAssignment] = field(default_factory=list)
    substitutes: list[str] = field(default_factory=list)
    bench_slot_count: int = DEFAULT_BENCH_SLOTS

    @property
    def starter_count(self) -> int:
        return len(self.starting)

    def assignment_at(self, position: str) -> StartingAssignment | None:
        for assignment in self.starting:
            if assignment.position == position:
                return assignment
        return None


@dataclass
class Lineup:
    """Persisted lineup for a (team, event) pair."""

    team_id: str
    event_id: str
    formation: str = DEFAULT_FORMATION
    starting_lineup: list[StartingAssignment] = field(default_factory=list)
    substitutes: list[str] = field(default_factory=list)
    published: bool = False
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        """Serialize to the collaborator record shape."""
        return {
            "id": self.id,
            "team_id": self.team_id,
            "event_id": self.event_id,
            "formation": self.formation,
            "starting_lineup": [a.to_dict() for a in self.starting_lineup],
            "substitutes": list(self.substitutes),
            "published": self.published,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class LineupPublished:
    """Emitted after a lineup was persisted with published=True."""

    lineup: Lineup
    republished: bool = False  # True when an already published lineup was updated
