"""In-memory draft of the lineup currently being edited."""

import logging
from dataclasses import replace

from match_fit.models.lineup import DEFAULT_BENCH_SLOTS, Lineup, LineupDraft
from match_fit.models.team import EventRecord
from match_fit.repositories.protocols import LineupGateway
from match_fit.services import assignment_validator as commands

logger = logging.getLogger(__name__)


def draft_from_lineup(lineup: Lineup) -> LineupDraft:
    """Hydrate a draft from a persisted lineup."""
    return LineupDraft(
        formation=lineup.formation,
        starting=[replace(a) for a in lineup.starting_lineup],
        substitutes=list(lineup.substitutes),
        bench_slot_count=max(DEFAULT_BENCH_SLOTS, len(lineup.substitutes)),
    )


class LineupDraftStore:
    """Holds the draft for one selected event.

    Selecting an event replaces the whole snapshot; unsaved changes for the
    previous event are discarded. Mutations go through the assignment
    commands and replace the snapshot only when the command succeeds.
    """

    def __init__(self, gateway: LineupGateway):
        self.gateway = gateway
        self.team_id: str | None = None
        self.event: EventRecord | None = None
        self.record: Lineup | None = None
        self.draft: LineupDraft = commands.empty_draft()

    @property
    def event_id(self) -> str | None:
        return self.event.id if self.event else None

    @property
    def has_event(self) -> bool:
        return self.event is not None

    def select_event(self, team_id: str, event: EventRecord) -> LineupDraft:
        """Switch to another event and load its lineup (or an empty draft)."""
        record = self.gateway.load(team_id, event.id)
        self.team_id = team_id
        self.event = event
        self.hydrate(record)
        logger.info(
            f"Selected event {event.id} for team {team_id} "
            f"({'existing lineup ' + record.id if record else 'new lineup'})"
        )
        return self.draft

    def reload(self) -> LineupDraft:
        """Re-read the persisted lineup of the selected event."""
        self.hydrate(self.gateway.load(self.team_id, self.event_id))
        return self.draft

    def hydrate(self, record: Lineup | None) -> None:
        self.record = record
        self.draft = draft_from_lineup(record) if record else commands.empty_draft()

    def reset(self) -> None:
        """Forget the persisted record and start from an empty draft."""
        self.hydrate(None)

    def to_lineup(self, published: bool) -> Lineup:
        """Build the record to persist from the current draft."""
        return Lineup(
            id=self.record.id if self.record else None,
            team_id=self.team_id,
            event_id=self.event_id,
            formation=self.draft.formation,
            starting_lineup=[replace(a) for a in self.draft.starting],
            substitutes=list(self.draft.substitutes),
            published=published,
            created_at=self.record.created_at if self.record else None,
        )

    # Mutations

    def assign_starter(self, position: str, player: str) -> LineupDraft:
        self.draft = commands.assign_starter(self.draft, position, player)
        return self.draft

    def remove_starter(self, position: str) -> LineupDraft:
        self.draft = commands.remove_starter(self.draft, position)
        return self.draft

    def add_substitute(self, player: str) -> LineupDraft:
        self.draft = commands.add_substitute(self.draft, player)
        return self.draft

    def remove_substitute(self, player: str) -> LineupDraft:
        self.draft = commands.remove_substitute(self.draft, player)
        return self.draft

    def add_bench_slot(self) -> LineupDraft:
        self.draft = commands.add_bench_slot(self.draft)
        return self.draft

    def remove_bench_slot(self, index: int) -> LineupDraft:
        self.draft = commands.remove_bench_slot(self.draft, index)
        return self.draft

    def change_formation(self, formation: str) -> LineupDraft:
        self.draft = commands.change_formation(self.draft, formation)
        return self.draft

    def clear(self) -> LineupDraft:
        self.draft = commands.clear_lineup(self.draft)
        return self.draft

    # Queries

    def assigned_players(self) -> set[str]:
        return commands.assigned_players(self.draft)

    def orphaned_positions(self) -> list[str]:
        return [a.position for a in commands.orphaned_assignments(self.draft)]
