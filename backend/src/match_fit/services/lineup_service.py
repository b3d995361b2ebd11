"""Lineup business logic service."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from match_fit.errors import NotFoundError
from match_fit.models.lineup import Lineup, LineupPublished
from match_fit.models.team import EventRecord, PlayerRecord
from match_fit.repositories.lineup_repository import LineupRepository
from match_fit.repositories.protocols import TeamDirectory
from match_fit.services.lineup_draft_store import LineupDraftStore
from match_fit.services.publication_state_machine import PublicationStateMachine
from match_fit.utils.event_dates import upcoming_games
from match_fit.utils.player_identity import is_player_in_lineup

logger = logging.getLogger(__name__)


def log_lineup_published(event: LineupPublished) -> None:
    """Default publish listener. Delivery to players happens elsewhere."""
    lineup = event.lineup
    action = "updated" if event.republished else "published"
    logger.info(
        f"Lineup {action}: team={lineup.team_id} event={lineup.event_id} "
        f"lineup={lineup.id}; players should be notified"
    )


@dataclass
class PublishedLineupView:
    """A published lineup as shown to a player."""

    event: EventRecord
    lineup: Lineup
    in_lineup: bool = False


class LineupService:
    """Wires the lineup gateway, the team collaborator and publish listeners."""

    def __init__(
        self,
        lineup_repository: LineupRepository,
        team_repository: TeamDirectory,
        clock: Optional[Callable[[], datetime]] = None,
        enable_notifications: bool = True,
    ):
        """Initialize the lineup service.

        Args:
            lineup_repository: Persistence gateway for lineups
            team_repository: Roster and event lookups
            clock: Returns "now"; injected by tests for the past-event lock
            enable_notifications: Register the default publish listener
        """
        self.lineup_repository = lineup_repository
        self.team_repository = team_repository
        self._clock = clock or datetime.now
        self._listeners: list[Callable[[LineupPublished], None]] = []
        if enable_notifications:
            self._listeners.append(log_lineup_published)

    def add_publish_listener(self, listener: Callable[[LineupPublished], None]) -> None:
        """Register a listener for machines created after this call."""
        self._listeners.append(listener)

    def now(self) -> datetime:
        return self._clock()

    def get_event(self, team_id: str, event_id: str) -> EventRecord:
        """Get an event of a team.

        Raises:
            NotFoundError: If the event does not exist or belongs to another team
        """
        event = self.team_repository.get_event(event_id)
        if event is None or event.team_id != team_id:
            raise NotFoundError(f"Event {event_id} not found for team {team_id}")
        return event

    def get_roster(self, team_id: str) -> list[PlayerRecord]:
        return self.team_repository.get_roster(team_id)

    def get_upcoming_games(self, team_id: str) -> list[EventRecord]:
        """Game events that are today or later."""
        return upcoming_games(self.team_repository.get_game_events(team_id), self.now())

    def create_machine(self) -> PublicationStateMachine:
        """Fresh store and state machine with the service's listeners."""
        store = LineupDraftStore(self.lineup_repository)
        return PublicationStateMachine(store, clock=self._clock, listeners=self._listeners)

    def open_editor(self, team_id: str, event_id: str) -> PublicationStateMachine:
        """Create a state machine with the event's lineup loaded."""
        event = self.get_event(team_id, event_id)
        machine = self.create_machine()
        machine.select_event(team_id, event)
        return machine

    def switch_event(self, machine: PublicationStateMachine, team_id: str, event_id: str) -> None:
        """Select another event; unsaved edits of the current one are dropped."""
        event = self.get_event(team_id, event_id)
        machine.select_event(team_id, event)

    def get_published_lineups(
        self,
        team_id: str,
        player_id: Optional[str] = None,
        player_email: Optional[str] = None,
    ) -> list[PublishedLineupView]:
        """Published lineups of upcoming games, earliest game first.

        Args:
            team_id: Team whose lineups to list
            player_id: Flag lineups containing this roster id
            player_email: Flag lineups containing this email (legacy records)
        """
        by_event: dict[str, Lineup] = {}
        # Listed newest first; the oldest record per event wins, as in load()
        for lineup in self.lineup_repository.list_published(team_id):
            by_event[lineup.event_id] = lineup

        views = []
        for event in self.get_upcoming_games(team_id):
            lineup = by_event.get(event.id)
            if lineup is None:
                continue
            in_lineup = bool(player_id or player_email) and is_player_in_lineup(
                lineup, player_id=player_id, player_email=player_email
            )
            views.append(PublishedLineupView(event=event, lineup=lineup, in_lineup=in_lineup))
        return views
