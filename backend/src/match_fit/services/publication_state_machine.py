"""Draft / Published / EditingPublished lifecycle of a lineup.

    DRAFT --save_draft--> DRAFT
    DRAFT --publish--> PUBLISHED                    (needs 11 starters)
    PUBLISHED --enter_edit--> EDITING_PUBLISHED
    EDITING_PUBLISHED --save_draft--> EDITING_PUBLISHED   (stays published)
    EDITING_PUBLISHED --publish--> PUBLISHED        (needs 11 starters)
    EDITING_PUBLISHED --cancel_edit--> PUBLISHED    (reloads stored record)
    any --delete--> DRAFT                           (record removed)

Once the event is past (and not today) every mutating transition and
every draft edit is rejected; only reads and cancel_edit remain.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, Optional

from match_fit.errors import (
    IncompleteLineup,
    InvalidEvent,
    InvalidTransition,
    LineupError,
    LineupNotEditable,
    PastEventLocked,
    PersistenceError,
    SubmissionInProgress,
)
from match_fit.models.lineup import Lineup, LineupDraft, LineupPublished, PublicationState
from match_fit.models.team import EventRecord
from match_fit.services.lineup_draft_store import LineupDraftStore
from match_fit.utils.event_dates import is_event_past
from match_fit.utils.formations import STARTING_SLOTS

logger = logging.getLogger(__name__)

PublishListener = Callable[[LineupPublished], None]


class PublicationStateMachine:
    """Gates draft edits and persistence for the store's selected event."""

    def __init__(
        self,
        store: LineupDraftStore,
        clock: Optional[Callable[[], datetime]] = None,
        listeners: Optional[list[PublishListener]] = None,
    ):
        """Initialize the state machine.

        Args:
            store: Draft store holding the selected event
            clock: Returns "now"; used for the past-event lock
            listeners: Called with LineupPublished after every publish
        """
        self.store = store
        self._clock = clock or datetime.now
        self._listeners: list[PublishListener] = list(listeners or [])
        self.state = PublicationState.DRAFT
        # Action classes with a gateway call in flight
        self._in_flight: set[str] = set()
        self._in_flight_lock = threading.Lock()

    def add_listener(self, listener: PublishListener) -> None:
        self._listeners.append(listener)

    @property
    def is_event_past(self) -> bool:
        event = self.store.event
        return event is not None and is_event_past(event.date, self._clock())

    @property
    def is_editable(self) -> bool:
        """Whether draft edits are currently accepted."""
        return (
            self.store.has_event
            and not self.is_event_past
            and self.state != PublicationState.PUBLISHED
        )

    # =========================================================================
    # Loading
    # =========================================================================

    def select_event(self, team_id: str, event: EventRecord) -> LineupDraft:
        """Load the lineup of an event and derive the initial state.

        Raises:
            InvalidEvent: If the event is not a game
        """
        if not event.is_game:
            raise InvalidEvent(f"Event {event.id} is not a game; lineups are only built for games")
        with self._submission("load", "load lineup"):
            draft = self.store.select_event(team_id, event)
        self._sync_state()
        return draft

    def _sync_state(self) -> None:
        record = self.store.record
        if record is not None and record.published:
            self.state = PublicationState.PUBLISHED
        else:
            self.state = PublicationState.DRAFT

    # =========================================================================
    # Draft edits
    # =========================================================================

    def require_editable(self) -> None:
        """Raise unless the draft may be edited right now."""
        self._require_event()
        self._require_not_past()
        if self.state == PublicationState.PUBLISHED:
            raise LineupNotEditable()

    def assign_starter(self, position: str, player: str) -> LineupDraft:
        self.require_editable()
        return self.store.assign_starter(position, player)

    def remove_starter(self, position: str) -> LineupDraft:
        self.require_editable()
        return self.store.remove_starter(position)

    def add_substitute(self, player: str) -> LineupDraft:
        self.require_editable()
        return self.store.add_substitute(player)

    def remove_substitute(self, player: str) -> LineupDraft:
        self.require_editable()
        return self.store.remove_substitute(player)

    def add_bench_slot(self) -> LineupDraft:
        self.require_editable()
        return self.store.add_bench_slot()

    def remove_bench_slot(self, index: int) -> LineupDraft:
        self.require_editable()
        return self.store.remove_bench_slot(index)

    def change_formation(self, formation: str) -> LineupDraft:
        self.require_editable()
        return self.store.change_formation(formation)

    def clear(self) -> LineupDraft:
        self.require_editable()
        return self.store.clear()

    # =========================================================================
    # Transitions
    # =========================================================================

    def save_draft(self) -> Lineup:
        """Persist the draft without changing its published flag."""
        self._require_event()
        self._require_not_past()
        if self.state == PublicationState.PUBLISHED:
            raise InvalidTransition("save draft", self.state.value)

        published = self.state == PublicationState.EDITING_PUBLISHED
        with self._submission("save", "save lineup"):
            saved = self.store.gateway.save(self.store.to_lineup(published=published))
        self.store.record = saved
        logger.info(f"Lineup {saved.id} saved as {self.state.value}")
        return saved

    def publish(self) -> Lineup:
        """Persist the draft as published and notify listeners.

        Raises:
            IncompleteLineup: If fewer or more than 11 starters are assigned
        """
        self._require_event()
        self._require_not_past()
        if self.state == PublicationState.PUBLISHED:
            raise InvalidTransition("publish", self.state.value)
        if self.store.draft.starter_count != STARTING_SLOTS:
            logger.warning(
                f"Publish rejected for event {self.store.event_id}: "
                f"{self.store.draft.starter_count}/{STARTING_SLOTS} starters"
            )
            raise IncompleteLineup(self.store.draft.starter_count, STARTING_SLOTS)

        republished = self.state == PublicationState.EDITING_PUBLISHED
        with self._submission("publish", "publish lineup"):
            saved = self.store.gateway.save(self.store.to_lineup(published=True))
        self.store.record = saved
        self.state = PublicationState.PUBLISHED
        logger.info(f"Lineup {saved.id} {'republished' if republished else 'published'}")
        self._notify(LineupPublished(lineup=saved, republished=republished))
        return saved

    def enter_edit(self) -> None:
        self._require_event()
        self._require_not_past()
        if self.state != PublicationState.PUBLISHED:
            raise InvalidTransition("edit published lineup", self.state.value)
        self.state = PublicationState.EDITING_PUBLISHED

    def cancel_edit(self) -> LineupDraft:
        """Discard unsaved edits by reloading the stored lineup."""
        if self.state != PublicationState.EDITING_PUBLISHED:
            raise InvalidTransition("cancel edit", self.state.value)
        with self._submission("load", "load lineup"):
            draft = self.store.reload()
        self._sync_state()
        return draft

    def delete(self) -> None:
        """Remove the stored lineup and start over from an empty draft."""
        self._require_event()
        self._require_not_past()
        record = self.store.record
        if record is not None:
            with self._submission("delete", "delete lineup"):
                self.store.gateway.delete(record.id)
            logger.info(f"Lineup {record.id} deleted")
        self.store.reset()
        self.state = PublicationState.DRAFT

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_event(self) -> None:
        if not self.store.has_event:
            raise InvalidEvent("Please select a game event")

    def _require_not_past(self) -> None:
        if self.is_event_past:
            logger.warning(f"Rejected change to past event {self.store.event_id}")
            raise PastEventLocked(self.store.event_id)

    @contextmanager
    def _submission(self, action: str, operation: str) -> Iterator[None]:
        """Allow one gateway call per action class; wrap gateway failures."""
        with self._in_flight_lock:
            if action in self._in_flight:
                raise SubmissionInProgress(action)
            self._in_flight.add(action)
        try:
            yield
        except PersistenceError as e:
            # Report the transition that failed, not the gateway call
            logger.error(f"Failed to {operation}: {e.message}")
            raise PersistenceError(operation, e.message) from e
        except LineupError:
            raise
        except Exception as e:
            logger.error(f"Failed to {operation}: {e}")
            raise PersistenceError(operation, str(e)) from e
        finally:
            with self._in_flight_lock:
                self._in_flight.discard(action)

    def _notify(self, event: LineupPublished) -> None:
        # The lineup is already stored; a failing listener must not undo that
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Publish listener failed for lineup {event.lineup.id}: {e}")
