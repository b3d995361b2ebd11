"""Models for lineup editing sessions."""

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from match_fit.services.lineup_draft_store import LineupDraftStore
    from match_fit.services.publication_state_machine import PublicationStateMachine


@dataclass
class LineupSession:
    """State for an active coach editing session."""

    session_id: str
    team_id: str
    machine: "PublicationStateMachine"
    created_at: float = field(default_factory=time.time)
    last_access: float = field(default_factory=time.time)

    @property
    def store(self) -> "LineupDraftStore":
        return self.machine.store
