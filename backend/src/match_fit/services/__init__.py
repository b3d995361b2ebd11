"""Business logic services."""

from match_fit.services.lineup_draft_store import LineupDraftStore
from match_fit.services.publication_state_machine import PublicationStateMachine

__all__ = [
    "LineupDraftStore",
    "PublicationStateMachine",
]
