"""Data models for lineup composition."""

from match_fit.models.formation import PositionSlot
from match_fit.models.lineup import (
    DEFAULT_BENCH_SLOTS,
    DEFAULT_FORMATION,
    Lineup,
    LineupDraft,
    LineupPublished,
    PublicationState,
    StartingAssignment,
)
from match_fit.models.team import DisplayFallback, EventRecord, PlayerRecord

__all__ = [
    "PositionSlot",
    "DEFAULT_BENCH_SLOTS",
    "DEFAULT_FORMATION",
    "Lineup",
    "LineupDraft",
    "LineupPublished",
    "PublicationState",
    "StartingAssignment",
    "DisplayFallback",
    "EventRecord",
    "PlayerRecord",
]
