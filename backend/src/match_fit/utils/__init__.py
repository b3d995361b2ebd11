"""Utility modules for match_fit."""

from match_fit.utils.formations import (
    FORMATION_KEYS,
    FORMATIONS,
    STARTING_SLOTS,
    get_position_names,
    get_positions,
    is_known_formation,
)
from match_fit.utils.player_identity import (
    available_players,
    display_name,
    group_by_position,
    is_player_in_lineup,
    resolve,
)

__all__ = [
    "FORMATION_KEYS",
    "FORMATIONS",
    "STARTING_SLOTS",
    "get_position_names",
    "get_positions",
    "is_known_formation",
    "available_players",
    "display_name",
    "group_by_position",
    "is_player_in_lineup",
    "resolve",
]
