"""Player reference resolution against a team roster.

Lineups reference players by roster id, but historical records stored the
player's email instead. Every lookup therefore tries the id first and the
email second. Unresolved references are not errors: callers render the raw
reference through DisplayFallback.
"""

from typing import Iterable, Optional

from match_fit.models.lineup import Lineup
from match_fit.models.team import DisplayFallback, PlayerRecord

# Grouping order of the player selection list
POSITION_GROUPS = ["goalkeeper", "defender", "midfielder", "forward"]


def resolve(ref: str, roster: Iterable[PlayerRecord]) -> PlayerRecord | DisplayFallback:
    """Resolve a stored player reference to a roster member.

    Args:
        ref: Player id or legacy email
        roster: Players of the team

    Returns:
        The matching PlayerRecord, or DisplayFallback carrying the raw reference
    """
    players = list(roster)
    for player in players:
        if player.id == ref:
            return player
    for player in players:
        if player.email is not None and player.email == ref:
            return player
    return DisplayFallback(raw=ref)


def display_name(player: PlayerRecord | DisplayFallback) -> str:
    """Human-readable name for a resolved player."""
    if isinstance(player, DisplayFallback):
        return player.display_name
    if player.first_name and player.last_name:
        return f"{player.first_name} {player.last_name}"
    if player.email:
        return player.email
    return f"Player {player.id[:8]}"


def player_identifiers(player: PlayerRecord) -> set[str]:
    """All references that may point at this player."""
    refs = {player.id}
    if player.email:
        refs.add(player.email)
    return refs


def is_player_in_lineup(
    lineup: Lineup,
    player_id: Optional[str] = None,
    player_email: Optional[str] = None,
) -> bool:
    """Check whether a player appears as starter or substitute.

    Args:
        lineup: Persisted lineup
        player_id: Roster id of the player
        player_email: Email of the player (legacy references)
    """
    for assignment in lineup.starting_lineup:
        if player_id and assignment.player_id == player_id:
            return True
        if player_email and assignment.player_email == player_email:
            return True
    refs = {ref for ref in (player_id, player_email) if ref}
    return any(sub in refs for sub in lineup.substitutes)


def available_players(
    roster: Iterable[PlayerRecord],
    assigned: set[str],
    search: str = "",
) -> list[PlayerRecord]:
    """Players that can still be offered for a slot.

    A player is excluded when any of their identifiers is already assigned.
    The search term matches name, position or jersey number.
    """
    term = search.strip().lower()
    result = []
    for player in roster:
        if player_identifiers(player) & assigned:
            continue
        if term and not _matches_search(player, term):
            continue
        result.append(player)
    return result


def _matches_search(player: PlayerRecord, term: str) -> bool:
    if term in display_name(player).lower():
        return True
    if player.position and term in player.position.lower():
        return True
    return bool(player.jersey_number) and term in str(player.jersey_number)


def group_by_position(players: Iterable[PlayerRecord]) -> dict[str, list[PlayerRecord]]:
    """Group players by roster position.

    Players with a position outside POSITION_GROUPS are left out, matching
    the selection list which only renders the four outfield groups.
    """
    grouped: dict[str, list[PlayerRecord]] = {group: [] for group in POSITION_GROUPS}
    for player in players:
        position = (player.position or "").lower()
        if position in grouped:
            grouped[position].append(player)
    return grouped
