"""Lineup draft commands.

Each command takes a draft and returns a new draft; the input is never
modified. Commands that would break a lineup invariant raise instead of
returning, so a failed command leaves the caller's draft untouched.

The assigned-players set is advisory: it filters what the selection list
offers, but assign_starter and add_substitute do not re-check it. A player
placed on a second starting slot keeps the first one as well.
"""

from dataclasses import replace

from match_fit.errors import (
    BenchSlotBelowMinimum,
    BenchSlotOccupied,
    InvalidBenchSlot,
    InvalidFormation,
    InvalidPlayer,
    InvalidPosition,
)
from match_fit.models.lineup import (
    DEFAULT_BENCH_SLOTS,
    DEFAULT_FORMATION,
    LineupDraft,
    StartingAssignment,
)
from match_fit.utils.formations import get_position_names, is_known_formation


def empty_draft(formation: str = DEFAULT_FORMATION) -> LineupDraft:
    """Fresh draft with no assignments and the default bench."""
    return LineupDraft(formation=formation, starting=[], substitutes=[], bench_slot_count=DEFAULT_BENCH_SLOTS)


def assign_starter(draft: LineupDraft, position: str, player: str) -> LineupDraft:
    """Put a player on a formation slot.

    Args:
        draft: Current draft
        position: Slot name of the draft's formation
        player: Player reference (roster id)

    Returns:
        Draft with the slot set; an existing occupant is replaced

    Raises:
        InvalidPosition: If the slot is not part of the current formation
        InvalidPlayer: If the player reference is blank
    """
    _require_player(player)
    if position not in get_position_names(draft.formation):
        raise InvalidPosition(position, draft.formation)

    assignment = StartingAssignment(position=position, player_id=player)
    starting = list(draft.starting)
    for i, existing in enumerate(starting):
        if existing.position == position:
            starting[i] = assignment
            break
    else:
        starting.append(assignment)
    return replace(draft, starting=starting)


def remove_starter(draft: LineupDraft, position: str) -> LineupDraft:
    """Clear a slot. No-op when the slot is empty."""
    return replace(draft, starting=[a for a in draft.starting if a.position != position])


def add_substitute(draft: LineupDraft, player: str) -> LineupDraft:
    """Append a substitute. Adding a player already on the bench is a no-op."""
    _require_player(player)
    if player in draft.substitutes:
        return replace(draft, substitutes=list(draft.substitutes))
    substitutes = [*draft.substitutes, player]
    return replace(
        draft,
        substitutes=substitutes,
        # Keep enough placeholders for everybody on the bench
        bench_slot_count=max(draft.bench_slot_count, len(substitutes)),
    )


def remove_substitute(draft: LineupDraft, player: str) -> LineupDraft:
    """Remove a substitute by reference. The bench keeps its slot count."""
    return replace(draft, substitutes=[s for s in draft.substitutes if s != player])


def add_bench_slot(draft: LineupDraft) -> LineupDraft:
    return replace(draft, bench_slot_count=draft.bench_slot_count + 1)


def remove_bench_slot(draft: LineupDraft, index: int) -> LineupDraft:
    """Drop an empty bench placeholder.

    Substitutes fill bench slots in order, so slot ``index`` holds
    ``substitutes[index]`` when that exists.

    Raises:
        BenchSlotBelowMinimum: If fewer slots than substitutes would remain
        InvalidBenchSlot: If index is outside the bench
        BenchSlotOccupied: If the slot holds a player
    """
    if draft.bench_slot_count - 1 < len(draft.substitutes):
        raise BenchSlotBelowMinimum(draft.bench_slot_count, len(draft.substitutes))
    if index < 0 or index >= draft.bench_slot_count:
        raise InvalidBenchSlot(index, draft.bench_slot_count)
    if index < len(draft.substitutes):
        raise BenchSlotOccupied(index, draft.substitutes[index])
    return replace(draft, bench_slot_count=draft.bench_slot_count - 1)


def change_formation(draft: LineupDraft, formation: str) -> LineupDraft:
    """Switch formation.

    Assignments keyed by slots the new formation lacks are kept as-is; see
    orphaned_assignments.

    Raises:
        InvalidFormation: If the key is not in the catalog
    """
    if not is_known_formation(formation):
        raise InvalidFormation(formation)
    return replace(draft, formation=formation, starting=list(draft.starting))


def clear_lineup(draft: LineupDraft) -> LineupDraft:
    """Remove every starter and substitute, keeping the formation."""
    return empty_draft(draft.formation)


def _require_player(player: str) -> None:
    if not player or not player.strip():
        raise InvalidPlayer(player)


def assigned_players(draft: LineupDraft) -> set[str]:
    """References of every starter and substitute.

    Legacy starters stored by email contribute their email.
    """
    assigned = {a.player for a in draft.starting if a.player}
    assigned.update(draft.substitutes)
    return assigned


def orphaned_assignments(draft: LineupDraft) -> list[StartingAssignment]:
    """Starters whose slot does not exist in the current formation."""
    names = set(get_position_names(draft.formation))
    return [a for a in draft.starting if a.position not in names]
