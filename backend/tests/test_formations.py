"""Tests for the formation catalog."""

import pytest

from match_fit.utils.formations import (
    FORMATION_KEYS,
    STARTING_SLOTS,
    get_position_names,
    get_positions,
    is_known_formation,
)


def test_catalog_has_five_formations():
    assert FORMATION_KEYS == ["4-4-2", "4-3-3", "3-5-2", "4-2-3-1", "3-4-3"]


@pytest.mark.parametrize("formation", FORMATION_KEYS)
def test_every_formation_has_eleven_unique_slots(formation):
    names = get_position_names(formation)
    assert len(names) == STARTING_SLOTS
    assert len(set(names)) == STARTING_SLOTS


def test_four_four_two_slot_names():
    names = get_position_names("4-4-2")
    assert set(names) == {"GK", "LB", "CB1", "CB2", "RB", "LM", "CM1", "CM2", "RM", "ST1", "ST2"}


def test_slots_keep_display_order_and_coordinates():
    slots = get_positions("4-2-3-1")
    assert slots[0].name == "GK"
    assert slots[0].label == "Goalkeeper"
    assert (slots[0].top, slots[0].left) == ("85%", "50%")
    assert slots[-1].name == "ST"


def test_unknown_formation_falls_back_to_four_four_two():
    """Unrecognized keys resolve silently to the 4-4-2 slots."""
    assert get_positions("5-4-1") == get_positions("4-4-2")
    assert get_position_names(None) == get_position_names("4-4-2")
    assert not is_known_formation("5-4-1")


def test_get_positions_returns_a_copy():
    slots = get_positions("4-3-3")
    slots.clear()
    assert len(get_positions("4-3-3")) == STARTING_SLOTS
