"""Formation catalog.

Every formation is an ordered list of exactly 11 named slots. Slot
coordinates are percentages of the pitch (top = own goal line at 100%).
Unknown formation keys resolve to the 4-4-2 slot set.
"""

from match_fit.models.formation import PositionSlot
from match_fit.models.lineup import DEFAULT_FORMATION

STARTING_SLOTS = 11

FORMATIONS: dict[str, list[PositionSlot]] = {
    "4-4-2": [
        PositionSlot("GK", "Goalkeeper", "85%", "50%"),
        PositionSlot("LB", "Left Back", "65%", "15%"),
        PositionSlot("CB1", "Center Back", "70%", "40%"),
        PositionSlot("CB2", "Center Back", "70%", "60%"),
        PositionSlot("RB", "Right Back", "65%", "85%"),
        PositionSlot("LM", "Left Mid", "40%", "15%"),
        PositionSlot("CM1", "Center Mid", "45%", "40%"),
        PositionSlot("CM2", "Center Mid", "45%", "60%"),
        PositionSlot("RM", "Right Mid", "40%", "85%"),
        PositionSlot("ST1", "Striker", "15%", "40%"),
        PositionSlot("ST2", "Striker", "15%", "60%"),
    ],
    "4-3-3": [
        PositionSlot("GK", "Goalkeeper", "85%", "50%"),
        PositionSlot("LB", "Left Back", "65%", "15%"),
        PositionSlot("CB1", "Center Back", "70%", "40%"),
        PositionSlot("CB2", "Center Back", "70%", "60%"),
        PositionSlot("RB", "Right Back", "65%", "85%"),
        PositionSlot("CM1", "Center Mid", "45%", "33%"),
        PositionSlot("CM2", "Center Mid", "45%", "50%"),
        PositionSlot("CM3", "Center Mid", "45%", "67%"),
        PositionSlot("LW", "Left Wing", "15%", "15%"),
        PositionSlot("ST", "Striker", "10%", "50%"),
        PositionSlot("RW", "Right Wing", "15%", "85%"),
    ],
    "3-5-2": [
        PositionSlot("GK", "Goalkeeper", "85%", "50%"),
        PositionSlot("CB1", "Center Back", "70%", "25%"),
        PositionSlot("CB2", "Center Back", "70%", "50%"),
        PositionSlot("CB3", "Center Back", "70%", "75%"),
        PositionSlot("LWB", "Left Wing Back", "50%", "10%"),
        PositionSlot("CM1", "Center Mid", "50%", "33%"),
        PositionSlot("CM2", "Center Mid", "50%", "50%"),
        PositionSlot("CM3", "Center Mid", "50%", "67%"),
        PositionSlot("RWB", "Right Wing Back", "50%", "90%"),
        PositionSlot("ST1", "Striker", "15%", "40%"),
        PositionSlot("ST2", "Striker", "15%", "60%"),
    ],
    "4-2-3-1": [
        PositionSlot("GK", "Goalkeeper", "85%", "50%"),
        PositionSlot("LB", "Left Back", "65%", "15%"),
        PositionSlot("CB1", "Center Back", "70%", "40%"),
        PositionSlot("CB2", "Center Back", "70%", "60%"),
        PositionSlot("RB", "Right Back", "65%", "85%"),
        PositionSlot("CDM1", "Def Mid", "50%", "40%"),
        PositionSlot("CDM2", "Def Mid", "50%", "60%"),
        PositionSlot("LAM", "Left Attack Mid", "30%", "20%"),
        PositionSlot("CAM", "Center Attack Mid", "30%", "50%"),
        PositionSlot("RAM", "Right Attack Mid", "30%", "80%"),
        PositionSlot("ST", "Striker", "10%", "50%"),
    ],
    "3-4-3": [
        PositionSlot("GK", "Goalkeeper", "85%", "50%"),
        PositionSlot("CB1", "Center Back", "70%", "25%"),
        PositionSlot("CB2", "Center Back", "70%", "50%"),
        PositionSlot("CB3", "Center Back", "70%", "75%"),
        PositionSlot("LM", "Left Mid", "45%", "15%"),
        PositionSlot("CM1", "Center Mid", "45%", "40%"),
        PositionSlot("CM2", "Center Mid", "45%", "60%"),
        PositionSlot("RM", "Right Mid", "45%", "85%"),
        PositionSlot("LW", "Left Wing", "15%", "20%"),
        PositionSlot("ST", "Striker", "10%", "50%"),
        PositionSlot("RW", "Right Wing", "15%", "80%"),
    ],
}

# Display order of the formation picker
FORMATION_KEYS = list(FORMATIONS.keys())


def get_positions(formation_key: str | None) -> list[PositionSlot]:
    """Get the ordered slots for a formation.

    Args:
        formation_key: Formation key such as "4-3-3"

    Returns:
        List of 11 PositionSlot. Unknown or missing keys fall back to 4-4-2.
    """
    return list(FORMATIONS.get(formation_key, FORMATIONS[DEFAULT_FORMATION]))


def get_position_names(formation_key: str | None) -> list[str]:
    """Slot names of a formation, in display order."""
    return [slot.name for slot in get_positions(formation_key)]


def is_known_formation(formation_key: str | None) -> bool:
    """Check whether the key is one of the predefined formations."""
    return formation_key in FORMATIONS
