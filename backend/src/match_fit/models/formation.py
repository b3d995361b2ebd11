"""Formation slot model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PositionSlot:
    """A single on-field slot of a formation."""

    name: str  # unique within a formation (e.g. "GK", "CB1")
    label: str  # human-readable (e.g. "Center Back")
    top: str  # vertical field coordinate, percent string
    left: str  # horizontal field coordinate, percent string
