"""Error taxonomy for lineup composition.

Validation and conflict errors are raised before anything reaches the
database. PersistenceError wraps whatever the gateway reported.
"""


class LineupError(Exception):
    """Base class for all lineup engine errors."""

    code = "lineup_error"


# =============================================================================
# Validation errors - caller input or state precondition violations
# =============================================================================


class ValidationError(LineupError):
    code = "validation_error"


class InvalidPosition(ValidationError):
    code = "invalid_position"

    def __init__(self, position: str, formation: str):
        self.position = position
        self.formation = formation
        super().__init__(f"Position '{position}' is not part of formation {formation}")


class InvalidPlayer(ValidationError):
    code = "invalid_player"

    def __init__(self, player: str):
        self.player = player
        super().__init__(f"Invalid player reference {player!r}")


class InvalidFormation(ValidationError):
    code = "invalid_formation"

    def __init__(self, formation: str):
        self.formation = formation
        super().__init__(f"Unknown formation '{formation}'")


class IncompleteLineup(ValidationError):
    code = "incomplete_lineup"

    def __init__(self, assigned: int, required: int = 11):
        self.assigned = assigned
        self.required = required
        super().__init__(
            f"Please assign all {required} starting positions ({assigned}/{required} assigned)"
        )


class InvalidBenchSlot(ValidationError):
    code = "invalid_bench_slot"

    def __init__(self, index: int, bench_slot_count: int):
        self.index = index
        self.bench_slot_count = bench_slot_count
        super().__init__(
            f"Bench slot {index} does not exist (bench has {bench_slot_count} slots)"
        )


class InvalidEvent(ValidationError):
    code = "invalid_event"


class PastEventLocked(ValidationError):
    code = "past_event_locked"

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(
            "This game has already passed. Lineups cannot be created or edited for past events."
        )


class LineupNotEditable(ValidationError):
    code = "lineup_not_editable"

    def __init__(self):
        super().__init__("Lineup is published; enter edit mode before changing it")


class InvalidTransition(ValidationError):
    code = "invalid_transition"

    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while lineup is {state}")


# =============================================================================
# Conflict errors - mutation would break a structural invariant
# =============================================================================


class ConflictError(LineupError):
    code = "conflict"


class BenchSlotOccupied(ConflictError):
    code = "bench_slot_occupied"

    def __init__(self, index: int, player: str):
        self.index = index
        self.player = player
        super().__init__(f"Bench slot {index} is occupied by {player}; remove the player first")


class BenchSlotBelowMinimum(ConflictError):
    code = "bench_slot_below_minimum"

    def __init__(self, bench_slot_count: int, substitutes: int):
        self.bench_slot_count = bench_slot_count
        self.substitutes = substitutes
        super().__init__(
            f"Cannot remove a bench slot: {substitutes} substitutes need at least "
            f"{substitutes} slots (currently {bench_slot_count})"
        )


class SubmissionInProgress(ConflictError):
    code = "submission_in_progress"

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"A {action} request is already in progress")


# =============================================================================
# Gateway and lookup errors
# =============================================================================


class PersistenceError(LineupError):
    """Failure reported by the persistence gateway, with operation context."""

    code = "persistence_error"

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message or "An unexpected error occurred. Please try again."
        super().__init__(format_operation_error(self.message, operation))


class NotFoundError(LineupError):
    code = "not_found"


def format_operation_error(message: str, operation: str) -> str:
    """Prepend operation context unless the message already carries it."""
    if operation.lower() in message.lower():
        return message
    return f"Failed to {operation}: {message}"
