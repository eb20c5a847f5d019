"""Service instance domain enums."""

from enum import StrEnum


class OperationKind(StrEnum):
    """Lifecycle operation applied to an instance."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class OperationState(StrEnum):
    """Outcome of the most recent lifecycle attempt."""

    IN_PROGRESS = "IN_PROGRESS"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


# No further polling changes these for the same attempt
TERMINAL_STATES = frozenset({
    OperationState.SUCCEEDED,
    OperationState.FAILED,
})
