"""Domain models and enums."""

from brokerhub.core.domain.instance import (
    TERMINAL_STATES,
    OperationKind,
    OperationState,
)

__all__ = [
    "OperationKind",
    "OperationState",
    "TERMINAL_STATES",
]
