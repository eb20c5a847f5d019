"""Service instance models.

ServiceInstance is the unit persisted by an InstanceStore. Request and
response models describe the controller's call surface; they carry no
transport framing.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from brokerhub.core.domain.instance import (
    TERMINAL_STATES,
    OperationKind,
    OperationState,
)


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


class LastOperation(BaseModel):
    """Outcome of the most recent create/update/delete attempt."""

    operation: OperationKind
    state: OperationState
    description: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @classmethod
    def in_progress(cls, operation: OperationKind) -> "LastOperation":
        return cls(operation=operation, state=OperationState.IN_PROGRESS)

    @classmethod
    def failed(cls, operation: OperationKind, description: str | None) -> "LastOperation":
        return cls(operation=operation, state=OperationState.FAILED, description=description)


class ServiceInstance(BaseModel):
    """Instance record keyed by a caller-supplied id.

    deleted is a soft-delete flag: the record stays in the store so that
    duplicate deletes and stale updates keep failing with a clear error.
    """

    id: str = Field(min_length=1)
    service_id: str | None = None
    plan_id: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    last_operation: LastOperation
    deleted: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateInstanceRequest(BaseModel):
    instance_id: str = Field(min_length=1)
    service_id: str | None = None
    plan_id: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    accepts_incomplete: bool = False


class UpdateInstanceRequest(BaseModel):
    instance_id: str = Field(min_length=1)
    plan_id: str | None = None
    parameters: dict[str, Any] | None = None
    accepts_incomplete: bool = False


class DeleteInstanceRequest(BaseModel):
    instance_id: str = Field(min_length=1)
    accepts_incomplete: bool = False


class InstanceOperationResponse(BaseModel):
    """Result of a create/update/delete call.

    is_async is True when the backend accepted the request but has not
    finished; callers poll ``last_operation`` until a terminal state.
    """

    instance_id: str
    operation: OperationKind
    state: OperationState
    description: str | None = None
    is_async: bool

    @classmethod
    def from_instance(cls, instance: ServiceInstance) -> "InstanceOperationResponse":
        last = instance.last_operation
        return cls(
            instance_id=instance.id,
            operation=last.operation,
            state=last.state,
            description=last.description,
            is_async=last.state == OperationState.IN_PROGRESS,
        )
