"""Database models for brokerhub.

Models are defined using SQLModel (SQLAlchemy + Pydantic).

Note: Enum values are stored as strings.
      Use core.domain enums for type-safe operations in service layer.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


class ServiceInstanceRow(SQLModel, table=True):
    """Persisted service instance. last_operation is flattened into op_* columns."""

    __tablename__ = "service_instances"

    id: str = Field(primary_key=True)
    service_id: str | None = Field(default=None, max_length=255)
    plan_id: str | None = Field(default=None, max_length=255)
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )

    op_operation: str  # OperationKind value
    op_state: str = Field(index=True)  # OperationState value
    op_description: str | None = None

    deleted: bool = Field(default=False, index=True)

    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
