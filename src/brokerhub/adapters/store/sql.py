"""SQL-backed instance store (SQLModel + SQLAlchemy async)."""

import logging
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from brokerhub.core.domain.instance import OperationKind, OperationState
from brokerhub.core.interfaces.store import InstanceStore
from brokerhub.core.models import LastOperation, ServiceInstance
from brokerhub.infra.models import ServiceInstanceRow

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on DateTime(timezone=True)
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_row(instance: ServiceInstance) -> ServiceInstanceRow:
    last = instance.last_operation
    return ServiceInstanceRow(
        id=instance.id,
        service_id=instance.service_id,
        plan_id=instance.plan_id,
        parameters=dict(instance.parameters),
        op_operation=last.operation.value,
        op_state=last.state.value,
        op_description=last.description,
        deleted=instance.deleted,
        created_at=instance.created_at,
        updated_at=instance.updated_at,
    )


def _from_row(row: ServiceInstanceRow) -> ServiceInstance:
    return ServiceInstance(
        id=row.id,
        service_id=row.service_id,
        plan_id=row.plan_id,
        parameters=dict(row.parameters or {}),
        last_operation=LastOperation(
            operation=OperationKind(row.op_operation),
            state=OperationState(row.op_state),
            description=row.op_description,
        ),
        deleted=row.deleted,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlInstanceStore(InstanceStore):
    """InstanceStore on a ``service_instances`` table.

    One short session per call. ``put`` is a full-row upsert via merge, so the
    last writer for an id wins; same-id races are left to the caller.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, instance_id: str) -> ServiceInstance | None:
        async with self._session_factory() as session:
            row = await session.get(ServiceInstanceRow, instance_id)
            return _from_row(row) if row is not None else None

    async def put(self, instance: ServiceInstance) -> None:
        async with self._session_factory() as session:
            await session.merge(_to_row(instance))
            await session.commit()
        logger.debug("Stored instance %s", instance.id)

    async def delete(self, instance_id: str) -> bool:
        async with self._session_factory() as session:
            row = await session.get(ServiceInstanceRow, instance_id)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
        logger.debug("Purged instance %s", instance_id)
        return True
