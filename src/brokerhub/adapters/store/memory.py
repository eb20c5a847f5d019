"""In-memory instance store for local development and tests."""

import asyncio
import logging

from brokerhub.core.interfaces.store import InstanceStore
from brokerhub.core.models import ServiceInstance

logger = logging.getLogger(__name__)


class InMemoryInstanceStore(InstanceStore):
    """Dict-backed InstanceStore.

    Records are deep-copied on the way in and out, so a caller holding a
    returned record cannot change stored state without calling ``put``.
    """

    def __init__(self) -> None:
        self._records: dict[str, ServiceInstance] = {}
        self._lock = asyncio.Lock()

    async def get(self, instance_id: str) -> ServiceInstance | None:
        async with self._lock:
            record = self._records.get(instance_id)
            return record.model_copy(deep=True) if record is not None else None

    async def put(self, instance: ServiceInstance) -> None:
        async with self._lock:
            self._records[instance.id] = instance.model_copy(deep=True)
        logger.debug("Stored instance %s", instance.id)

    async def delete(self, instance_id: str) -> bool:
        async with self._lock:
            removed = self._records.pop(instance_id, None) is not None
        if removed:
            logger.debug("Purged instance %s", instance_id)
        return removed

    def __len__(self) -> int:
        return len(self._records)
