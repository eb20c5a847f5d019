"""Instance store interface."""

from abc import ABC, abstractmethod

from brokerhub.core.models import ServiceInstance


class InstanceStore(ABC):
    """Durable key-value persistence for instance records.

    Implementations must give read-after-write consistency for a single id.
    No cross-key transactions are required.

    Implementations: InMemoryInstanceStore, SqlInstanceStore
    """

    @abstractmethod
    async def get(self, instance_id: str) -> ServiceInstance | None:
        """Load a record, including soft-deleted ones.

        Args:
            instance_id: Instance ID

        Returns:
            The stored record, or None if never written or purged
        """
        ...

    @abstractmethod
    async def put(self, instance: ServiceInstance) -> None:
        """Insert or fully replace a record.

        Args:
            instance: Record to store under instance.id
        """
        ...

    @abstractmethod
    async def delete(self, instance_id: str) -> bool:
        """Physically purge a record. Not used by the lifecycle flow.

        Args:
            instance_id: Instance ID

        Returns:
            True if a record was removed
        """
        ...
