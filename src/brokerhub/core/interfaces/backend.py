"""Provisioning backend interface."""

from abc import ABC, abstractmethod

from brokerhub.core.models import LastOperation, ServiceInstance


class ProvisioningBackend(ABC):
    """Interface for the system that actually provisions instances.

    Every lifecycle method may return IN_PROGRESS, in which case completion is
    discovered later through ``poll``. Methods may raise; the controller turns
    any exception into a FAILED last operation.

    Implementations: LocalProvisioningBackend, HttpProvisioningBackend
    """

    @abstractmethod
    def is_async_only(self) -> bool:
        """Return True if the backend never completes synchronously."""
        ...

    @abstractmethod
    async def create(self, instance: ServiceInstance) -> LastOperation:
        """Provision a new instance.

        Args:
            instance: Record already persisted with CREATE/IN_PROGRESS

        Returns:
            Outcome of the create attempt
        """
        ...

    @abstractmethod
    async def update(self, instance: ServiceInstance) -> LastOperation:
        """Apply updated plan/parameters to an existing instance.

        Args:
            instance: Record carrying the new plan/parameters

        Returns:
            Outcome of the update attempt
        """
        ...

    @abstractmethod
    async def delete(self, instance: ServiceInstance) -> LastOperation:
        """Deprovision an instance.

        Args:
            instance: Record to deprovision

        Returns:
            Outcome of the delete attempt
        """
        ...

    @abstractmethod
    async def poll(self, instance: ServiceInstance) -> LastOperation:
        """Fetch the current state of the in-progress operation.

        Args:
            instance: Record whose last_operation is IN_PROGRESS

        Returns:
            Fresh LastOperation for the same operation kind
        """
        ...
