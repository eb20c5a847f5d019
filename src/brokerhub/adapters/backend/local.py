"""In-process provisioning backend that completes every operation immediately."""

import logging

from brokerhub.core.domain.instance import OperationKind, OperationState
from brokerhub.core.interfaces.backend import ProvisioningBackend
from brokerhub.core.models import LastOperation, ServiceInstance

logger = logging.getLogger(__name__)


class LocalProvisioningBackend(ProvisioningBackend):
    """Synchronous backend: create/update/delete return SUCCEEDED.

    async_only only changes what the controller demands from callers; the
    work itself still finishes within the call. Useful for local runs and as a
    reference implementation of the interface.
    """

    def __init__(self, async_only: bool = False) -> None:
        self._async_only = async_only

    def is_async_only(self) -> bool:
        return self._async_only

    async def create(self, instance: ServiceInstance) -> LastOperation:
        logger.debug("Local create %s", instance.id)
        return self._done(OperationKind.CREATE, "created.")

    async def update(self, instance: ServiceInstance) -> LastOperation:
        logger.debug("Local update %s", instance.id)
        return self._done(OperationKind.UPDATE, "updated.")

    async def delete(self, instance: ServiceInstance) -> LastOperation:
        logger.debug("Local delete %s", instance.id)
        return self._done(OperationKind.DELETE, "deleted.")

    async def poll(self, instance: ServiceInstance) -> LastOperation:
        # Nothing is ever left running, so an in-progress record is done
        return self._done(instance.last_operation.operation, None)

    @staticmethod
    def _done(operation: OperationKind, description: str | None) -> LastOperation:
        return LastOperation(
            operation=operation,
            state=OperationState.SUCCEEDED,
            description=description,
        )
