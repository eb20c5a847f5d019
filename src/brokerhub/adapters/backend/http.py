"""HTTP provisioning backend.

Delegates provisioning to a remote provisioner service:

    PUT    /v1/instances/{id}                               create
    PATCH  /v1/instances/{id}                               update
    DELETE /v1/instances/{id}                               delete
    GET    /v1/instances/{id}/last_operation?operation=...  poll

Every endpoint answers ``{"state": "...", "description": "..."}``. Non-2xx
responses raise httpx.HTTPStatusError; the controller records those as
FAILED.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

import httpx

from brokerhub.app.config import ProvisionerConfig
from brokerhub.core.domain.instance import OperationKind, OperationState
from brokerhub.core.interfaces.backend import ProvisioningBackend
from brokerhub.core.models import LastOperation, ServiceInstance

logger = logging.getLogger(__name__)


class HttpProvisioningBackend(ProvisioningBackend):
    """HTTP client for a remote provisioner. Always async-only."""

    def __init__(self, config: ProvisionerConfig) -> None:
        self._config = config
        self._client: httpx.AsyncClient | None = None

    def is_async_only(self) -> bool:
        return True

    def _get_headers(self) -> dict[str, str]:
        """Get request headers with API key."""
        headers = {"Content-Type": "application/json"}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._config.endpoint,
                headers=self._get_headers(),
                timeout=self._config.timeout,
            )
        return self._client

    async def _request(
        self,
        method: Literal["get", "put", "patch", "delete"],
        path: str,
        operation: OperationKind,
        **kwargs: Any,
    ) -> LastOperation:
        """Send request and parse the last-operation body."""
        client = await self._get_client()
        resp = await getattr(client, method)(path, **kwargs)
        resp.raise_for_status()

        data = resp.json()
        return LastOperation(
            operation=operation,
            state=OperationState(data["state"]),
            description=data.get("description"),
        )

    @staticmethod
    def _body(instance: ServiceInstance) -> dict[str, Any]:
        return {
            "service_id": instance.service_id,
            "plan_id": instance.plan_id,
            "parameters": instance.parameters,
        }

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # ProvisioningBackend interface
    # =========================================================================

    async def create(self, instance: ServiceInstance) -> LastOperation:
        result = await self._request(
            "put",
            f"/v1/instances/{instance.id}",
            OperationKind.CREATE,
            json=self._body(instance),
        )
        logger.info("Create sent to provisioner: %s (%s)", instance.id, result.state.value)
        return result

    async def update(self, instance: ServiceInstance) -> LastOperation:
        result = await self._request(
            "patch",
            f"/v1/instances/{instance.id}",
            OperationKind.UPDATE,
            json=self._body(instance),
        )
        logger.info("Update sent to provisioner: %s (%s)", instance.id, result.state.value)
        return result

    async def delete(self, instance: ServiceInstance) -> LastOperation:
        result = await self._request(
            "delete",
            f"/v1/instances/{instance.id}",
            OperationKind.DELETE,
        )
        logger.info("Delete sent to provisioner: %s (%s)", instance.id, result.state.value)
        return result

    async def poll(self, instance: ServiceInstance) -> LastOperation:
        operation = instance.last_operation.operation
        return await self._request(
            "get",
            f"/v1/instances/{instance.id}/last_operation",
            operation,
            params={"operation": operation.value},
        )
