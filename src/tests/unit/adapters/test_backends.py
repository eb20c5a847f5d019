"""Unit tests for ProvisioningBackend implementations."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from brokerhub.adapters.backend import HttpProvisioningBackend, LocalProvisioningBackend
from brokerhub.app.config import ProvisionerConfig
from brokerhub.core.domain import OperationKind, OperationState
from brokerhub.core.models import LastOperation, ServiceInstance


class TestLocalProvisioningBackend:
    def test_async_only_flag(self) -> None:
        assert LocalProvisioningBackend().is_async_only() is False
        assert LocalProvisioningBackend(async_only=True).is_async_only() is True

    @pytest.mark.parametrize(
        "method,operation",
        [
            ("create", OperationKind.CREATE),
            ("update", OperationKind.UPDATE),
            ("delete", OperationKind.DELETE),
        ],
    )
    async def test_operations_succeed_immediately(
        self, instance: ServiceInstance, method: str, operation: OperationKind
    ) -> None:
        result = await getattr(LocalProvisioningBackend(), method)(instance)

        assert result.operation == operation
        assert result.state == OperationState.SUCCEEDED

    async def test_poll_settles_in_flight_operation(self, instance: ServiceInstance) -> None:
        instance.last_operation = LastOperation.in_progress(OperationKind.DELETE)

        result = await LocalProvisioningBackend().poll(instance)

        assert result.operation == OperationKind.DELETE
        assert result.state == OperationState.SUCCEEDED


class TestHttpProvisioningBackend:
    """Tests for HttpProvisioningBackend HTTP client."""

    @pytest.fixture
    def config(self) -> ProvisionerConfig:
        return ProvisionerConfig(
            endpoint="http://provisioner:8000",
            api_key="test-api-key",
            timeout=30.0,
        )

    @pytest.fixture
    def backend(self, config: ProvisionerConfig) -> HttpProvisioningBackend:
        return HttpProvisioningBackend(config)

    @pytest.fixture
    def mock_response(self) -> MagicMock:
        response = MagicMock(spec=httpx.Response)
        response.status_code = 200
        response.json.return_value = {"state": "IN_PROGRESS", "description": "working."}
        response.raise_for_status = MagicMock()
        return response

    @pytest.fixture
    def mock_http_client(self, mock_response: MagicMock) -> AsyncMock:
        client = AsyncMock()
        for method in ("get", "put", "patch", "delete"):
            setattr(client, method, AsyncMock(return_value=mock_response))
        return client

    # =========================================================================
    # HTTP Client Tests
    # =========================================================================

    def test_always_async_only(self, backend: HttpProvisioningBackend) -> None:
        assert backend.is_async_only() is True

    def test_get_headers_with_api_key(self, backend: HttpProvisioningBackend) -> None:
        headers = backend._get_headers()

        assert headers["Authorization"] == "Bearer test-api-key"
        assert headers["Content-Type"] == "application/json"

    def test_get_headers_without_api_key(self) -> None:
        backend = HttpProvisioningBackend(ProvisionerConfig(endpoint="http://p:8000", api_key=""))

        assert "Authorization" not in backend._get_headers()

    async def test_close(self, backend: HttpProvisioningBackend) -> None:
        await backend._get_client()
        assert backend._client is not None

        await backend.close()
        assert backend._client is None

    # =========================================================================
    # ProvisioningBackend interface
    # =========================================================================

    async def test_create_sends_put(
        self,
        backend: HttpProvisioningBackend,
        mock_http_client: AsyncMock,
        instance: ServiceInstance,
    ) -> None:
        with patch.object(backend, "_get_client", return_value=mock_http_client):
            result = await backend.create(instance)

        mock_http_client.put.assert_awaited_once_with(
            "/v1/instances/si-1",
            json={
                "service_id": "svc-1",
                "plan_id": "plan-small",
                "parameters": {"size": 1, "tags": ["a", "b"]},
            },
        )
        assert result == LastOperation(
            operation=OperationKind.CREATE,
            state=OperationState.IN_PROGRESS,
            description="working.",
        )

    async def test_update_sends_patch(
        self,
        backend: HttpProvisioningBackend,
        mock_http_client: AsyncMock,
        instance: ServiceInstance,
    ) -> None:
        with patch.object(backend, "_get_client", return_value=mock_http_client):
            result = await backend.update(instance)

        mock_http_client.patch.assert_awaited_once()
        assert result.operation == OperationKind.UPDATE

    async def test_delete_sends_delete(
        self,
        backend: HttpProvisioningBackend,
        mock_http_client: AsyncMock,
        mock_response: MagicMock,
        instance: ServiceInstance,
    ) -> None:
        mock_response.json.return_value = {"state": "SUCCEEDED"}

        with patch.object(backend, "_get_client", return_value=mock_http_client):
            result = await backend.delete(instance)

        mock_http_client.delete.assert_awaited_once_with("/v1/instances/si-1")
        assert result.operation == OperationKind.DELETE
        assert result.state == OperationState.SUCCEEDED
        assert result.description is None

    async def test_poll_queries_current_operation(
        self,
        backend: HttpProvisioningBackend,
        mock_http_client: AsyncMock,
        mock_response: MagicMock,
        instance: ServiceInstance,
    ) -> None:
        instance.last_operation = LastOperation.in_progress(OperationKind.UPDATE)
        mock_response.json.return_value = {"state": "FAILED", "description": "quota."}

        with patch.object(backend, "_get_client", return_value=mock_http_client):
            result = await backend.poll(instance)

        mock_http_client.get.assert_awaited_once_with(
            "/v1/instances/si-1/last_operation",
            params={"operation": "UPDATE"},
        )
        assert result == LastOperation(
            operation=OperationKind.UPDATE,
            state=OperationState.FAILED,
            description="quota.",
        )

    async def test_error_status_raises(
        self,
        backend: HttpProvisioningBackend,
        mock_http_client: AsyncMock,
        mock_response: MagicMock,
        instance: ServiceInstance,
    ) -> None:
        mock_response.status_code = 500
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Server error", request=MagicMock(), response=mock_response
        )

        with patch.object(backend, "_get_client", return_value=mock_http_client):
            with pytest.raises(httpx.HTTPStatusError):
                await backend.create(instance)

    async def test_unknown_state_raises(
        self,
        backend: HttpProvisioningBackend,
        mock_http_client: AsyncMock,
        mock_response: MagicMock,
        instance: ServiceInstance,
    ) -> None:
        mock_response.json.return_value = {"state": "BOGUS"}

        with patch.object(backend, "_get_client", return_value=mock_http_client):
            with pytest.raises(ValueError):
                await backend.create(instance)
