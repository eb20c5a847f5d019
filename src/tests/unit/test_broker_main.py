"""Tests for controller wiring."""

import pytest

from brokerhub.adapters.backend import HttpProvisioningBackend, LocalProvisioningBackend
from brokerhub.adapters.store import InMemoryInstanceStore, SqlInstanceStore
from brokerhub.app.config import (
    BrokerConfig,
    DatabaseConfig,
    MetricsConfig,
    ProvisionerConfig,
    Settings,
)
from brokerhub.app.main import build_instance_service, lifespan, shutdown
from brokerhub.core.domain import OperationKind, OperationState
from brokerhub.core.models import CreateInstanceRequest
from brokerhub.infra import database


def make_settings(**broker) -> Settings:
    return Settings(
        broker=BrokerConfig(**broker),
        provisioner=ProvisionerConfig(endpoint="http://provisioner:8000"),
        database=DatabaseConfig(url="sqlite+aiosqlite:///:memory:"),
        metrics=MetricsConfig(enabled=False),
    )


class TestBuildInstanceService:
    async def test_defaults_to_local_and_memory(self) -> None:
        service = await build_instance_service(make_settings())

        assert isinstance(service.backend, LocalProvisioningBackend)
        assert isinstance(service.store, InMemoryInstanceStore)
        assert service.backend.is_async_only() is False

    async def test_async_only_local_backend(self) -> None:
        service = await build_instance_service(make_settings(async_only=True))

        assert service.backend.is_async_only() is True

    async def test_http_backend(self) -> None:
        service = await build_instance_service(make_settings(backend="http"))

        assert isinstance(service.backend, HttpProvisioningBackend)
        assert service.backend.is_async_only() is True
        await shutdown(service)

    async def test_sql_store_initializes_database(self) -> None:
        service = await build_instance_service(make_settings(store="sql"))
        try:
            assert isinstance(service.store, SqlInstanceStore)
            assert database._engine is not None
        finally:
            await shutdown(service)

        assert database._engine is None


class TestLifespan:
    async def test_runs_end_to_end(self) -> None:
        request = CreateInstanceRequest(
            instance_id="si-1",
            service_id="svc-1",
            plan_id="plan-small",
            parameters={"size": 1},
        )

        async with lifespan(make_settings(store="sql")) as service:
            result = await service.create_instance(request)
            stored = await service.get_instance("si-1")

        assert result.operation == OperationKind.CREATE
        assert result.state == OperationState.SUCCEEDED
        assert result.is_async is False
        assert stored.parameters == {"size": 1}
        assert database._engine is None

    async def test_shutdown_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            async with lifespan(make_settings(store="sql")):
                raise RuntimeError("boom")

        assert database._engine is None
