"""Fixtures for InstanceService unit tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from brokerhub.adapters.store import InMemoryInstanceStore
from brokerhub.core.interfaces import ProvisioningBackend
from brokerhub.services import InstanceService


@pytest.fixture
def store() -> InMemoryInstanceStore:
    return InMemoryInstanceStore()


@pytest.fixture
def mock_backend() -> AsyncMock:
    """Async-only ProvisioningBackend mock."""
    backend = AsyncMock(spec=ProvisioningBackend)
    backend.is_async_only = MagicMock(return_value=True)
    backend.create = AsyncMock()
    backend.update = AsyncMock()
    backend.delete = AsyncMock()
    backend.poll = AsyncMock()
    return backend


@pytest.fixture
def service(mock_backend: AsyncMock, store: InMemoryInstanceStore) -> InstanceService:
    return InstanceService(mock_backend, store)
