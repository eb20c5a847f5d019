"""Fixtures for adapter unit tests."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from brokerhub.adapters.store import SqlInstanceStore
from brokerhub.app.config import DatabaseConfig
from brokerhub.core.domain import OperationKind, OperationState
from brokerhub.core.models import LastOperation, ServiceInstance
from brokerhub.infra.database import close_db, get_session_factory, init_db


@pytest.fixture
def instance() -> ServiceInstance:
    """Live instance with a settled create."""
    return ServiceInstance(
        id="si-1",
        service_id="svc-1",
        plan_id="plan-small",
        parameters={"size": 1, "tags": ["a", "b"]},
        last_operation=LastOperation(
            operation=OperationKind.CREATE,
            state=OperationState.SUCCEEDED,
            description="created.",
        ),
    )


@pytest_asyncio.fixture
async def sql_store() -> AsyncIterator[SqlInstanceStore]:
    """SqlInstanceStore on an in-memory SQLite database."""
    await init_db(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    yield SqlInstanceStore(get_session_factory())
    await close_db()
