"""Controller wiring.

Builds an InstanceService from settings. Transport layers (HTTP routing,
auth) are expected to wrap the service; none is provided here.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from brokerhub.adapters.backend import HttpProvisioningBackend, LocalProvisioningBackend
from brokerhub.adapters.store import InMemoryInstanceStore, SqlInstanceStore
from brokerhub.app.config import Settings, get_settings
from brokerhub.app.logging import setup_logging
from brokerhub.core.interfaces import InstanceStore, ProvisioningBackend
from brokerhub.core.logging_schema import LogEvent
from brokerhub.infra.database import close_db, get_session_factory, init_db
from brokerhub.services import InstanceService

logger = logging.getLogger(__name__)


def _build_backend(settings: Settings) -> ProvisioningBackend:
    if settings.broker.backend == "http":
        return HttpProvisioningBackend(settings.provisioner)
    return LocalProvisioningBackend(async_only=settings.broker.async_only)


async def _build_store(settings: Settings) -> InstanceStore:
    if settings.broker.store == "sql":
        await init_db(settings.database)
        return SqlInstanceStore(get_session_factory())
    return InMemoryInstanceStore()


async def build_instance_service(settings: Settings | None = None) -> InstanceService:
    """Assemble backend + store + controller from settings."""
    settings = settings or get_settings()
    service = InstanceService(
        _build_backend(settings),
        await _build_store(settings),
        record_metrics=settings.metrics.enabled,
    )
    logger.info(
        "Instance service ready",
        extra={
            "event": LogEvent.APP_STARTED,
            "backend": settings.broker.backend,
            "store": settings.broker.store,
            "async_only": service.backend.is_async_only(),
        },
    )
    return service


async def shutdown(service: InstanceService) -> None:
    """Release backend connections and the database engine."""
    if isinstance(service.backend, HttpProvisioningBackend):
        await service.backend.close()
    if isinstance(service.store, SqlInstanceStore):
        await close_db()
    logger.info("Instance service stopped", extra={"event": LogEvent.APP_STOPPED})


@asynccontextmanager
async def lifespan(settings: Settings | None = None) -> AsyncIterator[InstanceService]:
    setup_logging()
    service = await build_instance_service(settings)
    try:
        yield service
    finally:
        await shutdown(service)
