"""Instance lifecycle controller.

Create/Update/Delete/Poll for service instances whose provisioning may finish
asynchronously. Each call: gate -> load -> invoke backend -> persist.

Two kinds of failure:
- Rejections (AsyncRequired, AlreadyExists, DoesNotExist, ConcurrentOperation)
  are raised before anything is written.
- Backend failures (FAILED results or exceptions) are recorded as a terminal
  FAILED last_operation and returned as a normal response.

The IN_PROGRESS state is the per-instance mutex. There is no queueing, retry
or timeout here; callers retry and poll.
"""

import logging
import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from uuid import uuid4

from brokerhub.app.logging import clear_trace_context, get_trace_id, set_trace_id
from brokerhub.app.metrics.collector import (
    BACKEND_CALL_DURATION,
    BACKEND_ERRORS_TOTAL,
    OPERATION_REJECTED_TOTAL,
    OPERATION_TOTAL,
)
from brokerhub.core.domain.instance import OperationKind, OperationState
from brokerhub.core.errors import (
    AsyncRequiredError,
    BackendError,
    BrokerError,
    ConcurrentOperationError,
    InstanceAlreadyExistsError,
    InstanceDoesNotExistError,
)
from brokerhub.core.interfaces import InstanceStore, ProvisioningBackend
from brokerhub.core.logging_schema import LogEvent
from brokerhub.core.models import (
    CreateInstanceRequest,
    DeleteInstanceRequest,
    InstanceOperationResponse,
    LastOperation,
    ServiceInstance,
    UpdateInstanceRequest,
    utc_now,
)

logger = logging.getLogger(__name__)

# Metric labels for calls that are not lifecycle operations
POLL = "POLL"
GET = "GET"


@contextmanager
def _trace_scope() -> Iterator[None]:
    """Stamp a trace_id for this call unless the caller already set one."""
    if get_trace_id() is not None:
        yield
        return
    set_trace_id(str(uuid4())[:8])
    try:
        yield
    finally:
        clear_trace_context()


class InstanceService:
    """Service instance lifecycle controller.

    Stateless between calls: every operation re-reads the record from the
    store and writes the full record back.
    """

    def __init__(
        self,
        backend: ProvisioningBackend,
        store: InstanceStore,
        *,
        record_metrics: bool = True,
    ) -> None:
        self._backend = backend
        self._store = store
        self._record_metrics = record_metrics

    @property
    def backend(self) -> ProvisioningBackend:
        return self._backend

    @property
    def store(self) -> InstanceStore:
        return self._store

    async def create_instance(self, request: CreateInstanceRequest) -> InstanceOperationResponse:
        """Create a service instance.

        A live record with the same id is a conflict, even when the parameters
        are identical. A soft-deleted record is replaced.

        Raises:
            AsyncRequiredError: Backend is async-only and caller is not
            InstanceAlreadyExistsError: A non-deleted record exists
        """
        kind = OperationKind.CREATE
        with _trace_scope():
            self._check_async(kind, request.accepts_incomplete)

            existing = await self._store.get(request.instance_id)
            if existing is not None and not existing.deleted:
                raise self._rejected(kind, InstanceAlreadyExistsError(request.instance_id))

            instance = ServiceInstance(
                id=request.instance_id,
                service_id=request.service_id,
                plan_id=request.plan_id,
                parameters=dict(request.parameters),
                last_operation=LastOperation.in_progress(kind),
            )
            # Visible before dispatch so duplicate creates see it
            await self._store.put(instance)
            self._log_started(instance)

            result = await self._invoke(kind, self._backend.create, instance)
            return await self._finish(instance, result)

    async def update_instance(self, request: UpdateInstanceRequest) -> InstanceOperationResponse:
        """Update plan and/or parameters of a live instance.

        A FAILED update leaves the instance in place (deleted stays False).

        Raises:
            AsyncRequiredError: Backend is async-only and caller is not
            InstanceDoesNotExistError: Record absent or soft-deleted
            ConcurrentOperationError: Previous operation still IN_PROGRESS
        """
        kind = OperationKind.UPDATE
        with _trace_scope():
            self._check_async(kind, request.accepts_incomplete)
            instance = await self._load_mutable(kind, request.instance_id)

            if request.plan_id is not None:
                instance.plan_id = request.plan_id
            if request.parameters:
                instance.parameters = {**instance.parameters, **request.parameters}
            instance.last_operation = LastOperation.in_progress(kind)
            instance.updated_at = utc_now()
            # IN_PROGRESS is visible before dispatch
            await self._store.put(instance)
            self._log_started(instance)

            result = await self._invoke(kind, self._backend.update, instance)
            return await self._finish(instance, result)

    async def delete_instance(self, request: DeleteInstanceRequest) -> InstanceOperationResponse:
        """Delete a live instance.

        SUCCEEDED soft-deletes immediately, IN_PROGRESS waits for a poll, and
        FAILED leaves the instance usable.

        Raises:
            AsyncRequiredError: Backend is async-only and caller is not
            InstanceDoesNotExistError: Record absent or already soft-deleted
            ConcurrentOperationError: Previous operation still IN_PROGRESS
        """
        kind = OperationKind.DELETE
        with _trace_scope():
            self._check_async(kind, request.accepts_incomplete)
            instance = await self._load_mutable(kind, request.instance_id)

            instance.last_operation = LastOperation.in_progress(kind)
            instance.updated_at = utc_now()
            # IN_PROGRESS is visible before dispatch
            await self._store.put(instance)
            self._log_started(instance)

            result = await self._invoke(kind, self._backend.delete, instance)
            return await self._finish(instance, result)

    async def last_operation(self, instance_id: str) -> LastOperation:
        """Return the last operation, polling the backend while IN_PROGRESS.

        Settled operations are returned as stored without touching the
        backend. Soft-deleted records are still reported.

        Raises:
            InstanceDoesNotExistError: No record with this id
        """
        with _trace_scope():
            instance = await self._store.get(instance_id)
            if instance is None:
                raise self._rejected(POLL, InstanceDoesNotExistError(instance_id))

            current = instance.last_operation
            if current.is_terminal:
                return current

            result = await self._invoke(
                current.operation, self._backend.poll, instance, label=POLL
            )
            if not result.is_terminal:
                logger.debug(
                    "Operation still in progress",
                    extra={"instance_id": instance_id, "operation": current.operation.value},
                )
                return current

            await self._finish(instance, result)
            return instance.last_operation

    async def get_instance(self, instance_id: str) -> ServiceInstance:
        """Return a live instance record.

        Raises:
            InstanceDoesNotExistError: Record absent or soft-deleted
        """
        with _trace_scope():
            instance = await self._store.get(instance_id)
            if instance is None or instance.deleted:
                raise self._rejected(GET, InstanceDoesNotExistError(instance_id))
            return instance

    # =========================================================================
    # Internals
    # =========================================================================

    def _check_async(self, kind: OperationKind, accepts_incomplete: bool) -> None:
        if self._backend.is_async_only() and not accepts_incomplete:
            raise self._rejected(kind, AsyncRequiredError())

    async def _load_mutable(self, kind: OperationKind, instance_id: str) -> ServiceInstance:
        instance = await self._store.get(instance_id)
        if instance is None or instance.deleted:
            raise self._rejected(kind, InstanceDoesNotExistError(instance_id))
        if instance.last_operation.state == OperationState.IN_PROGRESS:
            raise self._rejected(kind, ConcurrentOperationError(instance_id))
        return instance

    def _rejected(self, operation: str, exc: BrokerError) -> BrokerError:
        if self._record_metrics:
            OPERATION_REJECTED_TOTAL.labels(operation=operation, code=exc.code.value).inc()
        logger.info(
            "Request rejected: %s",
            exc.message,
            extra={
                "event": LogEvent.OPERATION_REJECTED,
                "operation": operation,
                "error_code": exc.code.value,
            },
        )
        return exc

    async def _invoke(
        self,
        kind: OperationKind,
        call: Callable[[ServiceInstance], Awaitable[LastOperation]],
        instance: ServiceInstance,
        label: str | None = None,
    ) -> LastOperation:
        """Call the backend; any exception becomes a FAILED result."""
        label = label or kind.value
        start = time.monotonic()
        try:
            # Backend gets a copy; only its return value is trusted
            result = await call(instance.model_copy(deep=True))
            if not isinstance(result, LastOperation):
                raise BackendError(f"Backend returned {type(result).__name__}, expected LastOperation")
        except Exception as exc:
            err = BackendError.wrap(exc)
            if self._record_metrics:
                BACKEND_ERRORS_TOTAL.labels(operation=label).inc()
            logger.warning(
                "Backend raised during %s",
                label,
                exc_info=True,
                extra={
                    "event": LogEvent.BACKEND_ERROR,
                    "instance_id": instance.id,
                    "operation": kind.value,
                    "error_type": type(exc).__name__,
                },
            )
            return LastOperation.failed(kind, err.message)
        finally:
            if self._record_metrics:
                BACKEND_CALL_DURATION.labels(operation=label).observe(time.monotonic() - start)

        if result.operation != kind:
            result = result.model_copy(update={"operation": kind})
        return result

    async def _finish(
        self, instance: ServiceInstance, result: LastOperation
    ) -> InstanceOperationResponse:
        """Record the outcome, apply retirement rules, persist."""
        previous = instance.last_operation
        instance.last_operation = result
        instance.updated_at = utc_now()

        if result.operation == OperationKind.CREATE and result.state == OperationState.FAILED:
            instance.deleted = True
        elif result.operation == OperationKind.DELETE and result.state == OperationState.SUCCEEDED:
            instance.deleted = True

        await self._store.put(instance)

        if self._record_metrics:
            OPERATION_TOTAL.labels(operation=result.operation.value, state=result.state.value).inc()
        self._log_outcome(instance, previous)
        return InstanceOperationResponse.from_instance(instance)

    def _log_started(self, instance: ServiceInstance) -> None:
        logger.info(
            "%s started",
            instance.last_operation.operation.value,
            extra={
                "event": LogEvent.OPERATION_STARTED,
                "instance_id": instance.id,
                "operation": instance.last_operation.operation.value,
            },
        )

    def _log_outcome(self, instance: ServiceInstance, previous: LastOperation) -> None:
        last = instance.last_operation
        extra = {
            "instance_id": instance.id,
            "operation": last.operation.value,
            "state": last.state.value,
            "previous_state": previous.state.value,
            "deleted": instance.deleted,
            "description": last.description,
        }
        if last.state == OperationState.FAILED:
            logger.warning("%s failed", last.operation.value, extra={"event": LogEvent.OPERATION_FAILED, **extra})
        elif last.state == OperationState.IN_PROGRESS:
            logger.info("%s accepted", last.operation.value, extra={"event": LogEvent.OPERATION_ACCEPTED, **extra})
        else:
            logger.info("%s succeeded", last.operation.value, extra={"event": LogEvent.OPERATION_SUCCESS, **extra})

        if instance.deleted:
            logger.info(
                "Instance retired",
                extra={"event": LogEvent.INSTANCE_RETIRED, "instance_id": instance.id},
            )
