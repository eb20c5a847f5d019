"""Logging field schema - v1.0

Standard fields (added to all logs):
- schema_version: Log schema version
- service: Service name (brokerhub)
- event: Event type (operation_accepted, operation_failed, etc.)
- trace_id: Trace ID for one controller call

High cardinality fields (OK in logs, NOT in metric labels):
- instance_id: Service instance ID
"""

from enum import StrEnum


class LogEvent(StrEnum):
    """Standard log event types.

    Use these event types in the 'event' extra field for consistent
    log filtering and analysis.
    """

    # Controller events
    OPERATION_REJECTED = "operation_rejected"
    OPERATION_STARTED = "operation_started"
    OPERATION_ACCEPTED = "operation_accepted"
    OPERATION_SUCCESS = "operation_success"
    OPERATION_FAILED = "operation_failed"
    BACKEND_ERROR = "backend_error"
    INSTANCE_RETIRED = "instance_retired"

    # Lifecycle events
    APP_STARTED = "app_started"
    APP_STOPPED = "app_stopped"

    # Store events
    DB_CONNECTED = "db_connected"
    DB_ERROR = "db_error"
