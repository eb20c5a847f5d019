"""Prometheus metrics."""

from brokerhub.app.metrics.collector import (
    BACKEND_CALL_DURATION,
    BACKEND_ERRORS_TOTAL,
    OPERATION_REJECTED_TOTAL,
    OPERATION_TOTAL,
)

__all__ = [
    "BACKEND_CALL_DURATION",
    "BACKEND_ERRORS_TOTAL",
    "OPERATION_REJECTED_TOTAL",
    "OPERATION_TOTAL",
]
