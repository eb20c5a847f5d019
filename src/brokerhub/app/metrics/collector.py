"""Prometheus metrics definitions for the instance lifecycle."""

from prometheus_client import Counter, Histogram

# Remote provisioning calls (10ms ~ 60s), log scale
_BUCKETS_BACKEND = (
    0.01, 0.02, 0.05, 0.1, 0.2,
    0.5, 1, 2, 5, 10,
    30, 60,
)

# =============================================================================
# Lifecycle Operations
# =============================================================================

OPERATION_TOTAL = Counter(
    "brokerhub_operation_total",
    "Lifecycle operations by resulting last_operation state",
    ["operation", "state"],
)

OPERATION_REJECTED_TOTAL = Counter(
    "brokerhub_operation_rejected_total",
    "Lifecycle requests rejected before any backend call",
    ["operation", "code"],
)

# =============================================================================
# Provisioning Backend
# =============================================================================

BACKEND_ERRORS_TOTAL = Counter(
    "brokerhub_backend_errors_total",
    "Backend exceptions absorbed into FAILED last operations",
    ["operation"],
)

BACKEND_CALL_DURATION = Histogram(
    "brokerhub_backend_call_duration_seconds",
    "Provisioning backend call duration",
    ["operation"],
    buckets=_BUCKETS_BACKEND,
)
