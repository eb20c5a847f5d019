"""Service instance models.

Models are plain pydantic models; the SQL store maps them onto its own
table model in brokerhub.infra.models.
"""

from brokerhub.core.models.instance import (
    CreateInstanceRequest,
    DeleteInstanceRequest,
    InstanceOperationResponse,
    LastOperation,
    ServiceInstance,
    UpdateInstanceRequest,
    utc_now,
)

__all__ = [
    "CreateInstanceRequest",
    "DeleteInstanceRequest",
    "InstanceOperationResponse",
    "LastOperation",
    "ServiceInstance",
    "UpdateInstanceRequest",
    "utc_now",
]
