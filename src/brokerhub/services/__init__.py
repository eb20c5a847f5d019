"""Services module."""

from brokerhub.services.instance_service import InstanceService

__all__ = ["InstanceService"]
