"""Provisioning backend implementations."""

from brokerhub.adapters.backend.http import HttpProvisioningBackend
from brokerhub.adapters.backend.local import LocalProvisioningBackend

__all__ = ["HttpProvisioningBackend", "LocalProvisioningBackend"]
