"""Core interfaces for the instance lifecycle."""

from brokerhub.core.interfaces.backend import ProvisioningBackend
from brokerhub.core.interfaces.store import InstanceStore

__all__ = [
    "InstanceStore",
    "ProvisioningBackend",
]
