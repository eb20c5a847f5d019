"""Adapters module - backend and store implementations."""

from brokerhub.adapters.backend import HttpProvisioningBackend, LocalProvisioningBackend
from brokerhub.adapters.store import InMemoryInstanceStore, SqlInstanceStore

__all__ = [
    "HttpProvisioningBackend",
    "InMemoryInstanceStore",
    "LocalProvisioningBackend",
    "SqlInstanceStore",
]
