"""Instance store implementations."""

from brokerhub.adapters.store.memory import InMemoryInstanceStore
from brokerhub.adapters.store.sql import SqlInstanceStore

__all__ = ["InMemoryInstanceStore", "SqlInstanceStore"]
