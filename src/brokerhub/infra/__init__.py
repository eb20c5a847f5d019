"""Infrastructure connections (DB)."""

from brokerhub.infra.database import close_db, get_session_factory, init_db
from brokerhub.infra.models import ServiceInstanceRow

__all__ = [
    "init_db",
    "close_db",
    "get_session_factory",
    "ServiceInstanceRow",
]
