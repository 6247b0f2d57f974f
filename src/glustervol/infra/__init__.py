"""Local state infrastructure."""

from glustervol.infra.database import close_db, get_engine, init_db
from glustervol.infra.models import VolumeMountRecord

__all__ = [
    "VolumeMountRecord",
    "close_db",
    "get_engine",
    "init_db",
]
