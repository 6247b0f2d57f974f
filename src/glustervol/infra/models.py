"""Database models for glustervol.

Models are defined using SQLModel (SQLAlchemy + Pydantic).

Note: volume_mounts is created at startup but nothing reads or writes
      it yet; Mount/Unmount are not implemented.
"""

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel


class VolumeMountRecord(SQLModel, table=True):
    """Mountpoint and reference count of a mounted volume."""

    __tablename__ = "volume_mounts"
    __table_args__ = (CheckConstraint("n > 0", name="ck_volume_mounts_n_positive"),)

    volume_id: str = Field(primary_key=True)
    mountpoint: str = Field(nullable=False)
    n: int = Field(nullable=False)
