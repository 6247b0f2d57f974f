"""Volume data model shared by the backends and the dispatcher."""

from pathlib import Path
from typing import Annotated, Literal, NewType

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

VolumeId = NewType("VolumeId", str)


class NoDurability(BaseModel):
    """No replication."""

    type: Literal["none"] = "none"

    model_config = {"frozen": True}


class ReplicateDurability(BaseModel):
    """Replicated volume; replica count defers to the manager when unset."""

    type: Literal["replicate"] = "replicate"
    replica: PositiveInt | None = None

    model_config = {"frozen": True}


Durability = Annotated[
    NoDurability | ReplicateDurability, Field(discriminator="type")
]


class CreateVolumeRequest(BaseModel):
    """Body of POST /volumes."""

    size: PositiveInt
    name: str = Field(min_length=1)
    durability: Durability | None = None

    model_config = {"frozen": True}

    def to_api(self) -> dict:
        """Convert to the manager's JSON format."""
        return self.model_dump(exclude_none=True)


class RemoteVolume(BaseModel):
    """Volume as reported by the remote manager."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: VolumeId
    name: str


class VolumeMount(BaseModel):
    """Mountpoint of a volume and how many containers hold it."""

    path: Path
    count: PositiveInt


class VolumeState(BaseModel):
    """Locally known state of a named volume."""

    id: VolumeId
    mount: VolumeMount | None = None
