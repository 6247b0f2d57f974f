"""Docker volume plugin protocol payloads.

The container runtime uses PascalCase keys on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class PluginModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class Empty(PluginModel):
    """``{}`` request or response."""


class CreateRequest(PluginModel):
    name: str
    opts: dict[str, str] | None = None


class NameRequest(PluginModel):
    """Body of Remove, Get, Mount, Unmount and Path."""

    name: str
    id: str | None = Field(default=None, alias="ID")


class Volume(PluginModel):
    name: str
    mountpoint: str | None = None
    status: dict | None = None


class GetResponse(PluginModel):
    volume: Volume


class ListResponse(PluginModel):
    volumes: list[Volume]


class ActivateResponse(PluginModel):
    implements: list[str]


class Capabilities(PluginModel):
    scope: str


class CapabilitiesResponse(PluginModel):
    capabilities: Capabilities
