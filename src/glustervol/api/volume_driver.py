"""Docker volume plugin endpoints.

Every verb is a POST to ``/<Interface>.<Method>``. Failures are raised
as PluginError and rendered as ``{"Err": ...}`` by the app's handlers.
"""

import logging

from fastapi import APIRouter, Depends

from glustervol.api.dependencies import get_backend
from glustervol.api.schemas import (
    ActivateResponse,
    Capabilities,
    CapabilitiesResponse,
    CreateRequest,
    Empty,
    GetResponse,
    ListResponse,
    NameRequest,
    Volume,
)
from glustervol.core.errors import (
    InvalidOptionError,
    NotImplementedVerbError,
    VolumeNotFoundError,
)
from glustervol.core.interfaces import VolumeBackend

logger = logging.getLogger(__name__)

router = APIRouter(tags=["volume-driver"])


def _int_option(opts: dict[str, str], key: str) -> int | None:
    value = opts.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise InvalidOptionError(f"Option {key} must be an integer, got {value!r}") from e


def _bool_option(opts: dict[str, str], key: str) -> bool:
    value = opts.get(key)
    if value is None:
        return False
    if value.lower() in ("true", "yes", "1"):
        return True
    if value.lower() in ("false", "no", "0"):
        return False
    raise InvalidOptionError(f"Option {key} must be true or false, got {value!r}")


@router.post("/Plugin.Activate", response_model=ActivateResponse)
async def activate() -> ActivateResponse:
    return ActivateResponse(implements=["VolumeDriver"])


@router.post("/VolumeDriver.Capabilities", response_model=CapabilitiesResponse)
async def capabilities() -> CapabilitiesResponse:
    return CapabilitiesResponse(capabilities=Capabilities(scope="global"))


@router.post("/VolumeDriver.Create", response_model=Empty)
async def create(
    req: CreateRequest,
    backend: VolumeBackend = Depends(get_backend),
) -> Empty:
    """Create a volume.

    Opts:
        size: Size in manager units. Heketi only; the gluster CLI backend
            rejects it since its volumes take the size of their bricks.
        replica: Replica count.
        replicate: ``true`` requests replication at the backend's default
            replica count.
    """
    opts = req.opts or {}
    await backend.create(
        req.name,
        size=_int_option(opts, "size"),
        replica=_int_option(opts, "replica"),
        replicate=_bool_option(opts, "replicate"),
    )
    return Empty()


@router.post("/VolumeDriver.Remove", response_model=Empty)
async def remove(
    req: NameRequest,
    backend: VolumeBackend = Depends(get_backend),
) -> Empty:
    await backend.remove(req.name)
    return Empty()


@router.post(
    "/VolumeDriver.Get", response_model=GetResponse, response_model_exclude_none=True
)
async def get(
    req: NameRequest,
    backend: VolumeBackend = Depends(get_backend),
) -> GetResponse:
    state = await backend.get(req.name)
    if state is None:
        raise VolumeNotFoundError(f"Volume {req.name} not found")
    return GetResponse(volume=Volume(name=req.name))


@router.post(
    "/VolumeDriver.List", response_model=ListResponse, response_model_exclude_none=True
)
async def list_volumes(
    backend: VolumeBackend = Depends(get_backend),
) -> ListResponse:
    states = await backend.list_all()
    volumes = [
        Volume(
            name=name,
            mountpoint=str(state.mount.path) if state.mount else None,
        )
        for name, state in states.items()
    ]
    return ListResponse(volumes=volumes)


@router.post("/VolumeDriver.Mount")
async def mount(req: NameRequest) -> None:
    raise NotImplementedVerbError("Mount is not implemented")


@router.post("/VolumeDriver.Unmount")
async def unmount(req: NameRequest) -> None:
    raise NotImplementedVerbError("Unmount is not implemented")


@router.post("/VolumeDriver.Path")
async def path(req: NameRequest) -> None:
    raise NotImplementedVerbError("Path is not implemented")
