"""Heketi REST client.

Volume lifecycle against the Heketi manager:
- create_volume / delete_volume go through the async operation protocol
- list_volumes / get_volume are direct signed GETs

The client holds no state besides configuration and a shared HTTP
connection pool, so one instance serves all concurrent handlers.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from glustervol.config import HeketiConfig
from glustervol.core.errors import (
    MalformedResponseError,
    RemoteNotFoundError,
    RemoteRequestError,
    TransportError,
)
from glustervol.core.models import CreateVolumeRequest, RemoteVolume, VolumeId
from glustervol.heketi.poller import AsyncOperationPoller
from glustervol.heketi.signer import RequestSigner
from glustervol.logging_schema import LogEvent

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _CreatedVolume(BaseModel):
    id: VolumeId


class _VolumeList(BaseModel):
    volumes: list[VolumeId]


def _decode(resp: httpx.Response, model: type[M]) -> M:
    try:
        return model.model_validate_json(resp.content)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Unexpected payload from {resp.request.url.path}: {e}"
        ) from e


def _raise_for_status(resp: httpx.Response) -> None:
    if resp.is_success:
        return
    if resp.status_code == httpx.codes.NOT_FOUND:
        raise RemoteNotFoundError(resp.status_code, resp.text)
    raise RemoteRequestError(resp.status_code, resp.text)


class HeketiClient:
    """HTTP client for the Heketi volume API."""

    def __init__(
        self,
        config: HeketiConfig,
        signer: RequestSigner | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._signer = signer or RequestSigner(
            config.secret, issuer=config.user, ttl=config.token_ttl
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._config.url,
                timeout=self._config.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _send(
        self, method: str, endpoint: str, *, json: Any = None
    ) -> httpx.Response:
        """Sign and send one request.

        The token is built here, right before the request leaves, so its
        expiry window starts at transmission.
        """
        client = await self._get_client()
        headers = self._signer.headers(method, endpoint)
        try:
            return await client.request(method, endpoint, headers=headers, json=json)
        except httpx.TransportError as e:
            raise TransportError(f"{method} {endpoint}: {e}") from e

    async def _get(self, endpoint: str, model: type[M]) -> M:
        resp = await self._send("GET", endpoint)
        _raise_for_status(resp)
        return _decode(resp, model)

    def _poller(self) -> AsyncOperationPoller:
        return AsyncOperationPoller(
            self._send,
            interval=self._config.poll_interval,
            max_polls=self._config.max_polls,
        )

    # =========================================================================
    # Volume API
    # =========================================================================

    async def create_volume(self, req: CreateVolumeRequest) -> VolumeId:
        """Create a volume and wait until Heketi reports it."""
        resp = await self._poller().run("POST", "/volumes", json=req.to_api())
        volume = _decode(resp, _CreatedVolume)
        logger.info(
            "Created volume via Heketi",
            extra={
                "event": LogEvent.VOLUME_CREATED,
                "volume": req.name,
                "volume_id": volume.id,
            },
        )
        return volume.id

    async def list_volumes(self) -> list[VolumeId]:
        """List identifiers of all volumes known to Heketi."""
        return (await self._get("/volumes", _VolumeList)).volumes

    async def get_volume(self, volume_id: VolumeId) -> RemoteVolume:
        """Get one volume by identifier."""
        return await self._get(f"/volumes/{volume_id}", RemoteVolume)

    async def delete_volume(self, volume_id: VolumeId) -> None:
        """Delete a volume and wait until Heketi finishes."""
        await self._poller().run("DELETE", f"/volumes/{volume_id}")
        logger.info(
            "Deleted volume via Heketi",
            extra={"event": LogEvent.VOLUME_REMOVED, "volume_id": volume_id},
        )
