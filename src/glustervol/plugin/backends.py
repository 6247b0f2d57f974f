"""Volume backends behind the VolumeDriver verbs."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from glustervol.config import GlusterCliConfig, VolumeConfig
from glustervol.core.errors import InvalidOptionError, VolumeNotFoundError
from glustervol.core.interfaces import VolumeBackend
from glustervol.core.models import (
    CreateVolumeRequest,
    ReplicateDurability,
    VolumeId,
    VolumeState,
)
from glustervol.gluster_cli import volume as gluster
from glustervol.heketi import HeketiClient
from glustervol.logging_schema import LogEvent
from glustervol.plugin.state import VolumeStateCache

logger = logging.getLogger(__name__)


class HeketiVolumeBackend(VolumeBackend):
    """Heketi-managed volumes addressed through the identifier cache."""

    def __init__(
        self,
        client: HeketiClient,
        cache: VolumeStateCache,
        defaults: VolumeConfig | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._defaults = defaults or VolumeConfig()

    async def create(
        self,
        name: str,
        size: int | None = None,
        replica: int | None = None,
        replicate: bool = False,
    ) -> VolumeId:
        """Create through Heketi.

        A replica count, or ``replicate`` alone, requests replicated
        durability; without a count Heketi picks its default. Otherwise
        the durability field is omitted.
        """
        replica = replica if replica is not None else self._defaults.replica
        replicate = replicate or self._defaults.replicate or replica is not None
        try:
            req = CreateVolumeRequest(
                size=size if size is not None else self._defaults.default_size,
                name=name,
                durability=ReplicateDurability(replica=replica) if replicate else None,
            )
        except ValidationError as e:
            raise InvalidOptionError(f"Invalid volume {name!r}: {e}") from e
        volume_id = await self._client.create_volume(req)
        await self._cache.insert(name, volume_id)
        return volume_id

    async def remove(self, name: str) -> None:
        volume_id = await self._cache.remove(name)
        if volume_id is None:
            raise VolumeNotFoundError(f"Volume {name} not found")
        await self._client.delete_volume(volume_id)

    async def get(self, name: str) -> VolumeState | None:
        return await self._cache.get(name)

    async def list_all(self) -> dict[str, VolumeState]:
        return await self._cache.list_all()

    async def close(self) -> None:
        await self._client.close()


class GlusterCliVolumeBackend(VolumeBackend):
    """Volumes created directly with the gluster CLI.

    One brick per configured brick root is created for every volume,
    at ``<root>/<volume name>``.
    """

    def __init__(self, config: GlusterCliConfig) -> None:
        self._config = config

    def _bricks(self, name: str) -> list[tuple[str, str]]:
        bricks = []
        for root in self._config.bricks:
            host, sep, path = root.partition(":")
            if not sep or not host or not path:
                raise InvalidOptionError(f"Invalid brick root {root!r}, expected host:/path")
            bricks.append((host, f"{path.rstrip('/')}/{name}"))
        return bricks

    async def create(
        self,
        name: str,
        size: int | None = None,
        replica: int | None = None,
        replicate: bool = False,
    ) -> VolumeId:
        """Create and start a replicated volume.

        Volumes are always replicated, so ``replicate`` adds nothing.
        """
        if size is not None:
            # gluster volumes take the size of their bricks
            raise InvalidOptionError("Option size is not supported by the gluster CLI backend")
        count = replica if replica is not None else self._config.replica
        if count < 1:
            raise InvalidOptionError(f"Replica count must be at least 1, got {count}")
        bricks = self._bricks(name)
        if not bricks:
            raise InvalidOptionError("No gluster bricks configured")
        volume_id = await gluster.create(
            name,
            count,
            bricks,
            force=self._config.force,
            binary=self._config.binary,
        )
        await gluster.start(name, binary=self._config.binary)
        logger.info(
            "Created volume via gluster CLI",
            extra={"event": LogEvent.VOLUME_CREATED, "volume": name, "volume_id": volume_id},
        )
        return volume_id

    async def remove(self, name: str) -> None:
        if await self.get(name) is None:
            raise VolumeNotFoundError(f"Volume {name} not found")
        await gluster.stop(name, binary=self._config.binary)
        await gluster.delete(name, binary=self._config.binary)
        logger.info(
            "Removed volume via gluster CLI",
            extra={"event": LogEvent.VOLUME_REMOVED, "volume": name},
        )

    async def get(self, name: str) -> VolumeState | None:
        return (await self.list_all()).get(name)

    async def list_all(self) -> dict[str, VolumeState]:
        volumes = await gluster.info(binary=self._config.binary)
        return {v.name: VolumeState(id=v.id) for v in volumes}
