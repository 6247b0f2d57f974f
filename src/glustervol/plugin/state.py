"""Volume name to Heketi identifier cache.

Heketi addresses volumes by identifier only, while the container
runtime addresses them by name. This cache keeps the name mapping and
resynchronizes it from Heketi whenever a name is not found locally.

A refresh rebuilds the whole mapping from ``list_volumes`` and swaps it
in under the lock, so readers never see a partial mapping. Concurrent
refreshes are not coalesced; the last swap wins.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from glustervol.core.models import VolumeId, VolumeState
from glustervol.logging_schema import LogEvent

if TYPE_CHECKING:
    from glustervol.heketi import HeketiClient

logger = logging.getLogger(__name__)


class VolumeStateCache:
    """Lazily refreshed name -> VolumeId mapping."""

    def __init__(self, client: HeketiClient) -> None:
        self._client = client
        self._volume_ids: dict[str, VolumeId] = {}
        self._lock = asyncio.Lock()

    async def refresh(self) -> None:
        """Replace the mapping with Heketi's current volume set.

        The previous mapping stays in place if any call fails.
        """
        ids = await self._client.list_volumes()
        volumes = await asyncio.gather(*(self._client.get_volume(i) for i in ids))
        volume_ids = {v.name: v.id for v in volumes}
        async with self._lock:
            self._volume_ids = volume_ids
        logger.debug(
            "Volume cache refreshed",
            extra={"event": LogEvent.CACHE_REFRESHED, "volume_count": len(volume_ids)},
        )

    async def lookup(self, name: str) -> VolumeId | None:
        """Get the identifier for a name, refreshing once on a miss."""
        async with self._lock:
            volume_id = self._volume_ids.get(name)
        if volume_id is not None:
            return volume_id

        self._log_miss(name)
        await self.refresh()
        async with self._lock:
            return self._volume_ids.get(name)

    async def get(self, name: str) -> VolumeState | None:
        volume_id = await self.lookup(name)
        if volume_id is None:
            return None
        return VolumeState(id=volume_id)

    async def insert(self, name: str, volume_id: VolumeId) -> None:
        """Record a mapping without asking Heketi (used right after create)."""
        async with self._lock:
            self._volume_ids[name] = volume_id

    async def remove(self, name: str) -> VolumeId | None:
        """Pop the identifier for a name, refreshing once on a miss."""
        async with self._lock:
            volume_id = self._volume_ids.pop(name, None)
        if volume_id is not None:
            return volume_id

        self._log_miss(name)
        await self.refresh()
        async with self._lock:
            return self._volume_ids.pop(name, None)

    async def list_all(self) -> dict[str, VolumeState]:
        """Refresh, then return every known volume."""
        await self.refresh()
        async with self._lock:
            return {
                name: VolumeState(id=volume_id)
                for name, volume_id in self._volume_ids.items()
            }

    async def snapshot(self) -> dict[str, VolumeId]:
        """Copy of the current mapping, without refreshing."""
        async with self._lock:
            return dict(self._volume_ids)

    @staticmethod
    def _log_miss(name: str) -> None:
        logger.debug(
            "Volume not cached, refreshing from Heketi",
            extra={"event": LogEvent.CACHE_MISS, "volume": name},
        )
