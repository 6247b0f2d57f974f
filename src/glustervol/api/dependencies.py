"""API dependencies for dependency injection."""

import logging

from glustervol.config import PluginConfig
from glustervol.core.interfaces import VolumeBackend
from glustervol.heketi import HeketiClient
from glustervol.plugin import GlusterCliVolumeBackend, HeketiVolumeBackend, VolumeStateCache

logger = logging.getLogger(__name__)

# Singleton backend instance
_backend: VolumeBackend | None = None


def build_backend(config: PluginConfig) -> VolumeBackend:
    """Create the configured backend without touching the network."""
    if config.backend == "gluster_cli":
        return GlusterCliVolumeBackend(config.gluster)
    client = HeketiClient(config.heketi)
    return HeketiVolumeBackend(client, VolumeStateCache(client), config.volume)


async def init_backend(config: PluginConfig) -> None:
    """Initialize backend singleton.

    The Heketi backend loads its name cache once here, so startup fails
    when the manager is unreachable or the secret is wrong.
    Must be called during app startup.
    """
    global _backend
    backend = build_backend(config)
    if isinstance(backend, HeketiVolumeBackend):
        try:
            await backend.list_all()
        except Exception:
            await backend.close()
            raise
    _backend = backend
    logger.info("Volume backend ready: %s", config.backend)


async def close_backend() -> None:
    """Close backend and release resources."""
    global _backend
    if _backend:
        await _backend.close()
        _backend = None


def get_backend() -> VolumeBackend:
    """Get backend singleton.

    Raises:
        RuntimeError: If called before init_backend().
    """
    if _backend is None:
        raise RuntimeError("Backend not initialized. Call init_backend() first.")
    return _backend


def reset_backend() -> None:
    """Reset backend singleton (for testing)."""
    global _backend
    _backend = None
