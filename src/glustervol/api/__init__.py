"""Docker volume plugin protocol API."""

from glustervol.api.volume_driver import router as volume_driver_router

__all__ = ["volume_driver_router"]
