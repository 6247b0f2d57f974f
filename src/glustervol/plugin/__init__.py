"""Volume backends and the identifier cache."""

from glustervol.plugin.backends import GlusterCliVolumeBackend, HeketiVolumeBackend
from glustervol.plugin.state import VolumeStateCache

__all__ = [
    "GlusterCliVolumeBackend",
    "HeketiVolumeBackend",
    "VolumeStateCache",
]
