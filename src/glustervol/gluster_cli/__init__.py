"""gluster CLI backend support."""

from glustervol.gluster_cli.volume import GlusterVolume

__all__ = ["GlusterVolume"]
