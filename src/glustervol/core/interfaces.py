"""Volume backend interface for the VolumeDriver verbs."""

from abc import ABC, abstractmethod

from glustervol.core.models import VolumeId, VolumeState


class VolumeBackend(ABC):
    """Interface for volume lifecycle operations addressed by name.

    Implementations:
    - HeketiVolumeBackend: Heketi REST manager + identifier cache
    - GlusterCliVolumeBackend: gluster command line tool
    """

    @abstractmethod
    async def create(
        self,
        name: str,
        size: int | None = None,
        replica: int | None = None,
        replicate: bool = False,
    ) -> VolumeId:
        """Create a volume.

        Args:
            name: Volume name
            size: Size in the backend's unit, backend default when None
            replica: Replica count, backend default when None
            replicate: Request replication even without a replica count

        Raises:
            InvalidOptionError: If an option is out of range for the backend

        Returns:
            Identifier assigned by the storage system
        """
        ...

    @abstractmethod
    async def remove(self, name: str) -> None:
        """Remove a volume.

        Raises:
            VolumeNotFoundError: If no volume has this name
        """
        ...

    @abstractmethod
    async def get(self, name: str) -> VolumeState | None:
        """Get volume state by name, None if unknown."""
        ...

    @abstractmethod
    async def list_all(self) -> dict[str, VolumeState]:
        """List all volumes keyed by name."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
