"""Tests for backend singleton management."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from glustervol.api import dependencies
from glustervol.config import GlusterCliConfig, HeketiConfig, PluginConfig
from glustervol.core.errors import TransportError
from glustervol.main import remove_socket
from glustervol.plugin import GlusterCliVolumeBackend, HeketiVolumeBackend


@pytest.fixture(autouse=True)
def _reset():
    dependencies.reset_backend()
    yield
    dependencies.reset_backend()


def _config(backend: str) -> PluginConfig:
    return PluginConfig(
        backend=backend,
        heketi=HeketiConfig(url="http://heketi:8080", secret="s3cret"),
        gluster=GlusterCliConfig(bricks=["n1:/bricks"]),
    )


class TestBuildBackend:
    def test_heketi(self) -> None:
        assert isinstance(dependencies.build_backend(_config("heketi")), HeketiVolumeBackend)

    def test_gluster_cli(self) -> None:
        backend = dependencies.build_backend(_config("gluster_cli"))
        assert isinstance(backend, GlusterCliVolumeBackend)


class TestBackendLifecycle:
    """init_backend / get_backend / close_backend."""

    def test_get_before_init(self) -> None:
        with pytest.raises(RuntimeError):
            dependencies.get_backend()

    async def test_init_loads_heketi_cache(self) -> None:
        with patch.object(
            HeketiVolumeBackend, "list_all", AsyncMock(return_value={})
        ) as mock_list:
            await dependencies.init_backend(_config("heketi"))

        mock_list.assert_awaited_once()
        assert isinstance(dependencies.get_backend(), HeketiVolumeBackend)
        await dependencies.close_backend()

        with pytest.raises(RuntimeError):
            dependencies.get_backend()

    async def test_init_failure_closes_client(self) -> None:
        with (
            patch.object(
                HeketiVolumeBackend,
                "list_all",
                AsyncMock(side_effect=TransportError("connection refused")),
            ),
            patch.object(HeketiVolumeBackend, "close", AsyncMock()) as mock_close,
        ):
            with pytest.raises(TransportError):
                await dependencies.init_backend(_config("heketi"))

        mock_close.assert_awaited_once()
        with pytest.raises(RuntimeError):
            dependencies.get_backend()

    async def test_init_gluster_cli_without_io(self) -> None:
        with patch("glustervol.gluster_cli.volume.info", AsyncMock()) as mock_info:
            await dependencies.init_backend(_config("gluster_cli"))

        mock_info.assert_not_awaited()
        assert isinstance(dependencies.get_backend(), GlusterCliVolumeBackend)


class TestRemoveSocket:
    def test_removes_file(self, tmp_path: Path) -> None:
        sock = tmp_path / "glusterfs.sock"
        sock.touch()

        remove_socket(str(sock))

        assert not sock.exists()

    def test_missing_file(self, tmp_path: Path) -> None:
        remove_socket(str(tmp_path / "missing.sock"))
