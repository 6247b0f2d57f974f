"""Fixtures for glustervol unit tests."""

from collections.abc import Callable

import pytest

from fakes import TEST_SECRET, TEST_URL, FakeHeketi
from glustervol.config import HeketiConfig
from glustervol.heketi import HeketiClient


@pytest.fixture
def heketi_config() -> HeketiConfig:
    """Heketi config with no wait between polls."""
    return HeketiConfig(
        url=TEST_URL,
        user="admin",
        secret=TEST_SECRET,
        poll_interval=0.0,
        max_polls=5,
    )


@pytest.fixture
def fake_heketi() -> FakeHeketi:
    return FakeHeketi()


@pytest.fixture
def make_client(
    heketi_config: HeketiConfig, fake_heketi: FakeHeketi
) -> Callable[[], HeketiClient]:
    """Factory for HeketiClient wired to the fake server."""

    def _make() -> HeketiClient:
        return HeketiClient(heketi_config, transport=fake_heketi.transport)

    return _make
