"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t

import pytest

from beanstalk import Client, ClientConfig
from tests.helpers.fake_server import FakeBeanstalkd
from tests.helpers.live_server import BEANSTALK_TEST_HOST_ENV, live_server_address


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "live_server: needs a real beanstalkd reachable via BEANSTALK_TEST_HOST",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip live-server tests when no server is reachable."""
    if live_server_address() is not None:
        return
    skip = pytest.mark.skip(
        reason=f"set {BEANSTALK_TEST_HOST_ENV} to a running beanstalk server"
    )
    for item in items:
        if "live_server" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def fake_server() -> t.Iterator[FakeBeanstalkd]:
    """Start an in-process fake beanstalkd for the duration of a test."""
    with FakeBeanstalkd() as server:
        yield server


@pytest.fixture
def server_config(fake_server: FakeBeanstalkd) -> ClientConfig:
    """Client configuration pointing at :func:`fake_server`."""
    host, port = fake_server.address
    return ClientConfig(host=host, port=port, persistent=False)


@pytest.fixture
def connected_client(server_config: ClientConfig) -> t.Iterator[Client]:
    """A client connected to the fake server."""
    with Client(server_config) as client:
        yield client
