"""Shared fixtures for the themeupdater test suite."""

from __future__ import annotations

import pytest

from tests.fakes import INDEX_BASE, FakeClock, FakeIndex
from themeupdater.cache import InMemoryCacheStore
from themeupdater.config import UpdaterConfig
from themeupdater.index_client import RemoteIndexClient


@pytest.fixture
def fake_index() -> FakeIndex:
    return FakeIndex()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def config() -> UpdaterConfig:
    return UpdaterConfig(index_base_url=INDEX_BASE)


@pytest.fixture
def index_client(config: UpdaterConfig, cache: InMemoryCacheStore, fake_index: FakeIndex) -> RemoteIndexClient:
    return RemoteIndexClient(config, cache, transport=fake_index.transport)
