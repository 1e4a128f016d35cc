"""Shared fixtures: network factories, fake sources and a fresh default cache."""

import threading
import time

import pytest

from netresolver import api
from netresolver.config import Settings
from netresolver.exceptions import RegistryLoadError
from netresolver.models.schema import FirehoseInfo, FirstStreamableBlock, Network, Services


@pytest.fixture
def make_network():
    def _make(
        network_id,
        aliases=(),
        full_name="",
        short_name="",
        substreams=(),
        firehose=(),
        block=None,
    ):
        firehose_info = None
        if block is not None:
            height, block_id = block
            firehose_info = FirehoseInfo(first_streamable_block=FirstStreamableBlock(id=block_id, height=height))
        return Network(
            id=network_id,
            aliases=tuple(aliases),
            full_name=full_name,
            short_name=short_name,
            services=Services(substreams=tuple(substreams), firehose=tuple(firehose)),
            firehose=firehose_info,
        )

    return _make


@pytest.fixture
def mainnet(make_network):
    return make_network(
        "mainnet",
        aliases=["eth", "ethereum"],
        full_name="Ethereum Mainnet",
        short_name="ETH",
        substreams=["a.example:443", "mainnet.eth.streamingfast.io:443"],
        block=(0, "0xd4e56740f876aef8c010b86a40d5f56745a118d0906a34e69aec8c0db1cb8fa3"),
    )


class FakeSource:
    """Callable registry source that fails a configurable number of times."""

    def __init__(self, networks=(), failures=0, always_fail=False):
        self.networks = list(networks)
        self.failures = failures
        self.always_fail = always_fail
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
            if self.always_fail or self.calls <= self.failures:
                raise RegistryLoadError("fake", f"attempt {self.calls} failed")
            return list(self.networks)


@pytest.fixture
def fake_source():
    return FakeSource


@pytest.fixture
def fast_settings():
    return Settings(repair_initial_delay=0.01, repair_max_delay=0.05)


@pytest.fixture
def wait_until():
    def _wait(predicate, timeout=3.0, interval=0.01):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return _wait


@pytest.fixture
def install_cache():
    """Install a cache as the api default for one test, then restore and close it."""
    installed = []

    def _install(cache):
        installed.append((cache, api.set_cache(cache)))
        return cache

    yield _install

    for cache, previous in reversed(installed):
        cache.close(timeout=2.0)
        api.set_cache(previous)
