"""Module-level query API bound to one default RegistryCache.

Hosts that need their own sources or settings build a RegistryCache and
install it with `set_cache` before the first query.
"""

from __future__ import annotations

import threading
from datetime import timedelta

from netresolver.models.schema import Network
from netresolver.registry.cache import RegistryCache
from netresolver.registry.endpoints import preferred_endpoint as _select_endpoint
from netresolver.registry.snapshot import RegistrySnapshot
from netresolver.registry.tasks import BackgroundTask

_cache: RegistryCache | None = None
_cache_lock = threading.Lock()


def get_cache() -> RegistryCache:
    global _cache
    if _cache is None:
        with _cache_lock:
            if _cache is None:
                _cache = RegistryCache()
    return _cache


def set_cache(cache: RegistryCache | None) -> RegistryCache | None:
    """Install `cache` as the default and return the previous one (None resets it)."""
    global _cache
    with _cache_lock:
        previous, _cache = _cache, cache
    return previous


def registry() -> RegistrySnapshot:
    return get_cache().snapshot()


def list_by_service(service: str) -> RegistrySnapshot:
    return registry().filter_by_service(service)


def substreams_registry() -> RegistrySnapshot:
    return list_by_service("substreams")


def firehose_registry() -> RegistrySnapshot:
    return list_by_service("firehose")


def find(key: str) -> Network | None:
    return registry().find(key)


def find_by_first_streamable_block(height: int, block_id: str) -> Network | None:
    return registry().find_by_first_streamable_block(height, block_id)


def find_by_endpoint(service: str, endpoint: str) -> Network | None:
    return registry().find_by_endpoint(service, endpoint)


def preferred_endpoint(network_or_key: Network | str, service: str) -> str | None:
    """Preferred endpoint for `service`, resolving a string key through `find` first."""
    cache = get_cache()
    network = network_or_key
    if isinstance(network, str):
        network = cache.snapshot().find(network)
    return _select_endpoint(network, service, cache.settings.preferred_endpoint_markers)


def substreams_endpoint(key: str) -> str | None:
    return preferred_endpoint(key, "substreams")


def firehose_endpoint(key: str) -> str | None:
    return preferred_endpoint(key, "firehose")


def start_scheduled_refresh(
    interval: float | timedelta,
    cancel: threading.Event | None = None,
) -> BackgroundTask:
    return get_cache().start_scheduled_refresh(interval, cancel)
