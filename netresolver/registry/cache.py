"""Process-wide holder of the current registry snapshot.

The first call to `snapshot()` loads the registry, preferring the live remote
registry and falling back to the embedded copy. When that fallback is used, a
repair task keeps retrying the remote registry in the background and swaps
in the result once it loads.

Reads are lock-free: replacing the snapshot is a single reference assignment,
so a reader sees either the old or the new snapshot, never a partial one. A
reader racing a replacement may get either. Capture one snapshot and query it
when several lookups must agree.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import timedelta
from enum import Enum
from functools import partial

from netresolver.config import Settings, get_settings
from netresolver.exceptions import RegistryLoadError, RegistryUnavailableError
from netresolver.models.schema import Network
from netresolver.registry.loader import RegistrySource, load_registry
from netresolver.registry.overrides import NETWORK_OVERRIDES
from netresolver.registry.snapshot import RegistrySnapshot
from netresolver.registry.sources import fetch_latest_registry, read_embedded_registry
from netresolver.registry.tasks import BackgroundTask, start_refresh_task, start_repair_task

logger = logging.getLogger(__name__)


class CacheState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class RegistryCache:
    def __init__(
        self,
        remote_source: RegistrySource | None = None,
        embedded_source: RegistrySource | None = None,
        overrides: Iterable[Network] = NETWORK_OVERRIDES,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self._remote_source = remote_source or partial(fetch_latest_registry, self.settings)
        self._embedded_source = embedded_source or partial(
            read_embedded_registry, self.settings.embedded_registry_path
        )
        self._overrides = tuple(overrides)

        self._load_lock = threading.Lock()
        self._tasks_lock = threading.Lock()
        self._state = CacheState.UNINITIALIZED
        self._snapshot: RegistrySnapshot | None = None
        self._repair_task: BackgroundTask | None = None
        self._tasks: list[BackgroundTask] = []

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def origin(self) -> str | None:
        snapshot = self._snapshot
        return snapshot.origin if snapshot is not None else None

    @property
    def repair_task(self) -> BackgroundTask | None:
        return self._repair_task

    def snapshot(self) -> RegistrySnapshot:
        """Current snapshot, loading it on first use.

        Raises RegistryUnavailableError when neither source can be loaded on
        first use. Nothing is cached in that case.
        """
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        with self._load_lock:
            if self._snapshot is None:
                self._state = CacheState.LOADING
                try:
                    self._initial_load()
                except BaseException:
                    self._state = CacheState.UNINITIALIZED
                    raise
            return self._snapshot

    def load_remote(self) -> RegistrySnapshot:
        return load_registry(self._remote_source, self._overrides, origin="remote")

    def load_embedded(self) -> RegistrySnapshot:
        return load_registry(self._embedded_source, self._overrides, origin="embedded")

    def replace(self, snapshot: RegistrySnapshot) -> None:
        self._snapshot = snapshot
        self._state = CacheState.READY
        logger.info(f"Registry snapshot replaced ({snapshot.origin}, version={snapshot.version or 'unknown'}, {len(snapshot)} networks)")

    def start_scheduled_refresh(
        self,
        interval: float | timedelta,
        cancel: threading.Event | None = None,
    ) -> BackgroundTask:
        """Reload the remote registry every `interval` until `cancel` is set."""
        task = start_refresh_task(self.load_remote, self.replace, interval, cancel)
        self._track(task)
        return task

    def close(self, timeout: float | None = None) -> None:
        """Cancel every background task started by this cache and wait for them."""
        with self._tasks_lock:
            tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            if not task.join(timeout):
                logger.warning(f"Background task {task.name} did not stop within {timeout}s")

    def _initial_load(self) -> None:
        try:
            self.replace(self.load_remote())
            return
        except RegistryLoadError as e:
            remote_error = e
            logger.warning(f"Remote registry unavailable, falling back to embedded snapshot: {e}")

        try:
            snapshot = self.load_embedded()
        except RegistryLoadError as e:
            raise RegistryUnavailableError(remote_error, e) from e

        # Install the fallback before repair starts so a fast repair is not overwritten
        self.replace(snapshot)
        self._repair_task = start_repair_task(
            self.load_remote,
            self.replace,
            initial_delay=self.settings.repair_initial_delay,
            max_delay=self.settings.repair_max_delay,
        )
        self._track(self._repair_task)

    def _track(self, task: BackgroundTask) -> None:
        with self._tasks_lock:
            self._tasks = [t for t in self._tasks if t.is_alive()]
            self._tasks.append(task)
