"""Background registry maintenance: repair after a degraded start, and periodic refresh.

Both tasks run on daemon threads and take a threading.Event as cancellation
token. They only ever hand a freshly loaded snapshot to `install`; load
failures are logged and never reach the query path.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import timedelta

from tenacity import (
    RetryError,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_when_event_set,
    wait_exponential,
)

from netresolver.exceptions import RegistryLoadError
from netresolver.registry.snapshot import RegistrySnapshot

logger = logging.getLogger(__name__)

SnapshotLoader = Callable[[], RegistrySnapshot]
SnapshotInstaller = Callable[[RegistrySnapshot], None]


class _Cancelled(Exception):
    pass


class BackgroundTask:
    """Handle on a supervised background thread and its cancellation token."""

    def __init__(
        self,
        name: str,
        target: Callable[[threading.Event], None],
        cancel: threading.Event | None = None,
    ):
        self.name = name
        self.cancel_event = cancel if cancel is not None else threading.Event()
        self._thread = threading.Thread(target=target, args=(self.cancel_event,), name=name, daemon=True)

    def start(self) -> BackgroundTask:
        self._thread.start()
        return self

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def wait_cancelled(self, timeout: float | None = None) -> bool:
        """Block until the task is cancelled or `timeout` elapses. Returns True if cancelled."""
        return self.cancel_event.wait(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the thread to exit. Returns True if it has."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def stop(self, timeout: float | None = None) -> bool:
        self.cancel()
        return self.join(timeout)

    def __repr__(self) -> str:
        return f"BackgroundTask(name={self.name!r}, alive={self.is_alive()}, cancelled={self.cancelled})"


def repair_registry(
    load: SnapshotLoader,
    install: SnapshotInstaller,
    cancel: threading.Event,
    initial_delay: float = 0.5,
    max_delay: float = 60.0,
) -> None:
    """Retry `load` with capped exponential backoff until it succeeds or `cancel` is set.

    There is no attempt limit. The delay doubles from `initial_delay` up to
    `max_delay` and the sleep between attempts wakes early on cancellation.
    """

    def attempt() -> RegistrySnapshot:
        if cancel.is_set():
            raise _Cancelled()
        return load()

    retrying = Retrying(
        retry=retry_if_exception_type(RegistryLoadError),
        wait=wait_exponential(multiplier=initial_delay, max=max_delay),
        stop=stop_when_event_set(cancel),
        sleep=cancel.wait,
        before_sleep=before_sleep_log(logger, logging.INFO),
    )

    try:
        snapshot = retrying(attempt)
    except (RetryError, _Cancelled):
        logger.debug("Stopping registry repair due to cancellation")
        return

    if cancel.is_set():
        logger.debug("Discarding repaired registry, repair was cancelled")
        return

    logger.info(f"Registry repaired from {snapshot.origin or 'source'} ({len(snapshot)} networks)")
    install(snapshot)


def refresh_registry(
    load: SnapshotLoader,
    install: SnapshotInstaller,
    cancel: threading.Event,
    interval: float,
) -> None:
    """Reload every `interval` seconds until `cancel` is set. Failed loads skip one tick."""
    while not cancel.wait(interval):
        try:
            snapshot = load()
        except RegistryLoadError as e:
            logger.info(f"Failed to load latest registry, skipping this interval update: {e}")
            continue

        if cancel.is_set():
            break
        install(snapshot)

    logger.debug("Stopping scheduled registry refresh due to cancellation")


def start_repair_task(
    load: SnapshotLoader,
    install: SnapshotInstaller,
    initial_delay: float = 0.5,
    max_delay: float = 60.0,
    cancel: threading.Event | None = None,
) -> BackgroundTask:
    def run(event: threading.Event) -> None:
        repair_registry(load, install, event, initial_delay=initial_delay, max_delay=max_delay)

    return BackgroundTask("netresolver-registry-repair", run, cancel).start()


def start_refresh_task(
    load: SnapshotLoader,
    install: SnapshotInstaller,
    interval: float | timedelta,
    cancel: threading.Event | None = None,
) -> BackgroundTask:
    if isinstance(interval, timedelta):
        interval = interval.total_seconds()
    if interval <= 0:
        raise ValueError(f"Refresh interval must be positive, got {interval}")

    def run(event: threading.Event) -> None:
        refresh_registry(load, install, event, interval)

    return BackgroundTask("netresolver-registry-refresh", run, cancel).start()
