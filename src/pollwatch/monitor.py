"""Polling loop driving a single file watcher."""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, cast

from .actions import ActionRegistry, ChangeContext
from .config import WatchConfig
from .state import Valid
from .watcher import FileWatcher, WatchFlag

logger = logging.getLogger(__name__)

WatcherFactory = Callable[..., FileWatcher]


@dataclass
class MonitorStats:
    """Counters emitted by the monitor for observability."""

    polls: int = 0
    changes: int = 0


class FileMonitor:
    """Polls one file at a fixed interval and dispatches actions on change."""

    def __init__(
        self,
        config: WatchConfig,
        actions: ActionRegistry,
        *,
        watcher_factory: WatcherFactory = FileWatcher,
    ):
        self._config = config
        self._actions = actions
        self._watcher_factory = watcher_factory
        self._stop_event = threading.Event()
        self._watcher: Optional[FileWatcher] = None
        self._stats = MonitorStats()

    @property
    def stats(self) -> MonitorStats:
        return self._stats

    @property
    def watcher(self) -> Optional[FileWatcher]:
        return self._watcher

    def start(self) -> bool:
        """Create the watcher; returns whether it could stat the file."""

        flags = WatchFlag.NONE
        if self._config.ignore_change_if_empty:
            flags |= WatchFlag.IGNORE_CHANGE_IF_EMPTY
        self._watcher = self._watcher_factory(self._config.path, flags=flags)
        return self._watcher.is_valid()

    def run(self) -> bool:
        """Run the polling loop until stopped or the file goes away.

        Returns ``False`` if the watch could not be started at all.
        """

        logger.info("Starting monitor for %s", self._config.path)
        if not self.start():
            return False
        try:
            while not self._stop_event.is_set():
                start_time = time.monotonic()
                self.poll_once()
                if not self._watcher.is_valid():
                    logger.warning("%s is gone; not watching it anymore", self._config.path)
                    break
                self._sleep_until_next_cycle(start_time)
        except KeyboardInterrupt:
            logger.info("Monitor interrupted by user")
        finally:
            logger.info(
                "Monitor stopped after %s polls, %s changes",
                self._stats.polls,
                self._stats.changes,
            )
        return True

    def poll_once(self) -> bool:
        """Run a single polling step; returns whether a change was dispatched."""

        if self._watcher is None:
            raise RuntimeError("Monitor has not been started")

        self._stats.polls += 1
        if not self._watcher.has_changed():
            return False

        state = cast(Valid, self._watcher.state)
        self._stats.changes += 1
        logger.info("Detected change in %s", self._config.path)
        self._actions.dispatch_change(
            ChangeContext(
                path=self._config.path,
                modification_time=state.last_modification_time,
                poll_count=self._stats.polls,
            )
        )
        return True

    def stop(self) -> None:
        """Signal the monitor to stop at the next opportunity."""

        self._stop_event.set()

    def _sleep_until_next_cycle(self, started_at: float) -> None:
        elapsed = time.monotonic() - started_at
        remaining = max(self._config.poll_interval - elapsed, 0.0)
        if remaining > 0:
            self._stop_event.wait(remaining)
