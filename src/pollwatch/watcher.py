"""Polling file watcher based on modification timestamps."""
from __future__ import annotations

import logging
import os
from enum import Flag
from typing import Callable, Optional

from .metadata import MetadataError, MetadataProvider, OSMetadataProvider, PathLike
from .state import INVALID, Valid, WatchState

logger = logging.getLogger(__name__)

COMPONENT_NAME = "pollwatch.FileWatcher"

DiagnosticSink = Callable[[str], None]


class WatchFlag(Flag):
    """Behavior tweaks for :class:`FileWatcher`."""

    NONE = 0
    # Editors often truncate before writing; don't report the empty intermediate.
    IGNORE_CHANGE_IF_EMPTY = 1


def log_diagnostic(message: str) -> None:
    """Default diagnostic sink, forwarding to the module logger."""

    logger.error("%s", message)


class FileWatcher:
    """Reports whether a single filesystem entry changed since the last check.

    The watcher stats ``path`` once on construction and again on every
    :meth:`has_changed` call. A change is reported only when the modification
    time strictly advances. Once the entry can no longer be stat'ed the
    watcher becomes invalid for good; create a new instance to watch again.

    A failed construction emits one line through ``sink``. Disappearance of
    the entry later on is treated as a normal event and emits nothing.

    Not thread-safe; serialize calls externally if the instance is shared.
    """

    def __init__(
        self,
        path: PathLike,
        *,
        provider: Optional[MetadataProvider] = None,
        sink: Optional[DiagnosticSink] = None,
        flags: WatchFlag = WatchFlag.NONE,
    ):
        self._path = path
        self._provider = provider or OSMetadataProvider()
        self._flags = flags
        self._state: WatchState

        try:
            result = self._provider.stat(path)
        except MetadataError as exc:
            self._state = INVALID
            (sink or log_diagnostic)(
                f"{COMPONENT_NAME}: can't stat {os.fspath(path)}: {exc.description}, aborting watch"
            )
            return

        self._state = Valid(last_modification_time=result.modification_time)
        logger.debug("Watching %s (mtime=%s)", os.fspath(path), result.modification_time)

    @property
    def path(self) -> PathLike:
        return self._path

    @property
    def flags(self) -> WatchFlag:
        return self._flags

    @property
    def state(self) -> WatchState:
        """Current state; :class:`Valid` carries the last observed mtime."""

        return self._state

    def is_valid(self) -> bool:
        return isinstance(self._state, Valid)

    def has_changed(self) -> bool:
        """Return ``True`` if the entry's mtime advanced since the last call.

        Each advance is reported once. Returns ``False`` without any I/O when
        the watcher is invalid, and invalidates it when the entry is gone.
        """

        state = self._state
        if not isinstance(state, Valid):
            return False

        try:
            result = self._provider.stat(self._path)
        except MetadataError as exc:
            logger.debug("Lost %s (%s); watch invalidated", os.fspath(self._path), exc.description)
            self._state = INVALID
            return False

        if result.modification_time <= state.last_modification_time:
            return False

        if WatchFlag.IGNORE_CHANGE_IF_EMPTY in self._flags and result.size == 0:
            # Keep the old mtime so the finished write is still reported.
            logger.debug("Ignoring change of %s while it is empty", os.fspath(self._path))
            return False

        self._state = Valid(last_modification_time=result.modification_time)
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={os.fspath(self._path)!r}, state={self._state!r})"
