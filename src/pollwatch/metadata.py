"""Metadata providers used by the watcher to stat filesystem entries."""
from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from typing import Protocol, Union

PathLike = Union[str, "os.PathLike[str]"]

# Errors meaning the entry is gone or unreachable, as opposed to I/O failures.
_NOT_FOUND_ERRNOS = {errno.ENOENT, errno.ENOTDIR, errno.EACCES, errno.EPERM}


@dataclass(frozen=True)
class StatResult:
    """Subset of entry metadata the watcher cares about."""

    modification_time: int  # nanoseconds since the epoch
    size: int


class MetadataError(Exception):
    """Raised when metadata for a path cannot be retrieved."""

    def __init__(self, path: PathLike, description: str, *, not_found: bool = False):
        super().__init__(f"{os.fspath(path)}: {description}")
        self.path = path
        self.description = description
        self.not_found = not_found


class MetadataProvider(Protocol):
    """Anything able to report the modification time of a path."""

    def stat(self, path: PathLike) -> StatResult:
        ...


class OSMetadataProvider:
    """Queries the operating system through :func:`os.stat`."""

    def stat(self, path: PathLike) -> StatResult:
        try:
            result = os.stat(path)
        except OSError as exc:
            raise MetadataError(
                path,
                exc.strerror or str(exc),
                not_found=exc.errno in _NOT_FOUND_ERRNOS,
            ) from exc
        except ValueError as exc:
            # e.g. embedded null byte in the path
            raise MetadataError(path, str(exc)) from exc
        return StatResult(modification_time=result.st_mtime_ns, size=result.st_size)
