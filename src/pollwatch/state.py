"""Watch states shared by the watcher and its callers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class _InvalidType(str, Enum):
    """Terminal state of a watcher that no longer tracks an entry."""

    INVALID = "invalid"

    def __repr__(self) -> str:
        return "INVALID"


INVALID = _InvalidType.INVALID


@dataclass(frozen=True)
class Valid:
    """A watcher tracking a real entry, with the last mtime it observed."""

    last_modification_time: int


WatchState = Union[Valid, _InvalidType]
