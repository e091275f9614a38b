"""Shared fixtures for pollwatch tests."""
from __future__ import annotations

import os
import sys
import time
from pathlib import Path
from typing import Callable, Dict, Iterator, Union

import pytest

from pollwatch.metadata import MetadataError, StatResult

# Linux filesystems tick in milliseconds; HFS+ and Windows report whole seconds.
_DEFAULT_DELTA = 1.1 if sys.platform in ("darwin", "win32") else 0.02


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--mtime-delta",
        type=float,
        default=None,
        help="Smallest delay (seconds) that reliably advances a file's mtime",
    )


@pytest.fixture(scope="session")
def mtime_delta(pytestconfig: pytest.Config) -> float:
    value = pytestconfig.getoption("--mtime-delta")
    if value is None:
        value = float(os.environ.get("POLLWATCH_MTIME_DELTA", _DEFAULT_DELTA))
    return value


@pytest.fixture()
def write_later(mtime_delta: float) -> Callable[[Path, str], None]:
    """Write *content* to *path* after waiting long enough for a new mtime."""

    def write(path: Path, content: str) -> None:
        time.sleep(mtime_delta)
        path.write_text(content, encoding="utf-8")

    return write


@pytest.fixture()
def watched_file(tmp_path: Path) -> Iterator[Path]:
    path = tmp_path / "file.txt"
    path.write_text("hello", encoding="utf-8")
    yield path
    path.unlink(missing_ok=True)


class FakeProvider:
    """In-memory metadata provider with explicit clock control."""

    def __init__(self) -> None:
        self.entries: Dict[str, StatResult] = {}
        self.calls = 0

    def set(self, path: str, modification_time: int, size: int = 5) -> None:
        self.entries[path] = StatResult(modification_time=modification_time, size=size)

    def remove(self, path: str) -> None:
        del self.entries[path]

    def stat(self, path: Union[str, "os.PathLike[str]"]) -> StatResult:
        self.calls += 1
        key = os.fspath(path)
        try:
            return self.entries[key]
        except KeyError:
            raise MetadataError(path, "No such file or directory", not_found=True) from None


@pytest.fixture()
def fake_provider() -> FakeProvider:
    return FakeProvider()
