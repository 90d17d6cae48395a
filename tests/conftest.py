"""Shared fakes: scripted asyncio stream pairs standing in for a SeedLink server."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable

import pytest

GREETING = b"SeedLink v3.1 (2020.075 RingServer) :: SLPROTO:3.1 CAP EXTREPLY NSWILDCARD\r\nGEOFON\r\n"


class FakeStreamReader:
    """Returns scripted chunks in order; once exhausted, blocks until the caller times out."""

    def __init__(self, chunks: list[Any]) -> None:
        self._chunks = list(chunks)

    async def read(self, n: int = -1) -> bytes:
        if not self._chunks:
            await asyncio.sleep(3600)
        chunk = self._chunks.pop(0)
        if isinstance(chunk, BaseException):
            raise chunk
        return chunk


class FakeStreamWriter:
    """Records written bytes and close calls."""

    def __init__(self) -> None:
        self.writes: list[bytes] = []
        self.close_count = 0

    def write(self, data: bytes) -> None:
        self.writes.append(data)

    async def drain(self) -> None:
        return None

    def close(self) -> None:
        self.close_count += 1

    async def wait_closed(self) -> None:
        return None


class FakeConnector:
    """Replacement for asyncio.open_connection serving one scripted stream pair per call."""

    def __init__(self, chunks: list[Any] | None = None, error: BaseException | None = None) -> None:
        self.reader = FakeStreamReader(chunks or [])
        self.writer = FakeStreamWriter()
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def __call__(self, host: str, port: int) -> tuple[FakeStreamReader, FakeStreamWriter]:
        self.calls.append((host, port))
        if self.error is not None:
            raise self.error
        return self.reader, self.writer


class HangingConnector(FakeConnector):
    """Connect attempt that never completes; only the caller's timeout ends it."""

    async def __call__(self, host: str, port: int) -> tuple[FakeStreamReader, FakeStreamWriter]:
        self.calls.append((host, port))
        await asyncio.sleep(3600)
        return self.reader, self.writer


@pytest.fixture
def connector_factory() -> Callable[..., FakeConnector]:
    return FakeConnector


class FixedClock:
    """Settable clock for cache freshness tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc))
