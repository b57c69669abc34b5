from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Iterable, Optional


def vals(*values: Any, field: str = "val") -> list[dict]:
    return [{field: v} for v in values]


@dataclass
class Reading:
    sensor: str
    value: Optional[float] = None


class TrackingSource:
    """Iterator that records how the consumer drove it.

    Raises ``error`` once the records are exhausted, otherwise completes.
    """

    def __init__(self, records: Iterable[Any], *, error: Optional[BaseException] = None):
        self._records = list(records)
        self._error = error
        self._idx = 0
        self.pulled = 0
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        if self.closed:
            raise StopIteration
        if self._idx < len(self._records):
            record = self._records[self._idx]
            self._idx += 1
            self.pulled += 1
            return record
        if self._error is not None:
            raise self._error
        raise StopIteration

    def close(self) -> None:
        self.closed = True


class AsyncTrackingSource:
    """Async counterpart of TrackingSource; ``hang`` makes it never complete."""

    def __init__(
        self,
        records: Iterable[Any],
        *,
        error: Optional[BaseException] = None,
        hang: bool = False,
    ):
        self._records = list(records)
        self._error = error
        self._hang = hang
        self._idx = 0
        self.pulled = 0
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.closed:
            raise StopAsyncIteration
        await asyncio.sleep(0)
        if self._idx < len(self._records):
            record = self._records[self._idx]
            self._idx += 1
            self.pulled += 1
            return record
        if self._error is not None:
            raise self._error
        if self._hang:
            await asyncio.Event().wait()
        raise StopAsyncIteration

    async def aclose(self) -> None:
        self.closed = True


class CountingComparator:
    def __init__(self, fn=None):
        self.fn = fn or (lambda previous, current: previous == current)
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, previous, current) -> bool:
        self.calls.append((previous, current))
        return self.fn(previous, current)
