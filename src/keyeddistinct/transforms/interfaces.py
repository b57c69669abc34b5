from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Any


class StreamTransformBase(ABC):
    """Base interface for stream transforms over arbitrary records."""

    def __call__(self, stream: Iterable[Any]) -> Iterator[Any]:
        return self.apply(stream)

    @abstractmethod
    def apply(self, stream: Iterable[Any]) -> Iterator[Any]:
        ...


class AsyncStreamTransformBase(StreamTransformBase):
    """Stream transform that can also wrap asynchronous sources."""

    @abstractmethod
    def apply_async(self, stream: AsyncIterable[Any]) -> AsyncIterator[Any]:
        ...
