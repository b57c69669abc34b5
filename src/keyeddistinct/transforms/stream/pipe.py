from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Callable

from keyeddistinct.transforms.utils import close_source

StreamTransform = Callable[[Iterator[Any]], Iterator[Any]]


def pipe(stream: Iterable[Any], *transforms: StreamTransform) -> Iterator[Any]:
    """Chain stream transforms left to right.

    Each stage wraps the previous one, so closing the returned iterator
    cascades down to the original source.
    """
    out: Iterator[Any] = iter(stream)
    for transform in transforms:
        if not callable(transform):
            raise TypeError(f"Stream transform must be callable, got {transform!r}")
        out = transform(out)
    return out


def take(stream: Iterable[Any], limit: int | None) -> Iterator[Any]:
    """Yield at most ``limit`` records, then close the upstream."""
    source = iter(stream)
    if limit is None:
        yield from source
        return
    if limit < 1:
        close_source(source)
        return
    try:
        for idx, record in enumerate(source, start=1):
            yield record
            if idx >= limit:
                break
    finally:
        close_source(source)
