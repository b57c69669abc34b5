from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Any, Optional

from keyeddistinct.transforms.compare import (
    Comparator,
    KeyCompareMap,
    KeySpec,
    records_equal,
    resolve_key_compare,
)
from keyeddistinct.transforms.interfaces import AsyncStreamTransformBase
from keyeddistinct.transforms.utils import aclose_source, close_source

logger = logging.getLogger(__name__)


class DistinctState(enum.Enum):
    UNANCHORED = "unanchored"
    ANCHORED = "anchored"
    TERMINATED = "terminated"


class DistinctGate:
    """Emit/suppress decisions for one subscription.

    Holds the anchor (the last emitted record). The anchor only moves when a
    record is emitted; suppressed records leave it untouched.
    """

    __slots__ = ("_policy", "_anchor", "_state")

    def __init__(self, policy: KeyCompareMap) -> None:
        self._policy = policy
        self._anchor: Any = None
        self._state = DistinctState.UNANCHORED

    @property
    def state(self) -> DistinctState:
        return self._state

    @property
    def anchor(self) -> Any:
        return self._anchor

    def offer(self, record: Any) -> bool:
        """Return True when ``record`` must be emitted downstream."""
        if self._state is DistinctState.TERMINATED:
            raise RuntimeError("record offered to a terminated distinct gate")
        if self._state is DistinctState.UNANCHORED:
            self._anchor = record
            self._state = DistinctState.ANCHORED
            return True
        try:
            equal = records_equal(self._policy, self._anchor, record)
        except Exception:
            self.terminate()
            raise
        if equal:
            return False
        self._anchor = record
        return True

    def terminate(self) -> None:
        self._anchor = None
        self._state = DistinctState.TERMINATED


class DistinctUntilSomeChangedTransform(AsyncStreamTransformBase):
    """Drop records equal to the last emitted one on every configured field.

    ``keys`` is either a list of field names (compared with ``==`` or with the
    shared ``compare`` function) or a mapping of field name to comparator.
    A comparator returns True when the two field values count as equal.

    Every ``apply``/``apply_async`` call is an independent subscription with
    its own anchor. Source errors and comparator errors propagate unchanged;
    closing the returned generator closes the source.
    """

    def __init__(self, keys: KeySpec, compare: Optional[Comparator] = None) -> None:
        self.policy = resolve_key_compare(keys, compare)

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self.policy)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fields={list(self.policy)!r})"

    def apply(self, stream: Iterable[Any]) -> Iterator[Any]:
        gate = DistinctGate(self.policy)
        source = iter(stream)
        outcome = "completed"
        try:
            for record in source:
                if gate.offer(record):
                    yield record
        except GeneratorExit:
            outcome = "cancelled"
            close_source(source)
            raise
        except Exception:
            outcome = "error"
            close_source(source)
            raise
        finally:
            gate.terminate()
            logger.debug("Distinct subscription on %s %s", self.fields, outcome)

    async def apply_async(self, stream: AsyncIterable[Any]) -> AsyncIterator[Any]:
        gate = DistinctGate(self.policy)
        source = aiter(stream)
        outcome = "completed"
        try:
            async for record in source:
                if gate.offer(record):
                    yield record
        except (GeneratorExit, asyncio.CancelledError):
            outcome = "cancelled"
            await aclose_source(source)
            raise
        except Exception:
            outcome = "error"
            await aclose_source(source)
            raise
        finally:
            gate.terminate()
            logger.debug("Distinct subscription on %s %s", self.fields, outcome)


def distinct_until_some_changed(
    keys: KeySpec,
    compare: Optional[Comparator] = None,
) -> DistinctUntilSomeChangedTransform:
    """Build a keyed-distinct transform; call it with a stream to subscribe."""
    return DistinctUntilSomeChangedTransform(keys, compare)


def distinct_until_key_changed(
    key: str,
    compare: Optional[Comparator] = None,
) -> DistinctUntilSomeChangedTransform:
    if not isinstance(key, str):
        raise TypeError(f"key must be a field name, got {key!r}")
    return DistinctUntilSomeChangedTransform([key], compare)
