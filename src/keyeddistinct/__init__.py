from .transforms.compare import (
    Comparator,
    KeyCompareMap,
    records_equal,
    resolve_key_compare,
    strict_equal,
)
from .transforms.stream.distinct import (
    DistinctGate,
    DistinctState,
    DistinctUntilSomeChangedTransform,
    distinct_until_key_changed,
    distinct_until_some_changed,
)
from .transforms.stream.pipe import pipe, take

__all__ = [
    "Comparator",
    "DistinctGate",
    "DistinctState",
    "DistinctUntilSomeChangedTransform",
    "KeyCompareMap",
    "distinct_until_key_changed",
    "distinct_until_some_changed",
    "pipe",
    "records_equal",
    "resolve_key_compare",
    "strict_equal",
    "take",
]
