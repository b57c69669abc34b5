from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Callable, Optional, Union

from keyeddistinct.transforms.utils import get_field

Comparator = Callable[[Any, Any], bool]
KeyCompareMap = Mapping[str, Comparator]
KeySpec = Union[Sequence[str], KeyCompareMap]


def strict_equal(previous: Any, current: Any) -> bool:
    """Default comparator: two field values are equal when ``==`` holds."""
    return previous == current


def _require_field_name(name: object) -> str:
    if not isinstance(name, str):
        raise TypeError(f"Field names must be strings, got {type(name).__name__}: {name!r}")
    return name


def _require_comparator(field: str, fn: object) -> Comparator:
    if not callable(fn):
        raise TypeError(f"Comparator for field {field!r} must be callable, got {fn!r}")
    return fn


def resolve_key_compare(
    keys: KeySpec,
    compare: Optional[Comparator] = None,
) -> KeyCompareMap:
    """Normalize a comparison policy into a read-only ``field -> comparator`` map.

    Accepted shapes:
    - ``["a", "b"]``: every field compared with :func:`strict_equal`
    - ``["a", "b"], fn``: every field compared with the shared ``fn``
    - ``{"a": fn_a, "b": fn_b}``: per-field comparators

    Iteration order of the result is the configured order, so the first
    comparator to run (and to raise) is deterministic.
    """
    if isinstance(keys, Mapping):
        if compare is not None:
            raise ValueError("A shared comparator cannot be combined with a key/comparator mapping")
        resolved = {
            _require_field_name(field): _require_comparator(field, fn)
            for field, fn in keys.items()
        }
        return MappingProxyType(resolved)

    if isinstance(keys, (str, bytes)) or not isinstance(keys, Sequence):
        raise TypeError(
            f"keys must be a sequence of field names or a mapping of comparators, got {keys!r}"
        )
    shared = strict_equal if compare is None else _require_comparator("*", compare)
    resolved: dict[str, Comparator] = {}
    for name in keys:
        resolved.setdefault(_require_field_name(name), shared)
    return MappingProxyType(resolved)


def records_equal(policy: KeyCompareMap, previous: Any, current: Any) -> bool:
    """Return True when every policy field compares equal; stops at the first difference."""
    for field, fn in policy.items():
        if not fn(get_field(previous, field), get_field(current, field)):
            return False
    return True
