"""Built-in comparators addressable by name from configuration files.

Each takes ``(previous, current)`` field values and returns True when they
count as equal.
"""

from typing import Any

from keyeddistinct.transforms.compare import strict_equal


def eq(previous: Any, current: Any) -> bool:
    return strict_equal(previous, current)


def identity(previous: Any, current: Any) -> bool:
    return previous is current


def casefold(previous: Any, current: Any) -> bool:
    if isinstance(previous, str) and isinstance(current, str):
        return previous.casefold() == current.casefold()
    return previous == current


def always(previous: Any, current: Any) -> bool:
    return True


def never(previous: Any, current: Any) -> bool:
    return False
