from collections.abc import Mapping
from typing import Any


def get_field(record: Any, field: str) -> Any:
    """Read ``field`` from a mapping or an attribute; absent fields read as None."""
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def close_source(stream: Any) -> None:
    """Close ``stream`` when it is closable (generators, files, wrapped sources)."""
    close = getattr(stream, "close", None)
    if callable(close):
        close()


async def aclose_source(stream: Any) -> None:
    aclose = getattr(stream, "aclose", None)
    if callable(aclose):
        await aclose()
