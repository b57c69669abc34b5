from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, TextIO


class JsonLineFormatter:
    def __call__(self, item: Any) -> str:
        return json.dumps(item, ensure_ascii=False, default=str) + "\n"


class JsonLinesWriter:
    """Write one JSON document per record to a text stream."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.fmt = JsonLineFormatter()
        self.count = 0

    def write(self, item: Any) -> None:
        self.stream.write(self.fmt(item))
        self.count += 1

    def flush(self) -> None:
        self.stream.flush()


@contextmanager
def open_writer(path: Optional[Path]) -> Iterator[JsonLinesWriter]:
    """Yield a writer bound to ``path`` (created with parents) or to stdout."""
    if path is None:
        writer = JsonLinesWriter(sys.stdout)
        try:
            yield writer
        finally:
            writer.flush()
        return
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yield JsonLinesWriter(f)
