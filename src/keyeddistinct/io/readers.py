from pathlib import Path
from typing import Iterable, Iterator, Any
import json
import gzip
import sys


def iter_jsonl_lines(lines: Iterable[str]) -> Iterator[Any]:
    """Yield one JSON document per non-blank line."""
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON on line {lineno}: {exc.msg}") from exc


def iter_jsonl(path: Path) -> Iterator[Any]:
    """Yield JSON objects per line from a .jsonl (or .jsonl.gz) file."""
    path = Path(path)
    if path.suffix == ".gz":
        with gzip.open(path, "rt", encoding="utf-8") as f:
            yield from iter_jsonl_lines(f)
        return
    with path.open("r", encoding="utf-8") as f:
        yield from iter_jsonl_lines(f)


def iter_input(path: Path | None) -> Iterator[Any]:
    """Read records from ``path``, or from stdin when no path is given."""
    if path is None:
        return iter_jsonl_lines(sys.stdin)
    return iter_jsonl(path)
