import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Sequence

from pydantic import ValidationError
from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from keyeddistinct.config.run import RunConfig, load_run_config
from keyeddistinct.io.readers import iter_input
from keyeddistinct.io.writers import open_writer
from keyeddistinct.transforms.stream.distinct import DistinctUntilSomeChangedTransform
from keyeddistinct.transforms.stream.pipe import pipe, take
from keyeddistinct.transforms.utils import close_source

logger = logging.getLogger(__name__)

CONFIG_ERRORS = (ValidationError, ValueError, TypeError, FileNotFoundError, ImportError)


def parse_key_compare(pairs: Optional[Sequence[str]]) -> Optional[dict[str, str]]:
    """Parse repeated ``FIELD=COMPARATOR`` flags, keeping their order."""
    if not pairs:
        return None
    mapping: dict[str, str] = {}
    for pair in pairs:
        field, sep, name = pair.partition("=")
        field, name = field.strip(), name.strip()
        if not sep or not field or not name:
            raise ValueError(f"--key-compare expects FIELD=COMPARATOR, got {pair!r}")
        mapping[field] = name
    return mapping


def resolve_run_config(
    *,
    config_path: Optional[str],
    input_path: Optional[str],
    keys: Optional[Sequence[str]],
    compare: Optional[str],
    key_compare: Optional[Sequence[str]],
    out_path: Optional[str],
    limit: Optional[int],
    progress: Optional[bool],
) -> RunConfig:
    """Merge a YAML run config with CLI flags; flags win."""
    base = load_run_config(Path(config_path)) if config_path else None
    data: dict[str, Any] = base.model_dump(exclude_unset=True) if base else {}

    cli_key_compare = parse_key_compare(key_compare)
    if keys is not None or compare is not None or cli_key_compare is not None:
        distinct: dict[str, Any] = {}
        if cli_key_compare is not None:
            distinct["key_compare"] = cli_key_compare
        else:
            inherited = data.get("distinct", {})
            distinct["keys"] = list(keys) if keys is not None else inherited.get("keys")
            distinct["compare"] = compare if compare is not None else inherited.get("compare")
        data["distinct"] = distinct
    elif "distinct" not in data:
        raise ValueError("no comparison policy: pass --keys/--key-compare or --config")

    overrides = {
        "input": input_path,
        "output": out_path,
        "limit": limit,
        "progress": progress,
    }
    for name, value in overrides.items():
        if value is not None:
            data[name] = value
    return RunConfig.model_validate(data)


def _counted(stream: Iterable[Any], bar: tqdm) -> Iterator[Any]:
    source = iter(stream)
    try:
        for record in source:
            bar.update(1)
            yield record
    finally:
        close_source(source)


def run_distinct(cfg: RunConfig, transform: Optional[DistinctUntilSomeChangedTransform] = None) -> int:
    """Filter the configured input into the configured output; return the emitted count."""
    if transform is None:
        transform = cfg.distinct.build_transform()
    logger.info("Filtering %s on %s", cfg.input or "<stdin>", list(transform.fields))
    with tqdm(
        desc="records",
        unit="rec",
        disable=not cfg.progress,
        file=sys.stderr,
    ) as bar, logging_redirect_tqdm():
        stream = pipe(
            _counted(iter_input(cfg.input), bar),
            transform,
            lambda s: take(s, cfg.limit),
        )
        with open_writer(cfg.output) as writer:
            try:
                for record in stream:
                    writer.write(record)
            finally:
                close_source(stream)
            emitted = writer.count
    logger.info("Emitted %d record(s)", emitted)
    return emitted


def handle(
    *,
    config_path: Optional[str] = None,
    input_path: Optional[str] = None,
    keys: Optional[Sequence[str]] = None,
    compare: Optional[str] = None,
    key_compare: Optional[Sequence[str]] = None,
    out_path: Optional[str] = None,
    limit: Optional[int] = None,
    progress: Optional[bool] = None,
    cli_log_level: Optional[str] = None,
) -> int:
    try:
        cfg = resolve_run_config(
            config_path=config_path,
            input_path=input_path,
            keys=keys,
            compare=compare,
            key_compare=key_compare,
            out_path=out_path,
            limit=limit,
            progress=progress,
        )
        # Resolve comparator names up front so typos fail before any output.
        transform = cfg.distinct.build_transform()
    except CONFIG_ERRORS as exc:
        logger.error("Invalid run configuration: %s", exc)
        raise SystemExit(2) from exc

    if cli_log_level is None and cfg.log_level:
        logging.getLogger().setLevel(cfg.log_level)

    try:
        return run_distinct(cfg, transform)
    except Exception as exc:
        logger.error("Stream failed: %s: %s", type(exc).__name__, exc)
        raise SystemExit(2) from exc
