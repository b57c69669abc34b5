from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from keyeddistinct.config.distinct import DistinctConfig
from keyeddistinct.utils.load import load_yaml

VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class RunConfig(BaseModel):
    """Settings for one ``keyed-distinct run`` invocation."""

    distinct: DistinctConfig
    input: Optional[Path] = Field(
        default=None,
        description="JSON-lines input file. Null or '-' reads stdin.",
    )
    output: Optional[Path] = Field(
        default=None,
        description="JSON-lines output file. Null or '-' writes stdout.",
    )
    limit: Optional[int] = Field(
        default=None,
        description="Stop after emitting this many records.",
        ge=1,
    )
    log_level: Optional[str] = Field(
        default=None,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Null inherits the CLI.",
    )
    progress: bool = Field(
        default=False,
        description="Show a tqdm progress bar over consumed records.",
    )

    @field_validator("input", "output", mode="before")
    @classmethod
    def _normalize_path(cls, value):
        if value is None:
            return None
        text = str(value).strip()
        if not text or text == "-":
            return None
        return text

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        if value is None:
            return None
        name = str(value).upper()
        if name not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}, got {value!r}"
            )
        return name


def load_run_config(path: Path) -> RunConfig:
    """Load a run config; relative input/output paths resolve against the file."""
    path = Path(path)
    data = load_yaml(path)
    cfg = RunConfig.model_validate(data)
    base = path.parent
    updates = {}
    for name in ("input", "output"):
        value = getattr(cfg, name)
        if value is not None and not value.is_absolute():
            updates[name] = (base / value).resolve()
    return cfg.model_copy(update=updates) if updates else cfg
