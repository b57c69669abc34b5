from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from keyeddistinct.transforms.stream.distinct import DistinctUntilSomeChangedTransform
from keyeddistinct.utils.load import resolve_comparator


class DistinctConfig(BaseModel):
    """Comparison policy declared in YAML.

    Either ``keys`` (optionally with a shared ``compare``) or ``key_compare``
    (field -> comparator name) must be given. Comparator names refer to the
    ``keyeddistinct.comparators`` entry points or to ``module:attr``.
    """

    keys: Optional[list[str]] = Field(
        default=None,
        description="Field names compared with the shared comparator.",
    )
    compare: Optional[str] = Field(
        default=None,
        description="Shared comparator for every key (default: eq).",
    )
    key_compare: Optional[dict[str, str]] = Field(
        default=None,
        description="Per-field comparator names.",
    )

    @field_validator("keys", mode="before")
    @classmethod
    def _normalize_keys(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("compare", mode="before")
    @classmethod
    def _normalize_compare(cls, value):
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @model_validator(mode="after")
    def _validate(self):
        if self.keys is None and self.key_compare is None:
            raise ValueError("distinct requires either 'keys' or 'key_compare'")
        if self.keys is not None and self.key_compare is not None:
            raise ValueError("'keys' and 'key_compare' are mutually exclusive")
        if self.compare is not None and self.key_compare is not None:
            raise ValueError("'compare' only applies together with 'keys'")
        return self

    def build_transform(self) -> DistinctUntilSomeChangedTransform:
        if self.key_compare is not None:
            policy = {
                field: resolve_comparator(name)
                for field, name in self.key_compare.items()
            }
            return DistinctUntilSomeChangedTransform(policy)
        shared = resolve_comparator(self.compare) if self.compare else None
        return DistinctUntilSomeChangedTransform(self.keys, shared)
