import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from keyeddistinct import comparators
from keyeddistinct.config.distinct import DistinctConfig
from keyeddistinct.config.run import RunConfig, load_run_config
from keyeddistinct.transforms.compare import strict_equal
from tests.comparators import even_current


def _write_run(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "distinct.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_keys_config_builds_strict_equality_transform():
    cfg = DistinctConfig.model_validate({"keys": ["val", "valOther"]})
    transform = cfg.build_transform()
    assert transform.fields == ("val", "valOther")
    assert all(fn is strict_equal for fn in transform.policy.values())


def test_keys_accept_comma_separated_string():
    cfg = DistinctConfig.model_validate({"keys": "val, valOther"})
    assert cfg.keys == ["val", "valOther"]


def test_shared_comparator_by_name():
    cfg = DistinctConfig.model_validate({"keys": ["val"], "compare": "even_current"})
    transform = cfg.build_transform()
    assert transform.policy["val"] is even_current
    assert list(transform(iter([{"val": v} for v in (1, 2, 3, 4, 5)]))) == [
        {"val": 1},
        {"val": 3},
        {"val": 5},
    ]


def test_key_compare_config_keeps_field_order():
    cfg = DistinctConfig.model_validate(
        {"key_compare": {"name": "casefold", "id": "tests.comparators:even_current"}}
    )
    transform = cfg.build_transform()
    assert list(transform.policy.items()) == [
        ("name", comparators.casefold),
        ("id", even_current),
    ]


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"keys": ["val"], "key_compare": {"val": "eq"}},
        {"key_compare": {"val": "eq"}, "compare": "eq"},
    ],
)
def test_distinct_config_rejects_ambiguous_policies(payload):
    with pytest.raises(ValidationError):
        DistinctConfig.model_validate(payload)


def test_unknown_comparator_fails_when_building():
    cfg = DistinctConfig.model_validate({"keys": ["val"], "compare": "fuzzy"})
    with pytest.raises(ValueError, match="fuzzy"):
        cfg.build_transform()


def test_run_config_defaults():
    cfg = RunConfig.model_validate({"distinct": {"keys": ["val"]}})
    assert cfg.input is None
    assert cfg.output is None
    assert cfg.limit is None
    assert cfg.log_level is None
    assert cfg.progress is False


def test_run_config_normalizes_stdio_and_level():
    cfg = RunConfig.model_validate(
        {"distinct": {"keys": ["val"]}, "input": "-", "output": " ", "log_level": "debug"}
    )
    assert cfg.input is None
    assert cfg.output is None
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize("payload", [{"limit": 0}, {"log_level": "chatty"}])
def test_run_config_rejects_invalid_values(payload):
    with pytest.raises(ValidationError):
        RunConfig.model_validate({"distinct": {"keys": ["val"]}, **payload})


def test_load_run_config_resolves_paths_relative_to_file(tmp_path):
    path = _write_run(
        tmp_path,
        """
        distinct:
          keys: [val]
        input: data/events.jsonl
        output: out/distinct.jsonl
        limit: 10
        """,
    )
    cfg = load_run_config(path)
    assert cfg.input == (tmp_path / "data" / "events.jsonl").resolve()
    assert cfg.output == (tmp_path / "out" / "distinct.jsonl").resolve()
    assert cfg.limit == 10
    assert "input" in cfg.model_fields_set


def test_load_run_config_requires_policy(tmp_path):
    path = _write_run(tmp_path, "limit: 3\n")
    with pytest.raises(ValidationError):
        load_run_config(path)
