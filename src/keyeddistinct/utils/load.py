import importlib
import importlib.metadata as md
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable

import yaml

from keyeddistinct.plugins import COMPARATORS_EP


_BUILTIN_EP_FALLBACKS: dict[tuple[str, str], str] = {
    (COMPARATORS_EP, "eq"): "keyeddistinct.comparators:eq",
    (COMPARATORS_EP, "identity"): "keyeddistinct.comparators:identity",
    (COMPARATORS_EP, "casefold"): "keyeddistinct.comparators:casefold",
    (COMPARATORS_EP, "always"): "keyeddistinct.comparators:always",
    (COMPARATORS_EP, "never"): "keyeddistinct.comparators:never",
}

# Consulted before installed entry points; tests register fixtures here.
_EP_OVERRIDES: dict[tuple[str, str], str] = {}


def load_ref(spec: str):
    """Import ``"package.module:attr"`` and return the attribute."""
    module_name, _, attr = spec.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Invalid reference {spec!r}; expected 'module:attr'")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ImportError(f"Attribute {attr!r} not found in {module_name!r}") from exc


@lru_cache
def load_ep(group: str, name: str):
    key = (group, name)
    override = _EP_OVERRIDES.get(key)
    if override:
        return load_ref(override)
    eps = md.entry_points().select(group=group, name=name)
    if not eps:
        # Fallback to built-in registry to support running from a source checkout
        # without requiring the package to be installed.
        spec = _BUILTIN_EP_FALLBACKS.get(key)
        if spec:
            return load_ref(spec)
        available_eps = md.entry_points().select(group=group)
        available_fallbacks = [n for (g, n), _ in _BUILTIN_EP_FALLBACKS.items() if g == group]
        available = ", ".join(sorted({ep.name for ep in available_eps} | set(available_fallbacks)))
        raise ValueError(
            f"No entry point '{name}' in '{group}'. Available: {available or '(none)'}")
    # A package installed in editable mode can register the same value twice.
    values = {getattr(ep, "value", repr(ep)) for ep in eps}
    if len(values) > 1:
        mods = ", ".join(sorted(values))
        raise ValueError(
            f"Ambiguous entry point '{name}' in '{group}': {mods}")
    # EntryPoints in newer Python versions are mapping-like; avoid integer indexing
    ep = next(iter(eps))
    return ep.load()


def resolve_comparator(ref: Any) -> Callable[[Any, Any], bool]:
    """Turn a callable, a registered comparator name or ``"module:attr"`` into a comparator."""
    if callable(ref):
        return ref
    if not isinstance(ref, str) or not ref.strip():
        raise TypeError(f"Comparator reference must be a callable or a name, got {ref!r}")
    ref = ref.strip()
    fn = load_ref(ref) if ":" in ref else load_ep(COMPARATORS_EP, ref)
    if not callable(fn):
        raise TypeError(f"Comparator {ref!r} resolved to a non-callable {fn!r}")
    return fn


def load_yaml(p: Path, *, require_mapping: bool = True):
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"YAML file not found: {p}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {p}: {e}") from e

    if data is None:
        return {}
    if require_mapping and not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML in {p} must be a mapping, got {type(data).__name__}")
    return data
