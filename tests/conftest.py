from __future__ import annotations

import pytest

from keyeddistinct.plugins import COMPARATORS_EP
from keyeddistinct.utils import load as kd_load

# Test-only entrypoint overrides for fixture comparators.
kd_load._EP_OVERRIDES.update({
    (COMPARATORS_EP, "even_current"): "tests.comparators:even_current",
})


@pytest.fixture(autouse=True)
def _fresh_entry_point_cache():
    kd_load.load_ep.cache_clear()
    yield
    kd_load.load_ep.cache_clear()
