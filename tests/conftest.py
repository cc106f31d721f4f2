from __future__ import annotations

import pytest

from slotwatch.config import Settings
from slotwatch.services.cache import TTLCache


@pytest.fixture(autouse=True)
def fresh_geocode_cache(monkeypatch):
    monkeypatch.setattr("slotwatch.services.geocoding._geocode_cache", TTLCache(ttl_s=None, max_size=64))


@pytest.fixture
def settings():
    return Settings(_env_file=None)
