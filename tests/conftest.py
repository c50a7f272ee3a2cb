# tests/conftest.py
from __future__ import annotations

import random
from datetime import UTC, datetime

import pytest

from hashstamp.core.settings import Settings
from hashstamp.services.minting import Minter

GOLDEN_STAMP = "1:20:1303030600:adam@cypherspace.org::McMybZIhxKXu57jd:ckvi"
FIXED_TIME = datetime(2013, 3, 3, 6, 0, 0, tzinfo=UTC)


@pytest.fixture()
def fast_settings() -> Settings:
    """Settings whose Grammar B range admits small difficulties for quick tests."""
    return Settings(min_bits=1, max_bits=32)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1303030600)


@pytest.fixture()
def minter(fast_settings: Settings, rng: random.Random) -> Minter:
    return Minter(fast_settings, rng=rng)
