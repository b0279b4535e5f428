"""Shared fixtures: the stock units database and a fresh recall cache."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def registry():
    from ucon.config.loader import load_registry
    from ucon.config.settings import PACKAGED_UNITS

    return load_registry(PACKAGED_UNITS)


@pytest.fixture
def cache():
    from ucon.state import RecallCache

    return RecallCache()


@pytest.fixture
def session(registry):
    from ucon.session import Session

    return Session(registry)


@pytest.fixture
def fixtures_dir():
    return FIXTURES
