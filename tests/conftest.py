"""Shared fixtures for board generation tests."""

import pytest

from py_clickboard.core.prng import SeededRandom
from py_clickboard.core.regions import make_region, square_half_planes


@pytest.fixture
def rng():
    return SeededRandom("test_seed")


@pytest.fixture
def square_region():
    """Whole 100x100 square as a single region."""
    return make_region("mid", 0, square_half_planes(100.0), 100.0)


def pytest_addoption(parser):
    parser.addoption("--record-boards", action="store_true", default=False,
                     help="Rewrite the stored regression boards in tests/data")


@pytest.fixture
def record_boards(request):
    return request.config.getoption("--record-boards")
