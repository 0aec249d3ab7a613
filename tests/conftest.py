import matplotlib
import pytest

matplotlib.use('Agg')

CHAIN_EDGES = [(0, 1, 1), (1, 2, 1), (2, 3, 1)]
SHORTCUT_EDGES = [(0, 1, 1), (1, 3, 1), (0, 2, 5), (2, 3, 5)]


@pytest.fixture
def chain_edges():
    return list(CHAIN_EDGES)


@pytest.fixture
def shortcut_edges():
    return list(SHORTCUT_EDGES)
