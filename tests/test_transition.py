import math

import pytest

from acopath.core.errors import InvalidConfiguration
from acopath.core.pheromone import PheromoneManager
from acopath.core.topology import TopologyStore
from acopath.core.transition import AntSystemPolicy, TransitionPolicy


@pytest.fixture
def state():
    store = TopologyStore([(0, 1, 1), (0, 2, 2), (1, 2, 1)])
    return store, PheromoneManager(store, pheromone_quantity=100, evaporation_rate=0.5)


def test_desirability_is_inverse_weight(state):
    """Desirability is 1/weight, 0 for a missing edge."""
    store, _ = state
    policy = AntSystemPolicy()
    assert policy.desirability(store, 0, 2) == 0.5
    assert policy.desirability(store, 2, 0) == 0.0


def test_transition_weight(state):
    """pheromone^alpha * desirability^beta."""
    store, pheromones = state
    policy = AntSystemPolicy(alpha=1, beta=2)
    assert policy.transition_weight(store, pheromones, 0, 2) == pytest.approx(100 * 0.25)
    assert policy.transition_weight(store, pheromones, 2, 0) == 0.0


def test_probabilities_are_normalized(state):
    """Probabilities follow neighbor order and sum to one."""
    store, pheromones = state
    policy = AntSystemPolicy(alpha=1, beta=1)
    options = policy.transition_probabilities(store, pheromones, 0)
    assert [n for n, _ in options] == [1, 2]
    assert options[0][1] == pytest.approx(2 / 3)
    assert options[1][1] == pytest.approx(1 / 3)


def test_default_beta_favours_short_edges(state):
    """With beta=5 the shorter edge dominates before pheromone builds up."""
    store, pheromones = state
    policy = AntSystemPolicy()
    assert policy.transition_probability(store, pheromones, 0, 1) == pytest.approx(32 / 33)


def test_dead_end(state):
    """A node without outgoing edges has no options."""
    store, pheromones = state
    policy = AntSystemPolicy()
    assert policy.transition_probabilities(store, pheromones, 2) == []
    assert policy.transition_probability(store, pheromones, 2, 0) == 0.0


def test_custom_policy(state):
    """Subclasses only provide the edge weight."""
    class Uniform(TransitionPolicy):
        def transition_weight(self, topology, pheromones, source, destination):
            return 1.0 if topology.has_edge(source, destination) else 0.0

    store, pheromones = state
    options = Uniform().transition_probabilities(store, pheromones, 0)
    assert [p for _, p in options] == [0.5, 0.5]


def test_negative_exponents_rejected():
    """Exponents must be non-negative."""
    with pytest.raises(InvalidConfiguration):
        AntSystemPolicy(alpha=-1)


@pytest.mark.parametrize("weight", [1e-70, 1e-60])
def test_tiny_weight_saturates(weight):
    """A tiny positive weight gives a huge weight instead of overflowing."""
    store = TopologyStore([(0, 1, weight), (1, 2, 1)])
    pheromones = PheromoneManager(store)
    policy = AntSystemPolicy()
    assert policy.transition_weight(store, pheromones, 0, 1) > 1e300
    assert policy.transition_probabilities(store, pheromones, 0) == [(1, 1.0)]


def test_tiny_weights_stay_comparable():
    """Neighbors too attractive for a float still get proportional probabilities."""
    store = TopologyStore([(0, 1, 1e-60), (0, 2, 2e-60)])
    pheromones = PheromoneManager(store)
    policy = AntSystemPolicy(alpha=1, beta=1)
    options = policy.transition_probabilities(store, pheromones, 0)
    assert options[0][1] == pytest.approx(2 / 3)
    assert options[1][1] == pytest.approx(1 / 3)


def test_mixed_tiny_and_regular_weights():
    """The tiny edge dominates and probabilities still sum to one."""
    store = TopologyStore([(0, 1, 1e-70), (0, 2, 1)])
    pheromones = PheromoneManager(store)
    options = AntSystemPolicy().transition_probabilities(store, pheromones, 0)
    assert options[0][1] == pytest.approx(1.0)
    assert options[1][1] == pytest.approx(0.0)
    assert sum(p for _, p in options) == pytest.approx(1.0)


def test_infinite_weights_share_probability():
    """Only neighbors with an infinite weight are chosen, uniformly."""
    class Saturating(TransitionPolicy):
        def transition_weight(self, topology, pheromones, source, destination):
            return math.inf if destination != 3 else 1.0

    store = TopologyStore([(0, 1, 1), (0, 2, 1), (0, 3, 1)])
    pheromones = PheromoneManager(store)
    options = Saturating().transition_probabilities(store, pheromones, 0)
    assert options == [(1, 0.5), (2, 0.5), (3, 0.0)]


def test_huge_pheromone_level():
    """Large deposits do not turn probabilities into NaN."""
    store = TopologyStore([(0, 1, 1e-30), (0, 2, 1e-30)])
    pheromones = PheromoneManager(store)
    pheromones.deposit([[0, 1]], [1e-300])
    options = AntSystemPolicy().transition_probabilities(store, pheromones, 0)
    assert all(not math.isnan(p) for _, p in options)
    assert options[0][1] > options[1][1]
