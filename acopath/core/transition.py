import math
from abc import ABC, abstractmethod
from typing import List, Tuple

import numpy as np

from .errors import InvalidConfiguration
from .pheromone import PheromoneManager
from .topology import Node, TopologyStore

DEFAULT_ALPHA = 1.0
DEFAULT_BETA = 5.0


def _log_power(base, exponent):
    """``log(base ** exponent)`` without overflowing; ``0 ** 0`` is 1."""
    if exponent == 0:
        return 0.0
    if base <= 0:
        return -math.inf
    return exponent * math.log(base)


class TransitionPolicy(ABC):
    """Turns edge state into next-node selection probabilities.

    Subclasses only decide how attractive a single edge is; normalization
    over the neighbors of a node is shared. Normalization works on
    logarithms of the weights, so weights too large or too small for a float
    still give usable probabilities.
    """

    def pheromone_level(self, pheromones: PheromoneManager, source: Node, destination: Node) -> float:
        return pheromones.level(source, destination)

    def desirability(self, topology: TopologyStore, source: Node, destination: Node) -> float:
        """Static attractiveness of an edge, inverse to its weight (0 if absent)."""
        weight = topology.weight(source, destination)
        return 1.0 / weight if weight is not None else 0.0

    @abstractmethod
    def transition_weight(self, topology: TopologyStore, pheromones: PheromoneManager,
                          source: Node, destination: Node) -> float:
        """Unnormalized attractiveness of moving from ``source`` to ``destination``."""

    def log_transition_weight(self, topology: TopologyStore, pheromones: PheromoneManager,
                              source: Node, destination: Node) -> float:
        """Natural log of :meth:`transition_weight`, ``-inf`` for a zero weight."""
        weight = self.transition_weight(topology, pheromones, source, destination)
        if math.isnan(weight) or weight <= 0:
            return -math.inf
        return math.log(weight)

    def transition_probabilities(self, topology: TopologyStore, pheromones: PheromoneManager,
                                 source: Node) -> List[Tuple[Node, float]]:
        """Selection probability of every neighbor of ``source``.

        Neighbors keep the topology's enumeration order. An empty list means
        ``source`` is a dead end: it has no neighbors or all of their weights
        vanish. Neighbors with an infinite weight share the whole probability.
        """
        neighbors = topology.neighbors(source)
        if not neighbors:
            return []
        logs = np.array([self.log_transition_weight(topology, pheromones, source, n) for n in neighbors],
                        dtype=float)
        logs[np.isnan(logs)] = -np.inf
        top = logs.max()
        if top == -np.inf:
            return []
        if top == np.inf:
            weights = (logs == np.inf).astype(float)
        else:
            weights = np.exp(logs - top)
        probabilities = weights / weights.sum()
        return [(n, float(p)) for n, p in zip(neighbors, probabilities)]

    def transition_probability(self, topology: TopologyStore, pheromones: PheromoneManager,
                               source: Node, destination: Node) -> float:
        for neighbor, probability in self.transition_probabilities(topology, pheromones, source):
            if neighbor == destination:
                return probability
        return 0.0


class AntSystemPolicy(TransitionPolicy):
    """Ant System transition rule: ``pheromone^alpha * (1/weight)^beta``."""

    def __init__(self, alpha=DEFAULT_ALPHA, beta=DEFAULT_BETA):
        if alpha < 0 or beta < 0:
            raise InvalidConfiguration(f"alpha and beta must be non-negative, got alpha={alpha}, beta={beta}")
        self.alpha = float(alpha)  # Pheromone importance
        self.beta = float(beta)    # Heuristic importance

    def log_transition_weight(self, topology, pheromones, source, destination):
        weight = topology.weight(source, destination)
        if weight is None:
            return -math.inf
        pheromone = self.pheromone_level(pheromones, source, destination)
        return _log_power(pheromone, self.alpha) - _log_power(weight, self.beta)

    def transition_weight(self, topology, pheromones, source, destination):
        """Saturates to ``inf`` instead of raising OverflowError."""
        log_weight = self.log_transition_weight(topology, pheromones, source, destination)
        with np.errstate(over='ignore'):
            return float(np.exp(log_weight))

    def __repr__(self):
        return f"AntSystemPolicy(alpha={self.alpha}, beta={self.beta})"
