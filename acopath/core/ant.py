from typing import List

import numpy as np

from .pheromone import PheromoneManager
from .topology import Node, TopologyStore
from .transition import TransitionPolicy


class Ant:
    """A single ant walking from a start node towards a target node.

    The ant only reads the topology and the pheromone table.
    """

    def __init__(self, topology: TopologyStore, pheromones: PheromoneManager,
                 policy: TransitionPolicy, rng: np.random.Generator):
        self.topology = topology
        self.pheromones = pheromones
        self.policy = policy
        self.rng = rng

    def walk(self, start: Node, end: Node) -> List[Node]:
        """Build one randomized, cycle-free trace from ``start`` to ``end``.

        Returns:
            The visited nodes from ``start`` to ``end``, or an empty list if
            the ant ran into a dead end or a cycle.
        """
        trace = []
        visited = set()
        current = start

        while True:
            if current in visited:
                return []
            if current == end and trace:
                trace.append(current)
                return trace

            options = self.policy.transition_probabilities(self.topology, self.pheromones, current)
            if not options:
                return []

            trace.append(current)
            visited.add(current)
            current = self._choose(options)

    def _choose(self, options):
        """Roulette-wheel selection over ``(node, probability)`` pairs."""
        value = self.rng.random()
        total = 0.0
        for node, probability in options:
            total += probability
            if value <= total:
                return node
        # Rounding can leave the cumulative sum just below the drawn value
        return options[-1][0]
