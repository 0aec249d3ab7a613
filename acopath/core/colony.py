import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .ant import Ant
from .errors import InvalidConfiguration
from .pheromone import DEFAULT_EVAPORATION_RATE, DEFAULT_PHEROMONE_QUANTITY, PheromoneManager
from .topology import Edge, EdgeSpec, Node, TopologyStore
from .transition import DEFAULT_ALPHA, DEFAULT_BETA, AntSystemPolicy, TransitionPolicy
from ..utils.topology_loader import load_topology

logger = logging.getLogger(__name__)

DEFAULT_ANTS = 250
DEFAULT_ITERATIONS = 150


@dataclass
class ColonyResult:
    best_path: List[Node]
    best_length: float
    history_best_lengths: List[float] = field(default_factory=list)
    successful_ants: List[int] = field(default_factory=list)
    elapsed_sec: float = 0.0

    @property
    def found(self) -> bool:
        return bool(self.best_path)


class AntColony:
    """Ant System search for a low-cost path between two nodes.

    Each call to :meth:`path` runs ``iterations`` rounds. In every round
    ``ants`` ants walk from the start towards the end node, then the
    pheromone table is evaporated and reinforced once with all of the
    round's traces.

    The colony owns a single ``numpy`` random generator, created once. Each
    round spawns one child generator per ant from it, so a fixed seed gives
    the same result whatever the number of worker threads, and repeated
    calls on the same colony keep drawing from the same stream.
    """

    def __init__(self, edges: Optional[Iterable[EdgeSpec]] = None, ants=0, iterations=0, *,
                 pheromone_quantity=DEFAULT_PHEROMONE_QUANTITY, evaporation_rate=DEFAULT_EVAPORATION_RATE,
                 alpha=DEFAULT_ALPHA, beta=DEFAULT_BETA, policy: Optional[TransitionPolicy] = None,
                 seed=None, rng: Optional[np.random.Generator] = None, workers=1):
        """Initialize the colony.

        Args:
            edges: Initial ``(source, destination, weight)`` triples
            ants: Ants per iteration (non-positive means DEFAULT_ANTS)
            iterations: Number of iterations (non-positive means DEFAULT_ITERATIONS)
            pheromone_quantity: Initial pheromone per edge and deposit numerator
            evaporation_rate: Fraction of pheromone lost every iteration, in (0, 1)
            alpha: Pheromone importance, ignored if ``policy`` is given
            beta: Heuristic importance, ignored if ``policy`` is given
            policy: Transition policy, defaults to AntSystemPolicy(alpha, beta)
            seed: Seed for the colony's random generator
            rng: Generator to use instead of seeding a new one
            workers: Threads used to run the ants of one iteration
        """
        if workers < 1:
            raise InvalidConfiguration(f"workers must be at least 1, got {workers}")

        if ants > 0:
            self.ants = int(ants)
        else:
            logger.debug("ants=%s is not positive, using default %d", ants, DEFAULT_ANTS)
            self.ants = DEFAULT_ANTS
        if iterations > 0:
            self.iterations = int(iterations)
        else:
            logger.debug("iterations=%s is not positive, using default %d", iterations, DEFAULT_ITERATIONS)
            self.iterations = DEFAULT_ITERATIONS

        self.workers = int(workers)
        self.policy = policy if policy is not None else AntSystemPolicy(alpha, beta)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.topology = TopologyStore(edges)
        self.pheromones = PheromoneManager(self.topology, pheromone_quantity, evaporation_rate)

        # Run state
        self.best_path: List[Node] = []
        self.best_length = math.inf
        self.history_best_lengths: List[float] = []
        self.successful_ants: List[int] = []

    @classmethod
    def from_config(cls, config, edges=None, policy=None, rng=None):
        """Build a colony from a ColonyConfig."""
        config.validate()
        return cls(
            edges,
            ants=config.get('ants'),
            iterations=config.get('iterations'),
            pheromone_quantity=config.get('pheromone_quantity'),
            evaporation_rate=config.get('evaporation_rate'),
            alpha=config.get('alpha'),
            beta=config.get('beta'),
            policy=policy,
            seed=config.get('seed'),
            rng=rng,
            workers=config.get('workers'),
        )

    @classmethod
    def from_file(cls, filename, ants=0, iterations=0, **kwargs):
        """Build a colony from a JSON topology file.

        Raises:
            TopologyLoadError: if the file cannot be read or describes invalid edges
        """
        return cls(load_topology(filename), ants, iterations, **kwargs)

    def insert_edge(self, source: Node, destination: Node, weight: float) -> Edge:
        """Add an edge and reset the pheromone on every edge.

        Raises:
            InvalidEdge: for a non-positive weight or an already connected pair
        """
        edge = self.topology.insert_edge(source, destination, weight)
        self.pheromones.reset()
        return edge

    def clear(self):
        """Remove the topology and its pheromone state."""
        self.topology.clear()
        self.best_path = []
        self.best_length = math.inf
        self.history_best_lengths = []
        self.successful_ants = []

    def path(self, start: Node, end: Node) -> List[Node]:
        """Find the best path from ``start`` to ``end``.

        Returns:
            The shortest trace any ant produced, or an empty list if no ant
            reached ``end``.
        """
        return self.solve(start, end).best_path

    def solve(self, start: Node, end: Node) -> ColonyResult:
        """Run the colony and return the best path with its run history."""
        started = time.time()
        self.best_path = []
        self.best_length = math.inf
        self.history_best_lengths = []
        self.successful_ants = []

        for iteration in range(self.iterations):
            traces = []
            lengths = []
            successes = 0

            for trace in self._run_ants(start, end):
                if len(trace) > 1 and trace[0] == start and trace[-1] == end:
                    length = self.tour_length(trace)
                    successes += 1
                    if 0 < length < self.best_length:
                        self.best_length = length
                        self.best_path = list(trace)
                        logger.info("Iteration %d: new best path %s with length %s",
                                    iteration + 1, self.best_path, length)
                else:
                    trace = []
                    length = 0.0
                traces.append(trace)
                lengths.append(length)

            self.pheromones.update_pheromones(traces, lengths)
            self.history_best_lengths.append(self.best_length)
            self.successful_ants.append(successes)
            logger.debug("Iteration %d/%d: %d/%d ants reached %s, best length %s",
                         iteration + 1, self.iterations, successes, self.ants, end, self.best_length)

        elapsed = time.time() - started
        if self.best_path:
            logger.info("Best path %s -> %s: %s (length %s) in %.3fs",
                        start, end, self.best_path, self.best_length, elapsed)
        else:
            logger.info("No path from %s to %s after %d iterations", start, end, self.iterations)

        return ColonyResult(
            best_path=list(self.best_path),
            best_length=self.best_length,
            history_best_lengths=list(self.history_best_lengths),
            successful_ants=list(self.successful_ants),
            elapsed_sec=elapsed,
        )

    def tour_length(self, trace: Sequence[Node]) -> float:
        """Sum of the weights along ``trace``; missing edges count as 0."""
        if len(trace) <= 1:
            return 0.0
        total = 0.0
        for u, v in zip(trace, trace[1:]):
            weight = self.topology.weight(u, v)
            if weight is not None:
                total += weight
        return total

    def _run_ants(self, start, end) -> List[List[Node]]:
        """Walk all ants of one iteration. Pheromones are read-only meanwhile."""
        ants = [Ant(self.topology, self.pheromones, self.policy, rng)
                for rng in self.rng.spawn(self.ants)]

        if self.workers == 1:
            return [ant.walk(start, end) for ant in ants]

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(lambda ant: ant.walk(start, end), ants))

    def __repr__(self):
        return (f"AntColony(ants={self.ants}, iterations={self.iterations}, "
                f"topology={self.topology!r}, policy={self.policy!r})")
