import logging
from typing import Dict, Sequence

from .errors import InvalidConfiguration
from .topology import Edge, Node, TopologyStore

logger = logging.getLogger(__name__)

DEFAULT_PHEROMONE_QUANTITY = 100.0
DEFAULT_EVAPORATION_RATE = 0.5


class PheromoneManager:
    """Manages pheromone levels on the edges of a topology.

    Levels live in the ``pheromone`` attribute of each graph edge, so a
    lookup by ordered node pair is a dict access.
    """

    def __init__(self, topology: TopologyStore, pheromone_quantity=DEFAULT_PHEROMONE_QUANTITY,
                 evaporation_rate=DEFAULT_EVAPORATION_RATE):
        if pheromone_quantity <= 0:
            raise InvalidConfiguration(f"pheromone_quantity must be positive, got {pheromone_quantity}")
        if not 0 < evaporation_rate < 1:
            raise InvalidConfiguration(f"evaporation_rate must lie in (0, 1), got {evaporation_rate}")

        self.topology = topology
        self.graph = topology.graph
        self.pheromone_quantity = float(pheromone_quantity)
        self.evaporation_rate = float(evaporation_rate)
        self.reset()

    def reset(self):
        """Set every edge back to the initial pheromone quantity."""
        for u, v in self.graph.edges():
            self.graph[u][v]['pheromone'] = self.pheromone_quantity
        logger.debug("Reset pheromone on %d edges to %s", self.graph.number_of_edges(), self.pheromone_quantity)

    def level(self, source: Node, destination: Node) -> float:
        """Current pheromone on ``source -> destination``, 0 if there is no such edge."""
        data = self.graph.get_edge_data(source, destination)
        if data is None:
            return 0.0
        return data.get('pheromone', self.pheromone_quantity)

    def levels(self) -> Dict[Edge, float]:
        """Snapshot of the pheromone table keyed by edge."""
        return {data['edge']: data.get('pheromone', self.pheromone_quantity)
                for _, _, data in self.graph.edges(data=True)}

    def diff_pheromone(self, length: float) -> float:
        """Pheromone deposited by one ant whose tour has the given length."""
        return self.pheromone_quantity / length

    def update_pheromones(self, traces: Sequence[Sequence[Node]], lengths: Sequence[float]):
        """
        Apply one round's global update: evaporate everywhere, then reinforce.

        Args:
            traces: One trace per ant; failed ants have an empty trace
            lengths: Tour length of each trace, 0 for failed ants
        """
        self.evaporate()
        self.deposit(traces, lengths)

    def evaporate(self):
        """Evaporate pheromone on all edges."""
        factor = 1 - self.evaporation_rate
        for u, v in self.graph.edges():
            self.graph[u][v]['pheromone'] = self.level(u, v) * factor

    def deposit(self, traces: Sequence[Sequence[Node]], lengths: Sequence[float]):
        """Deposit pheromone along every successful trace."""
        for trace, length in zip(traces, lengths):
            # Failed ants contribute nothing
            if len(trace) <= 1 or length <= 0:
                continue

            amount = self.diff_pheromone(length)
            for u, v in zip(trace, trace[1:]):
                if self.graph.has_edge(u, v):
                    self.graph[u][v]['pheromone'] = self.level(u, v) + amount
