import itertools
import logging
import math
from dataclasses import dataclass, field
from typing import Hashable, Iterable, List, Optional, Tuple

import networkx as nx

from .errors import InvalidEdge

logger = logging.getLogger(__name__)

Node = Hashable
EdgeSpec = Tuple[Node, Node, float]


@dataclass(frozen=True, order=True)
class Edge:
    """A directed weighted edge.

    Equality, ordering and hashing only look at ``id``, which is assigned
    by the store at insertion time.
    """
    id: int
    source: Node = field(compare=False)
    destination: Node = field(compare=False)
    weight: float = field(compare=False)


class TopologyStore:
    """Directed weighted topology backed by a ``networkx.DiGraph``.

    Every graph edge carries an ``edge`` attribute holding its :class:`Edge`
    and, once a pheromone manager is attached, a ``pheromone`` attribute.
    At most one edge exists per ordered node pair.
    """

    def __init__(self, edges: Optional[Iterable[EdgeSpec]] = None):
        self.graph = nx.DiGraph()
        self._ids = itertools.count(1)
        if edges:
            for source, destination, weight in edges:
                self.insert_edge(source, destination, weight)

    def insert_edge(self, source: Node, destination: Node, weight: float) -> Edge:
        """Append an edge and return it.

        Raises:
            InvalidEdge: if the weight is not a positive finite number or the
                ordered pair already has an edge.
        """
        try:
            weight = float(weight)
        except (TypeError, ValueError) as e:
            raise InvalidEdge(f"Edge {source}->{destination}: weight {weight!r} is not a number") from e
        if not math.isfinite(weight) or weight <= 0:
            raise InvalidEdge(f"Edge {source}->{destination}: weight must be positive, got {weight}")
        if self.graph.has_edge(source, destination):
            raise InvalidEdge(f"Edge {source}->{destination} already exists")

        edge = Edge(next(self._ids), source, destination, weight)
        self.graph.add_edge(source, destination, edge=edge)
        logger.debug("Inserted edge %s", edge)
        return edge

    def neighbors(self, node: Node) -> List[Node]:
        """Destinations of the outgoing edges of ``node``, in insertion order."""
        if node not in self.graph:
            return []
        return list(self.graph.successors(node))

    def edge(self, source: Node, destination: Node) -> Optional[Edge]:
        data = self.graph.get_edge_data(source, destination)
        return data['edge'] if data is not None else None

    def has_edge(self, source: Node, destination: Node) -> bool:
        return self.graph.has_edge(source, destination)

    def weight(self, source: Node, destination: Node) -> Optional[float]:
        edge = self.edge(source, destination)
        return edge.weight if edge is not None else None

    def edges(self) -> List[Edge]:
        """All edges sorted by insertion order."""
        return sorted(data for _, _, data in self.graph.edges(data='edge'))

    def nodes(self) -> List[Node]:
        return list(self.graph.nodes())

    def clear(self):
        """Remove every edge and node. Edge ids keep increasing afterwards."""
        self.graph.clear()

    def __len__(self):
        return self.graph.number_of_edges()

    def __contains__(self, node):
        return node in self.graph

    def __repr__(self):
        return f"TopologyStore(nodes={self.graph.number_of_nodes()}, edges={len(self)})"
