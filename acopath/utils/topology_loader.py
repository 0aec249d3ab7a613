import json
import logging

from ..core.errors import InvalidEdge, TopologyLoadError
from ..core.topology import TopologyStore

logger = logging.getLogger(__name__)


def load_topology(filename):
    """Read a JSON topology file into a list of ``(source, destination, weight)``.

    The file holds an object with an optional ``number_of_nodes`` entry and
    one or more lists of links, each link being
    ``{"nodes": [source, destination], "length": weight}``.

    Raises:
        TopologyLoadError: if the file is missing, is not valid JSON or
            describes an invalid link
    """
    try:
        with open(filename) as f:
            data = json.load(f)
    except OSError as e:
        raise TopologyLoadError(f"Cannot read topology file {filename}: {e}") from e
    except json.JSONDecodeError as e:
        raise TopologyLoadError(f"Topology file {filename} is not valid JSON: {e}") from e

    edges = parse_topology(data)
    logger.info("Loaded %d edges from %s", len(edges), filename)
    return edges


def parse_topology(data):
    """Extract edges from an already decoded topology object."""
    if not isinstance(data, dict):
        raise TopologyLoadError("Topology must be a JSON object")

    edges = []
    for key, links in data.items():
        if key == 'number_of_nodes':
            continue
        if not isinstance(links, list):
            raise TopologyLoadError(f"Topology entry '{key}' must be a list of links")

        for index, link in enumerate(links):
            try:
                source, destination = link['nodes'][:2]
                weight = float(link['length'])
            except (KeyError, TypeError, ValueError) as e:
                raise TopologyLoadError(f"Malformed link #{index} in '{key}': {link!r}") from e
            edges.append((source, destination, weight))

    # Validate the same way the colony will before handing the edges over
    try:
        TopologyStore(edges)
    except (InvalidEdge, TypeError) as e:
        raise TopologyLoadError(f"Invalid topology: {e}") from e

    number_of_nodes = data.get('number_of_nodes')
    if number_of_nodes is not None:
        if not isinstance(number_of_nodes, int):
            raise TopologyLoadError(f"number_of_nodes must be an integer, got {number_of_nodes!r}")
        seen = {n for s, d, _ in edges for n in (s, d)}
        if len(seen) > number_of_nodes:
            logger.warning("Topology declares %s nodes but links use %d", number_of_nodes, len(seen))
    return edges


def edges_from_graph(graph, weight='weight'):
    """List the edges of a directed ``networkx`` graph with their weights.

    Raises:
        TopologyLoadError: if the graph is undirected or an edge lacks the
            weight attribute
    """
    if not graph.is_directed():
        raise TopologyLoadError("Graph must be directed")

    edges = []
    for u, v, data in graph.edges(data=True):
        if weight not in data:
            raise TopologyLoadError(f"Edge {u}->{v} has no '{weight}' attribute")
        edges.append((u, v, data[weight]))
    return edges
