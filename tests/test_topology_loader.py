import json

import networkx as nx
import pytest

from acopath.core.colony import AntColony
from acopath.core.errors import InvalidEdge, TopologyLoadError
from acopath.utils.topology_loader import edges_from_graph, load_topology, parse_topology


def write(tmp_path, data, name='topology.json'):
    path = tmp_path / name
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return str(path)


def test_load_topology(tmp_path):
    """Links become (source, destination, weight) triples."""
    path = write(tmp_path, {
        'number_of_nodes': 3,
        'links': [{'nodes': [0, 1], 'length': 2}, {'nodes': [1, 2], 'length': 3}]
    })
    assert load_topology(path) == [(0, 1, 2.0), (1, 2, 3.0)]


def test_several_link_lists():
    """Every list entry besides number_of_nodes holds links."""
    edges = parse_topology({
        'core': [{'nodes': [0, 1], 'length': 1}],
        'access': [{'nodes': [1, 2], 'length': 4}]
    })
    assert edges == [(0, 1, 1.0), (1, 2, 4.0)]


def test_missing_file(tmp_path):
    """A missing file is a load error, not an empty topology."""
    with pytest.raises(TopologyLoadError):
        load_topology(str(tmp_path / 'nope.json'))


def test_invalid_json(tmp_path):
    """Broken JSON is a load error."""
    with pytest.raises(TopologyLoadError):
        load_topology(write(tmp_path, '{"links": ['))


@pytest.mark.parametrize("data", [
    [1, 2, 3],
    {'links': {'nodes': [0, 1]}},
    {'links': [{'nodes': [0], 'length': 1}]},
    {'links': [{'nodes': [0, 1]}]},
    {'links': [{'nodes': [0, 1], 'length': 'far'}]},
    {'number_of_nodes': 'two', 'links': []},
])
def test_malformed_topology(data):
    """Structural problems are load errors."""
    with pytest.raises(TopologyLoadError):
        parse_topology(data)


def test_invalid_edge_is_chained():
    """Bad weights surface as load errors caused by InvalidEdge."""
    with pytest.raises(TopologyLoadError) as excinfo:
        parse_topology({'links': [{'nodes': [0, 1], 'length': 0}]})
    assert isinstance(excinfo.value.__cause__, InvalidEdge)


def test_colony_from_file(tmp_path):
    """Colonies can be built straight from a file."""
    path = write(tmp_path, {'links': [{'nodes': [0, 1], 'length': 1}, {'nodes': [1, 2], 'length': 1}]})
    colony = AntColony.from_file(path, ants=2, iterations=2, seed=0)
    assert colony.path(0, 2) == [0, 1, 2]


def test_colony_from_missing_file(tmp_path):
    """Construction fails loudly when the topology cannot be loaded."""
    with pytest.raises(TopologyLoadError):
        AntColony.from_file(str(tmp_path / 'nope.json'))


def test_edges_from_graph():
    """Directed networkx graphs provide edges and weights."""
    G = nx.DiGraph()
    G.add_edge('a', 'b', distance=2.0)
    G.add_edge('b', 'c', distance=1.5)
    assert edges_from_graph(G, weight='distance') == [('a', 'b', 2.0), ('b', 'c', 1.5)]
    with pytest.raises(TopologyLoadError):
        edges_from_graph(G)
    with pytest.raises(TopologyLoadError):
        edges_from_graph(nx.Graph([(0, 1)]))
