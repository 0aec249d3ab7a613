import logging
import os
import sys

import networkx as nx

# Add parent directory to path so we can import the acopath package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from acopath.core.colony import AntColony
from acopath.simulation.simulator import ColonySimulator
from acopath.utils.path_analyzer import PathAnalyzer
from acopath.utils.topology_loader import edges_from_graph, load_topology
from acopath.visualization.network_viz import NetworkVisualizer

HERE = os.path.dirname(os.path.abspath(__file__))


def random_topology(num_nodes=15, connectivity=0.3, seed=42):
    """Random directed graph with weights in [1, 10]."""
    G = nx.gnp_random_graph(num_nodes, connectivity, seed=seed, directed=True)
    rng = nx.utils.create_py_random_state(seed)
    for u, v in G.edges():
        G[u][v]['weight'] = rng.uniform(1, 10)
    return G


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # Small topology from the bundled file
    colony = AntColony(load_topology(os.path.join(HERE, 'topology.json')), ants=30, iterations=10, seed=1)
    path = colony.path(0, 5)
    print(f"Best path from 0 to 5: {path} (length {colony.best_length})")

    visualizer = NetworkVisualizer(colony)
    visualizer.visualize_network(0, 5, [path]).savefig('acopath_topology.png')
    visualizer.visualize_convergence().savefig('acopath_convergence.png')

    # Larger random topology, compared against Dijkstra
    colony = AntColony(edges_from_graph(random_topology()), ants=50, iterations=30, seed=7)
    analysis = PathAnalyzer(colony).analyze_path(0, 9, output_dir='./analysis')
    print(f"Ant colony: {analysis['aco_path']} ({analysis['aco_length']:.2f})")
    print(f"Dijkstra:   {analysis['dijkstra_path']} ({analysis['dijkstra_length']:.2f})")

    simulator = ColonySimulator(colony, seed=3)
    print(simulator.run_simulation(num_queries=10))
    print(simulator.summary())


if __name__ == "__main__":
    main()
